"""Leaf transforms: axis rotations, scale, translation and raw matrices.

Each primitive stores only its scalar parameters. Its inverse is another
primitive of the same kind with negated or reciprocal parameters, so
``apply_inverse`` never inverts a matrix numerically. ``MatrixTransform`` is
the one exception: it wraps an arbitrary 4x4 matrix and falls back to
``jnp.linalg.inv``.
"""

from __future__ import annotations

from typing import Union

import jax
import jax.numpy as jnp
from flax import struct

from . import affine, so3
from .base import NonInvertibleTransformError, TransformBase

Array = jax.Array
Scalar = Union[float, Array]


def _is_concrete_true(condition: Array) -> bool:
    """Evaluate ``condition`` eagerly; traced values count as False.

    Under ``jax.jit`` parameters are abstract, so degenerate inputs cannot be
    detected and IEEE arithmetic (inf / NaN) takes over.
    """
    try:
        return bool(condition)
    except jax.errors.ConcretizationTypeError:
        return False


class _Primitive(TransformBase):
    """Leaf transforms apply by post-multiplying their own matrix."""

    def to_matrix(self) -> Array:
        raise NotImplementedError

    def inverse(self) -> "_Primitive":
        raise NotImplementedError

    def apply(self, m: Array) -> Array:
        return affine.multiply(m, self.to_matrix())

    def apply_inverse(self, m: Array) -> Array:
        return self.inverse().apply(m)


# Axis rotations
@struct.dataclass
class RotationX(_Primitive):
    """Rotation by ``angle`` radians about the X axis."""
    angle: Scalar

    def to_matrix(self) -> Array:
        return affine.from_linear_and_translation(so3.rot_x(self.angle), jnp.zeros(3))

    def inverse(self) -> "RotationX":
        return RotationX(-self.angle)


@struct.dataclass
class RotationY(_Primitive):
    """Rotation by ``angle`` radians about the Y axis."""
    angle: Scalar

    def to_matrix(self) -> Array:
        return affine.from_linear_and_translation(so3.rot_y(self.angle), jnp.zeros(3))

    def inverse(self) -> "RotationY":
        return RotationY(-self.angle)


@struct.dataclass
class RotationZ(_Primitive):
    """Rotation by ``angle`` radians about the Z axis."""
    angle: Scalar

    def to_matrix(self) -> Array:
        return affine.from_linear_and_translation(so3.rot_z(self.angle), jnp.zeros(3))

    def inverse(self) -> "RotationZ":
        return RotationZ(-self.angle)


@struct.dataclass
class Scale(_Primitive):
    """Non-uniform scale along the coordinate axes.

    A zero factor has no inverse: ``inverse`` and ``apply_inverse`` raise
    ``NonInvertibleTransformError`` when the factors are concrete.
    """
    x: Scalar
    y: Scalar
    z: Scalar

    @property
    def factors(self) -> Array:
        return jnp.asarray([self.x, self.y, self.z], dtype=float)

    def to_matrix(self) -> Array:
        return affine.from_linear_and_translation(jnp.diag(self.factors), jnp.zeros(3))

    def inverse(self) -> "Scale":
        if _is_concrete_true(jnp.any(self.factors == 0.0)):
            raise NonInvertibleTransformError(
                f"scale ({self.x}, {self.y}, {self.z}) has a zero factor and no inverse"
            )
        return Scale(1.0 / self.x, 1.0 / self.y, 1.0 / self.z)


@struct.dataclass
class Translation(_Primitive):
    """Translation by ``(x, y, z)``."""
    x: Scalar
    y: Scalar
    z: Scalar

    def to_matrix(self) -> Array:
        t = jnp.asarray([self.x, self.y, self.z], dtype=float)
        return affine.from_linear_and_translation(jnp.eye(3), t)

    def inverse(self) -> "Translation":
        return Translation(-self.x, -self.y, -self.z)


@struct.dataclass
class MatrixTransform(_Primitive):
    """An explicit 4x4 matrix used as a transform leaf.

    Unlike the other primitives its inverse is computed numerically, so it is
    only as exact as ``jnp.linalg.inv``.
    """
    values: Array

    def to_matrix(self) -> Array:
        return self.values

    def inverse(self) -> "MatrixTransform":
        inv = jnp.linalg.inv(self.values)
        if _is_concrete_true(~jnp.all(jnp.isfinite(inv))):
            raise NonInvertibleTransformError("matrix is singular and has no inverse")
        return MatrixTransform(inv)


# Constructors
def rotate_x(angle: Scalar) -> RotationX:
    return RotationX(angle)


def rotate_y(angle: Scalar) -> RotationY:
    return RotationY(angle)


def rotate_z(angle: Scalar) -> RotationZ:
    return RotationZ(angle)


def scale(x: Scalar, y: Scalar, z: Scalar) -> Scale:
    return Scale(x, y, z)


def translate(x: Scalar, y: Scalar, z: Scalar) -> Translation:
    return Translation(x, y, z)


def from_matrix(matrix) -> MatrixTransform:
    """Wrap a (4, 4) array as a transform."""
    matrix = jnp.asarray(matrix, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"matrix must have shape (4,4), got {matrix.shape}")
    return MatrixTransform(matrix)
