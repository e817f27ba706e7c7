"""Transform capabilities and the structural nodes that compose them.

A transform post-multiplies its own 4x4 matrix into an accumulator:
``apply(m) == m @ M``. An invertible transform can also post-multiply its
algebraic inverse. A ``Chain`` pairs two transforms; it applies them in order
and, when both are invertible, applies their inverses in reverse order,
following ``(A @ B)^-1 == B^-1 @ A^-1``.

All nodes are immutable ``flax.struct`` dataclasses, so a transform tree is a
JAX PyTree and can be passed straight through ``jax.jit`` or ``jax.grad``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import jax
from flax import struct

Array = jax.Array


class NonInvertibleTransformError(ValueError):
    """Raised when the inverse of a degenerate transform is requested."""


@runtime_checkable
class Transform(Protocol):
    """Anything that can post-multiply its matrix into an accumulator."""

    def apply(self, m: Array) -> Array:
        """Return ``m @ M`` where ``M`` is this transform's matrix."""
        ...


@runtime_checkable
class InvertibleTransform(Transform, Protocol):
    """A transform that also knows its own algebraic inverse."""

    def apply_inverse(self, m: Array) -> Array:
        """Return ``m @ M^-1`` without numerically inverting ``M``."""
        ...


def is_invertible(transform: Any) -> bool:
    """Whether ``transform`` (and, for composites, every leaf) is invertible."""
    if isinstance(transform, (Chain, Inverted)):
        return transform.invertible
    return isinstance(transform, InvertibleTransform)


def _require_invertible(transform: Any) -> None:
    if is_invertible(transform):
        return
    if isinstance(transform, Chain):
        _require_invertible(transform.first)
        _require_invertible(transform.second)
    raise TypeError(f"{type(transform).__name__} does not support apply_inverse")


def inverse(transform: Any) -> Any:
    """Return a transform whose forward action is the inverse of ``transform``.

    Package transforms return their inverse primitive (``rotate_x(0.5)``
    becomes ``rotate_x(-0.5)``); anything else that implements
    ``apply_inverse`` is wrapped in ``Inverted``.
    """
    _require_invertible(transform)
    if hasattr(transform, "inverse"):
        return transform.inverse()
    return Inverted(transform)


class TransformBase:
    """Chaining shared by every transform defined in this package."""

    def chain(self, other: Transform) -> "Chain":
        """Return ``Chain(self, other)``: ``self`` first, then ``other``."""
        if not isinstance(other, Transform):
            raise TypeError(f"cannot chain {type(other).__name__}: it has no apply()")
        return Chain(self, other)


@struct.dataclass
class Chain(TransformBase):
    """Binary composition node.

    Attributes:
        first: transform applied first (leftmost factor of the product).
        second: transform applied after ``first``.
    """
    first: Any
    second: Any

    @property
    def invertible(self) -> bool:
        return is_invertible(self.first) and is_invertible(self.second)

    def apply(self, m: Array) -> Array:
        m = self.first.apply(m)
        return self.second.apply(m)

    def apply_inverse(self, m: Array) -> Array:
        _require_invertible(self)
        m = self.second.apply_inverse(m)
        return self.first.apply_inverse(m)

    def inverse(self) -> "Chain":
        return Chain(inverse(self.second), inverse(self.first))


@struct.dataclass
class Inverted(TransformBase):
    """Swaps the forward and inverse actions of an invertible transform."""
    transform: Any

    @property
    def invertible(self) -> bool:
        return is_invertible(self.transform)

    def apply(self, m: Array) -> Array:
        return self.transform.apply_inverse(m)

    def apply_inverse(self, m: Array) -> Array:
        return self.transform.apply(m)

    def inverse(self) -> Any:
        return self.transform
