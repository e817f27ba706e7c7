"""Homogeneous 4x4 affine matrix helpers in JAX.

Matrices follow the column-vector convention: a point p is mapped to
M @ [p, 1], the linear part lives in M[:3, :3] and the translation in
M[:3, 3]. All functions are pure and JIT-able.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def identity() -> Array:
    """Return the 4x4 identity matrix, the starting accumulator of a build."""
    return jnp.eye(4, dtype=float)


def from_linear_and_translation(A: Array, t: Array) -> Array:
    """
    Construct an affine matrix from a linear part and a translation.

    Args:
        A: (3, 3) linear part (rotation, scale, or any product of them)
        t: (3,) translation vector

    Returns:
        (4, 4) homogeneous matrix
    """
    dtype = jnp.result_type(A, t, float)

    M = jnp.zeros((4, 4), dtype=dtype)
    M = M.at[:3, :3].set(A)
    M = M.at[:3, 3].set(t)
    M = M.at[3, 3].set(1.0)

    return M


def multiply(M1: Array, M2: Array) -> Array:
    """
    Multiply two affine matrices.

    Args:
        M1: (4, 4) left operand
        M2: (4, 4) right operand

    Returns:
        (4, 4) result of M1 @ M2 (M2 acts on points first)
    """
    return jnp.matmul(M1, M2)


def apply(M: Array, points: Array) -> Array:
    """
    Apply an affine matrix to points.

    Args:
        M: (4, 4) affine matrix
        points: (3,) or (N, 3) points

    Returns:
        (3,) or (N, 3) transformed points
    """
    points = jnp.asarray(points)
    if points.shape[-1] != 3 or points.ndim > 2:
        raise ValueError(f"points must have shape (3,) or (N,3), got {points.shape}")

    ones = jnp.ones_like(points[..., 0:1])
    points_h = jnp.concatenate([points, ones], axis=-1)

    transformed_h = jnp.einsum("ij,...j->...i", M, points_h)

    # Affine matrices keep the homogeneous coordinate at 1
    return transformed_h[..., :3]


def get_translation(M: Array) -> Array:
    """Extract the (3,) translation from an affine matrix."""
    return M[:3, 3]


def get_linear(M: Array) -> Array:
    """Extract the (3, 3) linear part from an affine matrix."""
    return M[:3, :3]
