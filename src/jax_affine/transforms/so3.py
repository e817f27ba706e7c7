"""Elementary SO(3) rotations about the coordinate axes.

Right-handed, column-vector convention: a positive angle rotates counter
clockwise when looking down the axis towards the origin.
"""

import jax
import jax.numpy as jnp
from typing import Union

Array = jax.Array
Scalar = Union[float, Array]


def _cos_sin(angle: Scalar):
    angle = jnp.asarray(angle, dtype=float)
    return jnp.cos(angle), jnp.sin(angle)


def rot_x(angle: Scalar) -> Array:
    """
    Rotation about the X axis.

    Args:
        angle: rotation angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    c, s = _cos_sin(angle)
    one, zero = jnp.ones_like(c), jnp.zeros_like(c)
    return jnp.stack([
        jnp.stack([one, zero, zero]),
        jnp.stack([zero, c, -s]),
        jnp.stack([zero, s, c]),
    ])


def rot_y(angle: Scalar) -> Array:
    """
    Rotation about the Y axis.

    Args:
        angle: rotation angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    c, s = _cos_sin(angle)
    one, zero = jnp.ones_like(c), jnp.zeros_like(c)
    return jnp.stack([
        jnp.stack([c, zero, s]),
        jnp.stack([zero, one, zero]),
        jnp.stack([-s, zero, c]),
    ])


def rot_z(angle: Scalar) -> Array:
    """
    Rotation about the Z axis.

    Args:
        angle: rotation angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    c, s = _cos_sin(angle)
    one, zero = jnp.ones_like(c), jnp.zeros_like(c)
    return jnp.stack([
        jnp.stack([c, -s, zero]),
        jnp.stack([s, c, zero]),
        jnp.stack([zero, zero, one]),
    ])
