"""Core composition algorithms: chaining transforms and building matrices.

This module implements the heart of the jax_affine library: folding a list of
transforms into a chain, and building the forward or inverse 4x4 matrix of a
transform tree by threading an identity accumulator through it.
"""

import logging
from functools import reduce

import jax

from .transforms import affine
from .transforms.base import Chain, Transform, _require_invertible

Array = jax.Array

logger = logging.getLogger(__name__)


def chain(first: Transform, second: Transform) -> Chain:
    """Compose two transforms: ``first`` is applied, then ``second``.

    Args:
        first: Any object with an ``apply`` method
        second: Any object with an ``apply`` method

    Returns:
        Chain node whose matrix is ``build(first) @ build(second)``
    """
    for t in (first, second):
        if not isinstance(t, Transform):
            raise TypeError(f"cannot chain {type(t).__name__}: it has no apply()")
    return Chain(first, second)


def combine(*transforms: Transform) -> Transform:
    """Left-fold ``chain`` over ``transforms`` in the given order.

    ``combine(a, b, c)`` is ``Chain(Chain(a, b), c)``; a single transform is
    returned unchanged.

    Raises:
        ValueError: if no transforms are given
    """
    if not transforms:
        raise ValueError("combine() needs at least one transform")
    return reduce(chain, transforms)


def build(transform: Transform) -> Array:
    """Build the forward matrix of a transform tree.

    Args:
        transform: Primitive or composite transform

    Returns:
        (4, 4) matrix, the product of every leaf matrix in chain order
    """
    logger.debug("Building forward matrix for %s", type(transform).__name__)
    return transform.apply(affine.identity())


def build_inverse(transform: Transform) -> Array:
    """Build the inverse matrix of a transform tree algebraically.

    Args:
        transform: Transform whose every leaf is invertible

    Returns:
        (4, 4) matrix equal to the inverse of ``build(transform)``

    Raises:
        TypeError: if a leaf does not support ``apply_inverse``
        NonInvertibleTransformError: if a leaf is degenerate (e.g. zero scale)
    """
    _require_invertible(transform)
    logger.debug("Building inverse matrix for %s", type(transform).__name__)
    return transform.apply_inverse(affine.identity())
