"""
Transform capabilities and primitive transforms.

This module provides:
- the Transform / InvertibleTransform capabilities and the Chain node (base)
- rotation, scale, translation and raw-matrix leaves (primitives)
- 4x4 affine matrix helpers (affine) and axis rotations (so3)

Every transform is an immutable PyTree; nothing here mutates its inputs.
"""

from . import affine
from . import so3
from .base import (
    Transform,
    InvertibleTransform,
    NonInvertibleTransformError,
    Chain,
    Inverted,
    inverse,
    is_invertible,
)
from .primitives import (
    RotationX,
    RotationY,
    RotationZ,
    Scale,
    Translation,
    MatrixTransform,
    rotate_x,
    rotate_y,
    rotate_z,
    scale,
    translate,
    from_matrix,
)

__all__ = [
    "affine",
    "so3",
    "Transform",
    "InvertibleTransform",
    "NonInvertibleTransformError",
    "Chain",
    "Inverted",
    "inverse",
    "is_invertible",
    "RotationX",
    "RotationY",
    "RotationZ",
    "Scale",
    "Translation",
    "MatrixTransform",
    "rotate_x",
    "rotate_y",
    "rotate_z",
    "scale",
    "translate",
    "from_matrix",
]
