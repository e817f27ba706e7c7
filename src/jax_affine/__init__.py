"""
JAX Affine: composable 3D affine transforms with exact algebraic inverses.

This library builds 4x4 homogeneous matrices from chains of rotations,
scales and translations, and produces the inverse of a chain by reversing
it and inverting each element instead of numerically inverting the result.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import io
from .transforms import (
    Transform,
    InvertibleTransform,
    NonInvertibleTransformError,
    Chain,
    Inverted,
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
    inverse,
    is_invertible,
)
from .chain import build, build_inverse, chain, combine
from .io import load_xml, parse_xml

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "io",
    "Transform",
    "InvertibleTransform",
    "NonInvertibleTransformError",
    "Chain",
    "Inverted",
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
    "inverse",
    "is_invertible",
    "build",
    "build_inverse",
    "chain",
    "combine",
    "load_xml",
    "parse_xml",
]
