"""XML parser for loading transform pipelines into transform trees.

A pipeline is a container element (``<transform>`` or ``<chain>``) whose
children are combined in document order. Supported leaves::

    <rotate axis="x" angle="0.5"/>
    <translate xyz="55 -5 -6"/>
    <scale xyz="2 4 -2"/>
    <origin xyz="0 0 0.333" rpy="0 0 1.57"/>
    <matrix values="1 0 0 0  0 1 0 0  0 0 1 0  0 0 0 1"/>

``<origin>`` follows the URDF joint origin convention: translate by ``xyz``,
then rotate by yaw, pitch and roll (R = Rz @ Ry @ Rx).
"""

import logging
from typing import List

import numpy as np
from lxml import etree

from jax_affine.chain import combine
from jax_affine.transforms.base import Transform
from jax_affine.transforms.primitives import (
    from_matrix,
    rotate_x,
    rotate_y,
    rotate_z,
    scale,
    translate,
)

logger = logging.getLogger(__name__)

CONTAINER_TAGS = ("transform", "chain")
_ROTATIONS = {"x": rotate_x, "y": rotate_y, "z": rotate_z}


def load_xml(path: str) -> Transform:
    """Load an XML pipeline file and convert it to a transform tree.

    Args:
        path: Path to the XML file to load.

    Returns:
        Transform: the root transform of the pipeline.
    """
    logger.debug("Loading transform pipeline from %s", path)
    try:
        tree = etree.parse(path)
    except etree.XMLSyntaxError as e:
        raise ValueError(f"Invalid transform pipeline XML in {path}: {e}") from e
    return _parse_element(tree.getroot())


def parse_xml(text: str) -> Transform:
    """Parse an XML pipeline from a string.

    Args:
        text: XML document text.

    Returns:
        Transform: the root transform of the pipeline.
    """
    try:
        root = etree.fromstring(text.encode())
    except etree.XMLSyntaxError as e:
        raise ValueError(f"Invalid transform pipeline XML: {e}") from e
    return _parse_element(root)


def _parse_element(elem) -> Transform:
    tag = elem.tag

    if tag in CONTAINER_TAGS:
        children = [child for child in elem if isinstance(child.tag, str)]
        if not children:
            raise ValueError(f"<{tag}> on line {elem.sourceline} has no transforms")
        logger.debug("Combining %d elements of <%s>", len(children), tag)
        return combine(*[_parse_element(child) for child in children])

    if tag == "rotate":
        axis = elem.get("axis", "").lower()
        if axis not in _ROTATIONS:
            raise ValueError(f"<rotate> axis must be x, y or z, got '{axis}'")
        angle = elem.get("angle")
        if angle is None:
            raise ValueError(f"<rotate> on line {elem.sourceline} is missing 'angle'")
        return _ROTATIONS[axis](_parse_floats(angle, 1, "angle")[0])

    if tag == "translate":
        x, y, z = _parse_floats(elem.get("xyz", "0 0 0"), 3, "xyz")
        return translate(x, y, z)

    if tag == "scale":
        x, y, z = _parse_floats(elem.get("xyz", "1 1 1"), 3, "xyz")
        return scale(x, y, z)

    if tag == "origin":
        x, y, z = _parse_floats(elem.get("xyz", "0 0 0"), 3, "xyz")
        roll, pitch, yaw = _parse_floats(elem.get("rpy", "0 0 0"), 3, "rpy")
        return combine(translate(x, y, z), rotate_z(yaw), rotate_y(pitch), rotate_x(roll))

    if tag == "matrix":
        values = _parse_floats(elem.get("values", ""), 16, "values")
        return from_matrix(np.array(values).reshape(4, 4))

    raise ValueError(f"Unknown transform element <{tag}> on line {elem.sourceline}")


def _parse_floats(text: str, count: int, name: str) -> List[float]:
    """Parse exactly ``count`` whitespace-separated numbers from an attribute."""
    try:
        values = [float(v) for v in text.split()]
    except ValueError:
        raise ValueError(f"'{name}' must contain numbers, got '{text}'")
    if len(values) != count:
        raise ValueError(f"'{name}' must have {count} values, got {len(values)}")
    return values
