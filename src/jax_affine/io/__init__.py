"""I/O utilities for jax_affine.

This module provides functions for loading transform pipelines from XML.
"""

from .xml_parser import load_xml, parse_xml

__all__ = ["load_xml", "parse_xml"]
