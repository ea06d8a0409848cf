"""
SBOM generation components for rendering dependency lists as standard SBOM documents.
"""

from .base_generator import BaseFormatter, SBOMFormat, split_dependency
from .sbom_generator import SBOMGenerator
from .spdx_formatter import SPDXFormatter
from .cyclonedx_formatter import CycloneDXFormatter

__all__ = [
    "BaseFormatter",
    "SBOMFormat",
    "split_dependency",
    "SBOMGenerator",
    "SPDXFormatter",
    "CycloneDXFormatter"
]
