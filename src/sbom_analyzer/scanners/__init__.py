"""
Simulated dependency scanning and manifest parsing.
"""

from .dependency_synthesizer import DependencySynthesizer, EXTRA_PACKAGES
from .package_json import parse_package_json, ParsedManifest, PACKAGE_JSON

__all__ = [
    "DependencySynthesizer",
    "EXTRA_PACKAGES",
    "parse_package_json",
    "ParsedManifest",
    "PACKAGE_JSON"
]
