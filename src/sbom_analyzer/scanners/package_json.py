"""
Node.js ``package.json`` parsing for manifests fetched from GitHub.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


@dataclass
class ParsedManifest:
    """Dependencies declared in a manifest."""
    dependency_count: int = 0
    dependencies: List[str] = field(default_factory=list)


def parse_package_json(content: Optional[str]) -> ParsedManifest:
    """
    Collect ``name@version`` strings from the production and development sections.

    Malformed content contributes nothing; it never raises.

    Args:
        content: Decoded package.json text

    Returns:
        Parsed dependency count and ``name@version`` strings
    """
    result = ParsedManifest()
    if not content:
        return result

    try:
        data = json.loads(content)
    except ValueError as e:
        logger.debug(f"Error parsing {PACKAGE_JSON}: {e}")
        return result

    if not isinstance(data, dict):
        return result

    for section in DEPENDENCY_SECTIONS:
        entries = data.get(section)
        if not isinstance(entries, dict):
            continue
        result.dependency_count += len(entries)
        result.dependencies.extend(f"{name}@{version}" for name, version in entries.items())

    return result
