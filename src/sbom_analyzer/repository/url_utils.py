"""
Helpers for turning user input into repository slugs and identifiers, and for
the display values and estimates stored on repository records.
"""

import base64
import re
import random
from typing import Optional

_GITHUB_PATH_PATTERN = re.compile(r"github\.com/([^/]+/[^/]+)")

# Substring of the repository name -> language guess, checked in order
LANGUAGE_HINTS = [
    ("js", "JavaScript"),
    ("ts", "TypeScript"),
    ("py", "Python"),
    ("java", "Java"),
    ("rb", "Ruby"),
    ("go", "Go"),
    ("rs", "Rust"),
    ("php", "PHP"),
    ("cpp", "C++"),
    ("cs", "C#"),
]

FALLBACK_LANGUAGES = ["JavaScript", "Python", "Java", "TypeScript", "Go", "Rust"]


def _strip_git_suffix(value: str) -> str:
    return value[:-4] if value.endswith(".git") else value


def extract_repo_full_name(url: str) -> Optional[str]:
    """
    Extract the ``owner/repo`` slug from a GitHub URL or a bare slug.

    Args:
        url: Repository URL (``https://github.com/owner/repo[.git]``) or ``owner/repo``

    Returns:
        The slug, or None if none can be derived
    """
    if "github.com/" in url:
        match = _GITHUB_PATH_PATTERN.search(url)
        return _strip_git_suffix(match.group(1)) if match else None

    slug = _strip_git_suffix(url.strip())
    return slug or None


def generate_repo_id(url: str) -> str:
    """
    Derive a stable identifier from the raw input string.

    URL-safe base64 with the padding removed; distinct inputs always give
    distinct identifiers.
    """
    encoded = base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def format_number(num: int) -> str:
    """Format a count for display (``12345`` -> ``"12.3k"``)."""
    if num >= 1000:
        return f"{num / 1000:.1f}k"
    return str(num)


def format_size(kb: int) -> str:
    """Format a GitHub repository size given in kilobytes."""
    if kb >= 1024:
        return f"{kb / 1024:.1f} MB"
    return f"{kb} KB"


def estimate_dependencies(stars: int, rng: Optional[random.Random] = None) -> int:
    """
    Rough dependency count estimate based on repository popularity.

    Args:
        stars: Stargazer count
        rng: Random source

    Returns:
        A random value from the band the star count falls into
    """
    rng = rng or random.Random()

    if stars > 50000:
        return rng.randrange(200, 300)
    if stars > 10000:
        return rng.randrange(100, 150)
    if stars > 1000:
        return rng.randrange(50, 80)
    if stars > 100:
        return rng.randrange(20, 40)
    return rng.randrange(5, 15)


def detect_language(repo_name: str, rng: Optional[random.Random] = None) -> str:
    """Guess a language from the repository name, else pick one at random."""
    lowered = repo_name.lower()
    for hint, language in LANGUAGE_HINTS:
        if hint in lowered:
            return language

    rng = rng or random.Random()
    return rng.choice(FALLBACK_LANGUAGES)
