"""
Client application version comparison.

Versions are compared on their leading ``MAJOR.MINOR.PATCH`` numbers.
Anything after the patch number (pre-release tags, build metadata) is ignored.
"""

import re
from typing import Optional, Tuple

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


def parse_version(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """
    Parse the numeric triple at the start of a version string.

    Args:
        value: Version string such as ``"1.4.2"`` or ``"2.0.0-beta"``

    Returns:
        (major, minor, patch) or None if the string is not parseable
    """
    if not value:
        return None
    match = _VERSION_RE.match(value.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def version_gte(version: str, minimum: str) -> bool:
    """
    Return True when ``version`` >= ``minimum``.

    Fails open: if either side cannot be parsed the bound is considered satisfied.
    """
    left, right = parse_version(version), parse_version(minimum)
    if left is None or right is None:
        return True
    return left >= right


def version_lte(version: str, maximum: str) -> bool:
    """
    Return True when ``version`` <= ``maximum``.

    Fails open like :func:`version_gte`.
    """
    left, right = parse_version(version), parse_version(maximum)
    if left is None or right is None:
        return True
    return left <= right
