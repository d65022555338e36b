"""
License key and code generation.

Keys use an uppercase alphabet without the visually confusable
characters I, O, 0 and 1 so they survive being read aloud or printed.
"""

import re
import secrets

UNAMBIGUOUS_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def random_block(length: int = 4) -> str:
    """Return ``length`` random characters from the unambiguous alphabet."""
    return "".join(secrets.choice(UNAMBIGUOUS_ALPHABET) for _ in range(length))


def _key_segment(value: str) -> str:
    segment = re.sub(r"[^A-Z0-9]", "", value.upper())
    if not segment:
        raise ValueError(f"Cannot build a license key segment from {value!r}")
    return segment


def generate_license_key(product_slug: str, license_type: str) -> str:
    """
    Generate a license key in format: SLUG-TYPE-XXXX-XXXX.

    Args:
        product_slug: Product slug (e.g. 'demo-app' becomes 'DEMOAPP')
        license_type: License type value (e.g. 'DEMO', 'FULL')

    Returns:
        Generated license key string
    """
    return f"{_key_segment(product_slug)}-{_key_segment(license_type)}-{random_block()}-{random_block()}"
