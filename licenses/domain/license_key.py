"""
License key generation.
"""

import secrets

DEFAULT_PREFIX = "LIC"
_BLOCK_BYTES = 4


def generate_license_key(prefix: str = DEFAULT_PREFIX) -> str:
    """
    Generate a license key in format: PREFIX-XXXXXXXX-XXXXXXXX.

    Each block is 4 bytes from the secrets module rendered as uppercase
    hex, giving 64 bits of entropy per key.

    Args:
        prefix: Key prefix (e.g., 'LIC')

    Returns:
        Generated license key string
    """
    blocks = [secrets.token_hex(_BLOCK_BYTES).upper() for _ in range(2)]
    return f"{prefix or DEFAULT_PREFIX}-{'-'.join(blocks)}"
