"""Output key derivation."""

from .exceptions import InvalidKeyError
from .models import COMPRESSED_MARKER, UNCOMPRESSED_MARKER


def is_uncompressed_key(key: str, uncompressed_marker: str = UNCOMPRESSED_MARKER) -> bool:
    """Whether `key` follows the naming convention for raw uploads."""
    return bool(uncompressed_marker) and uncompressed_marker in key


def derive_output_key(
    key: str,
    uncompressed_marker: str = UNCOMPRESSED_MARKER,
    compressed_marker: str = COMPRESSED_MARKER,
) -> str:
    """
    Calculate the optimized object's key from the uploaded object's key.

    Only the first occurrence of the marker is replaced, so
    "photos/42_uncompressed.jpg" becomes "photos/42.jpg".

    Args:
        key: Key of the uploaded (raw) object
        uncompressed_marker: Marker identifying raw uploads
        compressed_marker: Replacement for the marker

    Returns:
        Key for the optimized object

    Raises:
        InvalidKeyError: If the key does not contain the marker
    """
    if not is_uncompressed_key(key, uncompressed_marker):
        raise InvalidKeyError(key, uncompressed_marker)
    return key.replace(uncompressed_marker, compressed_marker, 1)
