"""identifier.py: node identifier codec and generator.

Node identifiers are 160-bit (20 byte) values, exchanged as hex text.
"""
import binascii
import hashlib
import secrets
from typing import Optional

from loguru import logger

from .errors import DecodeError, EntropyError, InvalidIdentifierError

ID_LENGTH: int = 20


def decode_id(text: str, length: Optional[int] = None) -> bytes:
    """Decodes a hex string into an identifier.

    Any even number of hex digits is accepted unless `length` is given, so
    short test identifiers decode too. Use `decode_node_id` for ids taken
    off the wire.

    Args:
        text: Hex digits, either case, no whitespace or prefix.
        length: Required length of the decoded id in bytes.

    Returns:
        The decoded bytes, ``len(text) // 2`` long.

    Raises:
        InvalidIdentifierError: text is empty, or decodes to the wrong length.
        DecodeError: text has non-hex characters or an odd length.
    """
    if not text:
        raise InvalidIdentifierError("Invalid ID")

    try:
        node_id = binascii.unhexlify(text)
    except ValueError as e:
        raise DecodeError(f"Invalid hex ID {text!r}: {e}") from e

    if length is not None and len(node_id) != length:
        raise InvalidIdentifierError(
            f"ID is {len(node_id)} bytes, expected {length}"
        )
    return node_id


def decode_node_id(text: str) -> bytes:
    """Decodes a full 160-bit node id from hex."""
    return decode_id(text, length=ID_LENGTH)


def encode_id(node_id: bytes) -> str:
    """Encodes an identifier as lowercase hex.

    Raises:
        InvalidIdentifierError: node_id is empty.
    """
    if not node_id:
        raise InvalidIdentifierError("Invalid ID")
    return bytes(node_id).hex()


def generate_id() -> bytes:
    """Generates a random 160-bit node id.

    The id is the SHA-1 digest of `ID_LENGTH` secure random bytes, which
    spreads it evenly over the id space.

    Raises:
        EntropyError: the system's secure random source failed. The caller
            should not continue.
    """
    return hashlib.sha1(random_bytes(ID_LENGTH)).digest()


def random_bytes(n: int) -> bytes:
    """Returns `n` bytes from the operating system's secure random source.

    Args:
        n: Number of bytes; 0 gives an empty result.

    Raises:
        ValueError: n is negative.
        EntropyError: the secure random source failed. The caller should
            not continue, and must not fall back to a non-secure source.
    """
    if n < 0:
        raise ValueError(f"Cannot generate {n} random bytes")
    try:
        return secrets.token_bytes(n)
    except (OSError, NotImplementedError) as e:
        logger.debug("secure random source failed: {}", e)
        raise EntropyError("Secure random source unavailable") from e
