"""test_identifier.py: tests for node identifier decoding and generation."""
import hashlib
from unittest.mock import MagicMock, patch

import pytest
from loguru import logger

from dhtnet.errors import DecodeError, EntropyError, InvalidIdentifierError
from dhtnet.identifier import (
    ID_LENGTH,
    decode_id,
    decode_node_id,
    encode_id,
    generate_id,
    random_bytes,
)

logger.enable("dhtnet")


def test_decode_id_round_trips_generated_id() -> None:
    """Verifies that a generated id survives hex encoding and decoding."""
    node_id: bytes = generate_id()

    decoded: bytes = decode_id(node_id.hex())

    assert len(decoded) == 20
    assert decoded == node_id


def test_decode_id_short() -> None:
    """Verifies that ids shorter than 160 bits are allowed by default."""
    assert decode_id("abcd") == bytes([171, 205])
    assert decode_id("ABCD") == b"\xab\xcd"


@pytest.mark.parametrize("text", ["test", "abc", "ab cd", "0xab", "ab\n", "é1"])
def test_decode_id_malformed(text: str) -> None:
    """Verifies that text that is not plain even-length hex is rejected.

    Args:
        text: Malformed identifier text.
    """
    with pytest.raises(DecodeError):
        decode_id(text)


def test_decode_id_empty() -> None:
    """Verifies that an empty id is rejected as invalid, not malformed."""
    with pytest.raises(InvalidIdentifierError, match="Invalid ID"):
        decode_id("")


def test_decode_id_enforces_length() -> None:
    """Verifies the optional length check."""
    assert decode_id("abcd", length=2) == b"\xab\xcd"
    with pytest.raises(InvalidIdentifierError, match="expected 20"):
        decode_id("abcd", length=ID_LENGTH)


def test_decode_node_id() -> None:
    """Verifies that decode_node_id requires a full 20 byte id."""
    text = "ab" * ID_LENGTH

    assert decode_node_id(text) == b"\xab" * ID_LENGTH
    with pytest.raises(InvalidIdentifierError):
        decode_node_id(text + "ab")
    with pytest.raises(InvalidIdentifierError):
        decode_node_id("abcd")


def test_encode_id() -> None:
    """Verifies that ids are encoded as lowercase hex."""
    assert encode_id(b"\xab\xcd") == "abcd"
    assert encode_id(bytearray(b"\x00\x01")) == "0001"
    with pytest.raises(InvalidIdentifierError):
        encode_id(b"")


def test_generate_id() -> None:
    """Verifies that generated ids are 20 bytes and not repeated."""
    node_id: bytes = generate_id()

    assert node_id
    assert len(node_id) == 20
    assert generate_id() != generate_id()


@patch("secrets.token_bytes", return_value=b"\x00" * 20)
def test_generate_id_hashes_random_bytes(mock_token_bytes: MagicMock) -> None:
    """Verifies that the id is the SHA-1 of 20 random bytes.

    Args:
        mock_token_bytes: secrets.token_bytes patched to return zeros.
    """
    assert generate_id() == hashlib.sha1(b"\x00" * 20).digest()
    mock_token_bytes.assert_called_once_with(ID_LENGTH)


@patch("secrets.token_bytes", side_effect=OSError("no entropy"))
def test_generate_id_entropy_failure(mock_token_bytes: MagicMock) -> None:
    """Verifies that a failing random source stops id generation.

    Args:
        mock_token_bytes: secrets.token_bytes patched to fail.
    """
    with pytest.raises(EntropyError) as exc_info:
        generate_id()

    assert isinstance(exc_info.value.__cause__, OSError)


def test_random_bytes() -> None:
    """Verifies that random_bytes returns n fresh bytes each call."""
    assert len(random_bytes(20)) == 20
    assert len(random_bytes(10)) == 10
    assert random_bytes(0) == b""
    assert random_bytes(10) != random_bytes(10)


def test_random_bytes_negative() -> None:
    """Verifies that a negative count is refused."""
    with pytest.raises(ValueError):
        random_bytes(-1)


@pytest.mark.parametrize("error", [OSError("no entropy"), NotImplementedError])
def test_random_bytes_entropy_failure(error: BaseException) -> None:
    """Verifies that random source failures surface as EntropyError.

    Args:
        error: What the random source raises.
    """
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG")
    try:
        with patch("secrets.token_bytes", side_effect=error):
            with pytest.raises(EntropyError):
                random_bytes(10)
    finally:
        logger.remove(handler_id)

    assert any("secure random source failed" in msg for msg in messages)
