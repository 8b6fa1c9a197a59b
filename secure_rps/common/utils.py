"""Common helpers: big-endian integer <-> bytes, ASCII text."""

from typing import Union


def int_to_bytes(value: int) -> bytes:
    """
    Minimal unsigned big-endian representation of a non-negative integer.

    Zero renders as a single zero byte, so the result is never empty.
    """
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def bytes_to_int(data: bytes) -> int:
    """Read bytes as an unsigned big-endian integer."""
    return int.from_bytes(data, "big")


def to_ascii(text: Union[bytes, str]) -> bytes:
    """
    Encode a protocol message as ASCII.
    Bytes are passed through unchanged.
    """
    if isinstance(text, bytes):
        return text
    return text.encode("ascii")


def from_ascii(data: bytes) -> str:
    """Decode an inbound payload; bytes outside ASCII become U+FFFD."""
    return data.decode("ascii", errors="replace")
