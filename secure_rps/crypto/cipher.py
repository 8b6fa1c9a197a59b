"""
Per-byte modular-exponentiation cipher with a fixed-width block encoding.

Each plaintext byte b becomes c = b^e mod n. Every c is written as its minimal
big-endian representation, right-padded with zero bytes to split_factor, the
widest representation in the message. The receiver cuts each group at the
first zero byte after index 0 before decrypting.
"""

import logging
from typing import List, Tuple

from secure_rps.common.errors import DecodeError
from secure_rps.common.protocol import KeyMaterial
from secure_rps.common.utils import bytes_to_int, int_to_bytes

logger = logging.getLogger(__name__)


def encrypted_width(value: int) -> int:
    """Number of bytes the minimal representation of value occupies."""
    return len(int_to_bytes(value))


def encrypt(plaintext: bytes, public_exponent: int, modulus: int) -> Tuple[int, bytes]:
    """
    Encrypt every byte of plaintext independently.

    :return: (split_factor, ciphertext); split_factor is at least 1 and the
             ciphertext is len(plaintext) * split_factor bytes
    """
    values: List[int] = [pow(b, public_exponent, modulus) for b in plaintext]
    split_factor = max([1] + [encrypted_width(c) for c in values])

    ciphertext = b"".join(int_to_bytes(c).ljust(split_factor, b"\x00") for c in values)
    return split_factor, ciphertext


def _strip_group(group: bytes) -> bytes:
    # Keep index 0 even if zero; cut at the first zero byte after it.
    j = 1
    while j < len(group) and group[j] != 0:
        j += 1
    return group[:j]


def decrypt(split_factor: int, ciphertext: bytes, private_exponent: int, modulus: int) -> bytes:
    """
    Inverse of encrypt().

    :raises DecodeError: if the ciphertext is not a whole number of groups,
                         or a group decrypts to a value outside 0..255
    """
    if split_factor < 1:
        raise DecodeError(f"Invalid split factor {split_factor}")
    if len(ciphertext) % split_factor != 0:
        raise DecodeError(
            f"Ciphertext length {len(ciphertext)} is not a multiple of split factor {split_factor}"
        )

    out = bytearray()
    for i in range(0, len(ciphertext), split_factor):
        c = bytes_to_int(_strip_group(ciphertext[i:i + split_factor]))
        m = pow(c, private_exponent, modulus)
        if m > 0xFF:
            raise DecodeError(f"Group {i // split_factor} decrypted to {m}, not a byte")
        out.append(m)
    return bytes(out)


def encrypt_message(plaintext: bytes, key: KeyMaterial) -> Tuple[int, bytes]:
    """encrypt() with the public half of key."""
    split_factor, ciphertext = encrypt(plaintext, key.public_exponent, key.modulus)
    logger.debug("[CIPHER] Encrypted %d bytes, split factor %d", len(plaintext), split_factor)
    return split_factor, ciphertext


def decrypt_message(split_factor: int, ciphertext: bytes, key: KeyMaterial) -> bytes:
    """decrypt() with the private half of key."""
    if not key.can_decrypt:
        raise DecodeError("Key material has no private exponent")
    return decrypt(split_factor, ciphertext, key.private_exponent, key.modulus)
