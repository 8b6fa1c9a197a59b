"""Tests for the per-byte cipher and its block encoding."""

import random

import pytest

from secure_rps.common.errors import DecodeError
from secure_rps.crypto.cipher import (
    decrypt,
    decrypt_message,
    encrypt,
    encrypt_message,
    encrypted_width,
)
from conftest import FIXED_MODULUS as N, FIXED_PRIVATE as D, FIXED_PUBLIC as E

# Bytes whose encrypted form has a zero byte after index 0; the group
# truncation rule cuts them short, so they cannot be decoded.
UNDECODABLE = {0x02, 0x40, 0xB4, 0xEC}
DECODABLE = bytes(b for b in range(256) if b not in UNDECODABLE)


class TestEncrypt:

    def test_zero_and_one_are_fixed_points(self):
        assert encrypt(b"\x00\x01", E, N) == (1, b"\x00\x01")

    def test_empty_plaintext(self):
        assert encrypt(b"", E, N) == (1, b"")

    def test_known_vector(self):
        # 65^17 mod n = 0x6f495764
        assert encrypt(b"A", E, N) == (4, bytes.fromhex("6f495764"))

    def test_short_values_are_right_padded(self):
        # 2^17 = 0x020000 is three bytes wide; 1 pads to three
        assert encrypt(b"\x02\x01", E, N) == (3, b"\x02\x00\x00\x01\x00\x00")

    def test_split_factor_is_widest_byte(self):
        plaintext = b"MOVE: 3"
        split_factor, ciphertext = encrypt(plaintext, E, N)
        assert split_factor >= 1
        assert split_factor == max(encrypted_width(pow(b, E, N)) for b in plaintext)
        assert len(ciphertext) == len(plaintext) * split_factor


class TestDecrypt:

    @pytest.mark.parametrize("text", [b"MOVE: 1", b"MOVE: 2", b"MOVE: 3", b"MOVE: x", b""])
    def test_protocol_messages_round_trip(self, text):
        assert decrypt(*encrypt(text, E, N), D, N) == text

    def test_every_decodable_byte_round_trips(self):
        assert decrypt(*encrypt(DECODABLE, E, N), D, N) == DECODABLE

    def test_random_messages_round_trip(self):
        rng = random.Random(1234)
        for length in (0, 1, 2, 17, 255, 1024):
            plaintext = bytes(rng.choice(DECODABLE) for _ in range(length))
            assert decrypt(*encrypt(plaintext, E, N), D, N) == plaintext

    @pytest.mark.parametrize("b", sorted(UNDECODABLE))
    def test_group_with_inner_zero_is_rejected(self, b):
        with pytest.raises(DecodeError):
            decrypt(*encrypt(bytes([b]), E, N), D, N)

    def test_length_not_multiple_of_split_factor(self):
        with pytest.raises(DecodeError):
            decrypt(4, b"\x01\x02\x03", D, N)

    def test_zero_split_factor(self):
        with pytest.raises(DecodeError):
            decrypt(0, b"", D, N)

    def test_value_outside_byte_range(self):
        with pytest.raises(DecodeError):
            decrypt(4, bytes.fromhex("12345678"), D, N)

    def test_empty_ciphertext(self):
        assert decrypt(1, b"", D, N) == b""


class TestKeyMaterialHelpers:

    def test_round_trip(self, fixed_key):
        split_factor, ciphertext = encrypt_message(b"PROMPT", fixed_key.public_part())
        assert decrypt_message(split_factor, ciphertext, fixed_key) == b"PROMPT"

    def test_public_only_key_cannot_decrypt(self, fixed_key):
        split_factor, ciphertext = encrypt_message(b"END", fixed_key)
        with pytest.raises(DecodeError):
            decrypt_message(split_factor, ciphertext, fixed_key.public_part())
