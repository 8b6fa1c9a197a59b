"""Tests for protocol messages and key material."""

import pytest
from pydantic import ValidationError

from secure_rps.common.protocol import (
    KeyAnnounce,
    KeyMaterial,
    MoveMsg,
    parse_key,
    parse_mod,
    parse_move_msg,
)


class TestKeyAnnounce:

    def test_frames_in_order(self):
        announce = KeyAnnounce(public_exponent=17, modulus=2078072371)
        assert announce.frames() == ["KEY: 17", "MOD: 2078072371"]

    def test_from_key_carries_only_public_values(self, fixed_key):
        announce = KeyAnnounce.from_key(fixed_key)
        assert announce == KeyAnnounce(public_exponent=17, modulus=2078072371)

    def test_to_key_has_no_private_exponent(self, fixed_key):
        key = KeyAnnounce.from_key(fixed_key).to_key()
        assert key == fixed_key.public_part()
        assert not key.can_decrypt

    def test_parse_finds_values_anywhere(self):
        assert parse_key("KEY: 17") == 17
        assert parse_key("hello KEY: 17 MOD: 5") == 17
        assert parse_mod("KEY: 17 MOD: 5") == 5

    def test_parse_absent(self):
        assert parse_key("PROMPT_MOVE") is None
        assert parse_mod("MOD: abc") is None


class TestMoveMsg:

    def test_to_text(self):
        assert MoveMsg(move=2).to_text() == "MOVE: 2"

    def test_parse(self):
        assert parse_move_msg("MOVE: 3") == MoveMsg(move=3)

    def test_only_first_digit_counts(self):
        assert parse_move_msg("MOVE: 12").move == 1

    @pytest.mark.parametrize("text", ["MOVE: x", "MOVE:1", "move: 1", ""])
    def test_malformed(self, text):
        assert parse_move_msg(text) is None


class TestKeyMaterial:

    def test_public_part_drops_private_exponent(self, fixed_key):
        public = fixed_key.public_part()
        assert public.private_exponent is None
        assert public.modulus == fixed_key.modulus
        assert public.public_exponent == fixed_key.public_exponent
        assert fixed_key.can_decrypt
        assert not public.can_decrypt

    def test_is_immutable(self, fixed_key):
        with pytest.raises(ValidationError):
            fixed_key.modulus = 1
