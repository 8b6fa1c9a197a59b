"""
Protocol tokens and pydantic models for the SecureRPS wire messages.

Every payload is ASCII text. Key announcements travel in the clear; all other
client-to-server messages are encrypted once the client holds the key.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict


# -------------------------
# Plain tokens
# -------------------------

PROMPT_MOVE = "PROMPT_MOVE"
WIN = "WIN"
LOSE = "LOSE"
TIE = "TIE"
END = "END"

KEY_PATTERN = re.compile(r"KEY: (?P<key>\d+)")
MOD_PATTERN = re.compile(r"MOD: (?P<mod>\d+)")
MOVE_PATTERN = re.compile(r"MOVE: (?P<move>\d)")


# -------------------------
# Key material
# -------------------------

class KeyMaterial(BaseModel):
    """Modulus plus exponents; the private exponent only on the key owner."""

    model_config = ConfigDict(frozen=True)

    modulus: int
    public_exponent: int
    private_exponent: Optional[int] = None

    @property
    def can_decrypt(self) -> bool:
        return self.private_exponent is not None

    def public_part(self) -> "KeyMaterial":
        """Copy without the private exponent, as a peer would hold it."""
        return KeyMaterial(modulus=self.modulus, public_exponent=self.public_exponent)


# -------------------------
# Key exchange (plaintext)
# -------------------------

class KeyAnnounce(BaseModel):
    public_exponent: int
    modulus: int

    @classmethod
    def from_key(cls, key: KeyMaterial) -> "KeyAnnounce":
        """Announcement for the public half of key."""
        public = key.public_part()
        return cls(public_exponent=public.public_exponent, modulus=public.modulus)

    def to_key(self) -> KeyMaterial:
        """Key material as the receiving peer holds it: no private exponent."""
        return KeyMaterial(modulus=self.modulus, public_exponent=self.public_exponent)

    def frames(self):
        """The two plaintext messages, in send order."""
        return [f"KEY: {self.public_exponent}", f"MOD: {self.modulus}"]


def parse_key(text: str) -> Optional[int]:
    """Public exponent from a 'KEY: <n>' message, if present anywhere in it."""
    m = KEY_PATTERN.search(text)
    return int(m.group("key")) if m else None


def parse_mod(text: str) -> Optional[int]:
    """Modulus from a 'MOD: <n>' message, if present anywhere in it."""
    m = MOD_PATTERN.search(text)
    return int(m.group("mod")) if m else None


# -------------------------
# Move submission
# -------------------------

class MoveMsg(BaseModel):
    move: int

    def to_text(self) -> str:
        return f"MOVE: {self.move}"


def parse_move_msg(text: str) -> Optional[MoveMsg]:
    """Single-digit move from a 'MOVE: <d>' message, or None."""
    m = MOVE_PATTERN.search(text)
    if not m:
        return None
    return MoveMsg(move=int(m.group("move")))
