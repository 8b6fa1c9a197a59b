"""
One game over one connection.

The server side (initiator) owns the full key and runs the game; the client
side (responder) learns the public key from the first frames and follows the
server's prompts. Client writes are encrypted once the key is known, and the
server decrypts everything it reads after the key exchange.
"""

import logging
import socket
from enum import Enum
from typing import Optional

from secure_rps.common import protocol
from secure_rps.common.console import ConsoleIO, prompt_move
from secure_rps.common.errors import (
    ProtocolError,
    SecureRPSError,
    TransportClosed,
    TransportTimeout,
)
from secure_rps.common.framing import recv_frame, recv_uint32, send_frame, send_uint32
from secure_rps.common.protocol import KeyAnnounce, KeyMaterial, MoveMsg
from secure_rps.common.utils import from_ascii, to_ascii
from secure_rps.crypto import keygen
from secure_rps.crypto.cipher import decrypt_message, encrypt_message
from secure_rps.game.rules import Move, get_winner

logger = logging.getLogger(__name__)


class Role(Enum):
    INITIATOR = "initiator"
    RESPONDER = "responder"


class SessionState(Enum):
    AWAITING_KEY_EXCHANGE = "awaiting_key_exchange"
    PLAYING = "playing"
    FINISHED = "finished"


class Session:
    """
    Key exchange and turn taking for one peer.

    :param sock: connected socket; its timeout is the inactivity timeout
    :param role: INITIATOR (server) or RESPONDER (client)
    :param io: where the local player's moves come from and results go to
    :param key: pre-computed key material for the initiator; generated on
                key exchange when omitted. Ignored for the responder.
    """

    def __init__(self, sock: socket.socket, role: Role, io: ConsoleIO,
                 key: Optional[KeyMaterial] = None):
        if role is Role.INITIATOR and key is not None and not key.can_decrypt:
            raise ValueError("Initiator key material needs a private exponent")
        self.sock = sock
        self.role = role
        self.io = io
        self.key = key if role is Role.INITIATOR else None
        self.state = SessionState.AWAITING_KEY_EXCHANGE
        self._key_ready = False
        self._announced_key: Optional[int] = None
        self._announced_mod: Optional[int] = None
        self._closed = False

    # ------------- Byte transport -------------

    def send_bytes(self, data: bytes) -> None:
        """Write one message, encrypted when holding only the public key."""
        if self._key_ready and not self.key.can_decrypt:
            split_factor, ciphertext = encrypt_message(data, self.key)
            send_uint32(self.sock, split_factor)
            send_frame(self.sock, ciphertext)
        else:
            send_frame(self.sock, data)

    def recv_bytes(self) -> bytes:
        """Read one message, decrypting it when holding the private key."""
        if self._key_ready and self.key.can_decrypt:
            split_factor = recv_uint32(self.sock)
            try:
                ciphertext = recv_frame(self.sock)
            except (TransportTimeout, TransportClosed) as e:
                # split factor already read; the encrypted frame is cut short
                raise ProtocolError(
                    f"Truncated encrypted frame after split factor {split_factor}"
                ) from e
            return decrypt_message(split_factor, ciphertext, self.key)
        return recv_frame(self.sock)

    def send_text(self, text: str) -> None:
        logger.debug("[NET] -> %s", text)
        self.send_bytes(to_ascii(text))

    def recv_text(self) -> str:
        text = from_ascii(self.recv_bytes())
        logger.debug("[NET] <- %s", text)
        if self.role is Role.RESPONDER:
            self._watch_for_key(text)
        return text

    # ------------- Key exchange -------------

    def _watch_for_key(self, text: str) -> None:
        key = protocol.parse_key(text)
        mod = protocol.parse_mod(text)
        if key is not None:
            self._announced_key = key
        if mod is not None:
            self._announced_mod = mod
        if self._key_ready or self._announced_key is None or self._announced_mod is None:
            return

        announce = KeyAnnounce(public_exponent=self._announced_key, modulus=self._announced_mod)
        self.key = announce.to_key()
        self._key_ready = True
        self.state = SessionState.PLAYING
        logger.info("[KEY] Received public key; encryption active.")

    def exchange_keys(self) -> None:
        """Initiator: make sure a key exists, then announce its public half."""
        if self.role is not Role.INITIATOR:
            raise ProtocolError("Only the initiator announces keys")
        if self.key is None:
            self.key = keygen.generate()

        announce = KeyAnnounce.from_key(self.key)
        for text in announce.frames():
            self.send_text(text)
        self._key_ready = True
        self.state = SessionState.PLAYING
        logger.info("[KEY] Key sent to client.")

    # ------------- Initiator game loop -------------

    def _read_peer_move(self) -> Move:
        response = self.recv_text()
        msg = protocol.parse_move_msg(response)
        if msg is None:
            raise ProtocolError(f"Unrecognized response: {response}")
        if msg.move not in (Move.ROCK, Move.PAPER, Move.SCISSORS):
            raise ProtocolError(f"Move out of range: {response}")
        return Move(msg.move)

    def play_round(self) -> str:
        """
        Initiator: one prompt/answer/outcome exchange.

        :return: the outcome token sent to the peer (WIN, LOSE or TIE)
        """
        self.send_text(protocol.PROMPT_MOVE)
        own_move = prompt_move(self.io)

        self.io.show("Waiting for opponent...")
        peer_move = self._read_peer_move()
        logger.info("[GAME] Server played %s, client played %s", own_move.name, peer_move.name)

        winner = get_winner(own_move, peer_move)
        self.io.show()
        if winner == 0:
            self.io.show("You win!")
            outcome = protocol.LOSE
        elif winner == 1:
            self.io.show("You lose!")
            outcome = protocol.WIN
        else:
            self.io.show("Tie. Try again")
            outcome = protocol.TIE
        self.send_text(outcome)
        return outcome

    def _run_initiator(self) -> None:
        self.exchange_keys()
        while self.play_round() == protocol.TIE:
            pass
        self.send_text(protocol.END)

    # ------------- Responder game loop -------------

    def _submit_move(self) -> None:
        move = prompt_move(self.io)
        self.send_text(MoveMsg(move=int(move)).to_text())
        self.io.show("Waiting for opponent...")

    def handle_message(self, text: str) -> bool:
        """
        Responder: act on one server message.

        :return: False once the server has ended the game
        """
        if text == protocol.PROMPT_MOVE:
            self._submit_move()
        elif text == protocol.WIN:
            self.io.show()
            self.io.show("You win!")
        elif text == protocol.LOSE:
            self.io.show()
            self.io.show("You lose!")
        elif text == protocol.TIE:
            self.io.show()
            self.io.show("Tie. Try again")
        elif text == protocol.END:
            return False
        return True

    def _run_responder(self) -> None:
        while self.handle_message(self.recv_text()):
            pass

    # ------------- Lifecycle -------------

    def run(self) -> None:
        """
        Play a full game, then close the socket.

        Any fatal error is logged and re-raised after the socket is closed.
        """
        try:
            if self.role is Role.INITIATOR:
                self._run_initiator()
            else:
                self._run_responder()
            self.state = SessionState.FINISHED
            logger.info("[GAME] Game over.")
        except SecureRPSError as e:
            logger.error("[ERROR] Session failed: %s", e)
            raise
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.sock.close()
        except OSError as e:
            logger.debug("[NET] Error while closing socket: %s", e)
