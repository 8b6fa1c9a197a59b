"""
Length-prefixed framing over a blocking socket.

Frame layout:
    [4 bytes - payload length (big-endian, unsigned)]
    [N bytes - payload]

No terminator byte; a zero-length frame is an empty payload.
"""

import logging
import socket
import struct

from secure_rps.common.errors import (
    ProtocolError,
    TransportClosed,
    TransportError,
    TransportTimeout,
)

logger = logging.getLogger(__name__)

LENGTH_FORMAT = "!I"
LENGTH_SIZE = struct.calcsize(LENGTH_FORMAT)


# ------------- Raw reads/writes -------------


def _send_all(sock: socket.socket, data: bytes) -> None:
    try:
        sock.sendall(data)
    except socket.timeout as e:
        raise TransportTimeout("Timed out writing to peer") from e
    except OSError as e:
        raise TransportError(f"Write failed: {e}") from e


def recv_exact(sock: socket.socket, n: int) -> bytes:
    """
    Read exactly n bytes from sock.

    Raises TransportTimeout / TransportClosed when nothing at all was read,
    ProtocolError when the peer stops part way through.
    """
    buf = bytearray()
    while len(buf) < n:
        try:
            chunk = sock.recv(n - len(buf))
        except socket.timeout as e:
            if buf:
                raise ProtocolError(
                    f"Truncated data: got {len(buf)} of {n} bytes before timeout"
                ) from e
            raise TransportTimeout("Timed out waiting for peer") from e
        except OSError as e:
            raise TransportError(f"Read failed: {e}") from e
        if not chunk:
            if buf:
                raise ProtocolError(
                    f"Truncated data: got {len(buf)} of {n} bytes before close"
                )
            raise TransportClosed("Connection closed by peer")
        buf.extend(chunk)
    return bytes(buf)


# ------------- 32-bit integers -------------


def send_uint32(sock: socket.socket, value: int) -> None:
    """Write a bare 4-byte big-endian unsigned integer."""
    _send_all(sock, struct.pack(LENGTH_FORMAT, value))


def recv_uint32(sock: socket.socket) -> int:
    """Read a bare 4-byte big-endian unsigned integer."""
    (value,) = struct.unpack(LENGTH_FORMAT, recv_exact(sock, LENGTH_SIZE))
    return value


# ------------- Frames -------------


def encode_frame(data: bytes) -> bytes:
    """Prefix data with its length."""
    return struct.pack(LENGTH_FORMAT, len(data)) + data


def send_frame(sock: socket.socket, data: bytes) -> None:
    """
    Send one frame: length, then payload, in a single sendall.
    """
    _send_all(sock, encode_frame(data))
    logger.debug("[NET] Sent frame of %d bytes", len(data))


def recv_frame(sock: socket.socket) -> bytes:
    """
    Receive one frame and return its payload.

    Once the length header has arrived, a short payload is a ProtocolError
    whether the peer closed or went silent.
    """
    length = recv_uint32(sock)
    if length == 0:
        return b""
    try:
        data = recv_exact(sock, length)
    except (TransportTimeout, TransportClosed) as e:
        raise ProtocolError(
            f"Truncated frame: declared {length} bytes, none received"
        ) from e
    logger.debug("[NET] Received frame of %d bytes", length)
    return data
