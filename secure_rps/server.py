import argparse
import logging
import socket
import sys
from typing import Optional

from pydantic import ValidationError

from secure_rps.common.config import ConnectionConfig, load_env_config
from secure_rps.common.console import ConsoleIO, TerminalIO
from secure_rps.common.errors import SecureRPSError, TransportTimeout
from secure_rps.common.logging_config import setup_logging
from secure_rps.crypto import keygen
from secure_rps.session import Role, Session

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Host a rock-paper-scissors game.")
    parser.add_argument("port", nargs="?", type=int, help="port to listen on (RPS_PORT)")
    parser.add_argument("--host", help="address to bind (RPS_HOST)")
    parser.add_argument("--timeout", type=float, help="inactivity timeout in seconds (RPS_TIMEOUT)")
    return parser.parse_args(argv)


def serve_one(config: ConnectionConfig, io: ConsoleIO,
              listener: Optional[socket.socket] = None) -> None:
    """
    Generate the key, wait for one client and play a game with it.

    The key is computed before listening so the client never waits on it.
    """
    key = keygen.generate()

    own_listener = listener is None
    if own_listener:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind((config.host, config.port))
        listener.listen(1)
    try:
        logger.info("[SERVER] Waiting for a client on %s:%d", *listener.getsockname()[:2])
        conn, addr = listener.accept()
    finally:
        if own_listener:
            listener.close()

    io.show("Connected!")
    logger.info("[+] Connection from %s", addr)
    conn.settimeout(config.timeout)
    Session(conn, Role.INITIATOR, io, key=key).run()
    logger.info("[-] Connection closed: %s", addr)


def main(argv=None) -> int:
    args = parse_args(argv)
    io = TerminalIO()
    try:
        config = load_env_config(host=args.host, port=args.port, timeout=args.timeout)
    except ValidationError as e:
        io.show(f"Invalid configuration: {e}")
        return 1
    setup_logging(config.log_level, config.log_file)

    io.show(f"Hosting rock-paper-scissors game on port {config.port}")
    try:
        serve_one(config, io)
    except TransportTimeout:
        io.show("Connection timed out.")
        return 1
    except (SecureRPSError, OSError) as e:
        io.show(f"Connection closed with exception: {e}")
        return 1

    io.read_line("Press ENTER to end")
    return 0


if __name__ == "__main__":
    sys.exit(main())
