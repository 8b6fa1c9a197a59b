import argparse
import logging
import os
import socket
import sys

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from secure_rps.common.config import ConnectionConfig, load_env_config
from secure_rps.common.console import ConsoleIO, TerminalIO
from secure_rps.common.errors import SecureRPSError, TransportError, TransportTimeout
from secure_rps.common.logging_config import setup_logging
from secure_rps.session import Role, Session

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Join a rock-paper-scissors game.")
    parser.add_argument("--host", help="server hostname (RPS_HOST)")
    parser.add_argument("--port", type=int, help="server port (RPS_PORT)")
    parser.add_argument("--timeout", type=float, help="inactivity timeout in seconds (RPS_TIMEOUT)")
    return parser.parse_args(argv)


def ask_missing(args: argparse.Namespace, io: ConsoleIO) -> argparse.Namespace:
    """Prompt for hostname and port when neither flags nor env supply them."""
    if args.host is None and os.getenv("RPS_HOST") is None:
        args.host = io.read_line("Hostname: ").strip() or None
    if args.port is None and os.getenv("RPS_PORT") is None:
        port = io.read_line("Port: ").strip()
        args.port = int(port) if port else None
    return args


def connect(config: ConnectionConfig) -> socket.socket:
    """Open the connection with the inactivity timeout applied."""
    try:
        sock = socket.create_connection((config.host, config.port), timeout=config.timeout)
    except socket.timeout as e:
        raise TransportTimeout(f"Timed out connecting to {config.host}:{config.port}") from e
    except OSError as e:
        raise TransportError(f"Could not connect to {config.host}:{config.port}: {e}") from e
    sock.settimeout(config.timeout)
    return sock


def play(config: ConnectionConfig, io: ConsoleIO) -> None:
    logger.info("[CONFIG] Connecting to %s:%d...", config.host, config.port)
    sock = connect(config)
    io.show("Connected!")
    Session(sock, Role.RESPONDER, io).run()


def main(argv=None) -> int:
    io = TerminalIO()
    load_dotenv(find_dotenv(usecwd=True))
    try:
        args = ask_missing(parse_args(argv), io)
    except ValueError as e:
        io.show(f"Invalid port: {e}")
        return 1
    try:
        config = load_env_config(host=args.host, port=args.port, timeout=args.timeout)
    except ValidationError as e:
        io.show(f"Invalid configuration: {e}")
        return 1
    setup_logging(config.log_level, config.log_file)

    try:
        play(config, io)
    except TransportTimeout:
        io.show("Connection timed out.")
        return 1
    except SecureRPSError as e:
        io.show(f"Connection closed with exception: {e}")
        return 1

    io.read_line("Press ENTER to end")
    return 0


if __name__ == "__main__":
    sys.exit(main())
