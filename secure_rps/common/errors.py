"""Exception hierarchy for the SecureRPS game."""


class SecureRPSError(Exception):
    """Base exception for all SecureRPS errors."""
    pass


class TransportError(SecureRPSError):
    """Raised when the underlying socket fails."""
    pass


class TransportTimeout(TransportError):
    """Raised when the peer is silent for longer than the socket timeout."""
    pass


class TransportClosed(TransportError):
    """Raised when the peer closes the connection between frames."""
    pass


class ProtocolError(SecureRPSError):
    """Raised on an unexpected token or a malformed frame."""
    pass


class DecodeError(SecureRPSError):
    """Raised when an encrypted block cannot be decoded."""
    pass


class InvalidMove(SecureRPSError):
    """Raised when a typed move is not rock, paper or scissors."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid move: {text!r}")


class KeyGenerationTimeout(SecureRPSError):
    """Raised when a key search stage exceeds its iteration cap."""

    def __init__(self, stage: str, max_iterations: int):
        self.stage = stage
        self.max_iterations = max_iterations
        super().__init__(
            f"Key generation stage '{stage}' gave up after {max_iterations} iterations"
        )
