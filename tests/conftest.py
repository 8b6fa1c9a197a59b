"""Shared fixtures: scripted console, socket pairs, the fixed key."""

import socket
import threading

import pytest

from secure_rps.common.console import ConsoleIO
from secure_rps.common.protocol import KeyMaterial

# Values the key generator derives from the fixed primes 45481 and 45691.
FIXED_MODULUS = 2078072371
FIXED_PUBLIC = 17
FIXED_PRIVATE = 4074473
FIXED_TOTIENT = 69266040


class ScriptedIO(ConsoleIO):
    """ConsoleIO that answers prompts from a list and records output."""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.prompts = []
        self.lines = []

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return self.answers.pop(0)

    def show(self, text: str = "") -> None:
        self.lines.append(text)


class PeerThread(threading.Thread):
    """Runs one side of a conversation and keeps any exception it raised."""

    def __init__(self, target):
        super().__init__(daemon=True)
        self._target_fn = target
        self.error = None

    def run(self):
        try:
            self._target_fn()
        except BaseException as e:  # surfaced by the test via .error
            self.error = e


@pytest.fixture
def fixed_key():
    return KeyMaterial(
        modulus=FIXED_MODULUS,
        public_exponent=FIXED_PUBLIC,
        private_exponent=FIXED_PRIVATE,
    )


@pytest.fixture
def sock_pair():
    """Two connected sockets with a generous timeout so tests never hang."""
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    yield a, b
    a.close()
    b.close()


@pytest.fixture
def run_in_thread():
    """Start a PeerThread; all started threads are joined at teardown."""
    threads = []

    def start(target):
        t = PeerThread(target)
        t.start()
        threads.append(t)
        return t

    yield start
    for t in threads:
        t.join(timeout=10)


ENV_VARS = ["RPS_HOST", "RPS_PORT", "RPS_TIMEOUT", "RPS_LOG_FILE", "RPS_LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    No RPS_* variables and no .env file in the working directory.

    Each variable is set before being deleted so monkeypatch restores it to
    absent, even if a .env file loaded during the test filled it in.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
