"""Number-guessing game server over TCP.

Each connected client gets its own secret number between 1 and 1,000,000.
Guesses arrive as 4-byte big-endian signed integers; the server answers
"Hoger" (higher), "Lager" (lower) or "Correct", and starts a new round for
that client after a correct guess. A guess of -1 ends the client's game.
"""

from __future__ import annotations

import argparse
import logging
import random
import selectors
import socket
import struct
import sys
from dataclasses import dataclass

PORT = 8888
MAX_TARGET = 1_000_000
QUIT = -1
BACKLOG = 10

HIGHER = "Hoger"
LOWER = "Lager"
CORRECT = "Correct"

_FRAME = struct.Struct("!i")
_CLIENT = "client"

log = logging.getLogger(__name__)


def new_target(rng):
    """Draw a fresh secret number in 1..MAX_TARGET."""
    return rng.randint(1, MAX_TARGET)


def encode_guess(guess):
    """Encode a guess as a 4-byte network-order signed integer."""
    try:
        return _FRAME.pack(guess)
    except struct.error as exc:
        raise ValueError(f"guess out of range: {guess}") from exc


def decode_guess(data):
    """Decode a 4-byte network-order signed integer."""
    if len(data) != _FRAME.size:
        raise ValueError(f"a guess is {_FRAME.size} bytes, got {len(data)}")
    return _FRAME.unpack(data)[0]


@dataclass
class GuessSession:
    """The game state of one connected client."""

    target: int
    rng: random.Random

    def handle_guess(self, guess):
        """Return the reply for a guess, starting a new round when it is right."""
        if guess < self.target:
            return HIGHER
        if guess > self.target:
            return LOWER
        self.target = new_target(self.rng)
        return CORRECT


class TCPGuessServer:
    """A select-driven server that plays the game with many clients at once."""

    def __init__(self, host="", port=PORT, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self._listener.bind((host, port))
            self._listener.listen(BACKLOG)
        except OSError:
            self._listener.close()
            raise
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ, None)
        self.sessions: dict[socket.socket, GuessSession] = {}
        self._pending: dict[socket.socket, bytearray] = {}

    @property
    def address(self):
        """The (host, port) the server listens on."""
        return self._listener.getsockname()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def serve_once(self, timeout=None):
        """Wait for activity once and handle it; return the number of events."""
        events = self._selector.select(timeout)
        for key, _ in events:
            if key.data is None:
                self._accept()
            else:
                self._read(key.fileobj)
        return len(events)

    def serve_forever(self):
        """Serve clients until interrupted."""
        while True:
            self.serve_once()

    def close(self):
        """Disconnect every client and stop listening."""
        for conn in list(self.sessions):
            self._drop(conn)
        try:
            self._selector.unregister(self._listener)
        except (KeyError, ValueError):
            pass
        self._listener.close()
        self._selector.close()

    def _accept(self):
        try:
            conn, addr = self._listener.accept()
        except OSError as exc:
            log.warning("accept: %s", exc)
            return
        log.info("New connection: socket %d, IP %s", conn.fileno(), addr[0])
        self.sessions[conn] = GuessSession(new_target(self.rng), self.rng)
        self._pending[conn] = bytearray()
        self._selector.register(conn, selectors.EVENT_READ, _CLIENT)

    def _read(self, conn):
        try:
            data = conn.recv(4096)
        except OSError:
            data = b""
        if not data:
            log.info("Client disconnected: socket %d", conn.fileno())
            self._drop(conn)
            return
        buffer = self._pending[conn]
        buffer.extend(data)
        while len(buffer) >= _FRAME.size:
            guess = decode_guess(bytes(buffer[: _FRAME.size]))
            del buffer[: _FRAME.size]
            if guess == QUIT:
                log.info("Client exited game: socket %d", conn.fileno())
                self._drop(conn)
                return
            reply = self.sessions[conn].handle_guess(guess)
            try:
                conn.sendall(reply.encode("ascii"))
            except OSError:
                log.info("Client disconnected: socket %d", conn.fileno())
                self._drop(conn)
                return

    def _drop(self, conn):
        self._selector.unregister(conn)
        self.sessions.pop(conn, None)
        self._pending.pop(conn, None)
        conn.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the TCP number-guessing server.")
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        server = TCPGuessServer(args.host, args.port)
    except OSError as exc:
        print(f"bind failed: {exc}", file=sys.stderr)
        return 1
    with server:
        log.info("TCP-server listening on port %d...", server.address[1])
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())