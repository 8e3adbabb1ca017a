"""Number-guessing game server over UDP.

Each round the server picks a number between 1 and 100 and collects
guesses. The wait for the next guess halves after every guess, down to a
minimum; when the wait runs out, the sender of the last guess is told
"You won !" if the best guess was exact and "You won ?" otherwise. One
late guess within the late window is answered with "You lost !".
"""

from __future__ import annotations

import argparse
import logging
import random
import re
import select
import socket
import sys
from dataclasses import dataclass

PORT = 8888
MAX_NUMBER = 100
NO_GUESS_DIFF = 9999
FIRST_TIMEOUT = 8.0
MIN_TIMEOUT = 0.5
LATE_WINDOW = 16.0
EXACT_REPLY = "You won !"
CLOSE_REPLY = "You won ?"
LATE_REPLY = "You lost !"

_BUFFER_SIZE = 1999
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

log = logging.getLogger(__name__)


def parse_guess(text):
    """Read a leading integer from text as C's atoi does; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def next_timeout(timeout, minimum):
    """Halve the wait for the next guess, but never below the minimum."""
    return max(timeout / 2, minimum)


def result_message(best_diff):
    """The message sent at the end of a round; best_diff must not be negative."""
    if best_diff < 0:
        raise ValueError(f"difference cannot be negative: {best_diff}")
    exact = best_diff == 0
    return EXACT_REPLY if exact else CLOSE_REPLY


@dataclass(frozen=True)
class RoundResult:
    """What happened in one round."""

    number: int
    best_guess: int | None
    best_diff: int
    message: str | None
    reply_to: tuple | None
    late_address: tuple | None


class UDPGuessServer:
    """Plays timed rounds of the guessing game on one UDP socket."""

    def __init__(
        self,
        host=None,
        port=PORT,
        rng=None,
        first_timeout=FIRST_TIMEOUT,
        min_timeout=MIN_TIMEOUT,
        late_window=LATE_WINDOW,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.first_timeout = first_timeout
        self.min_timeout = min_timeout
        self.late_window = late_window
        family, sock_type, proto, _, addr = socket.getaddrinfo(
            host, port, socket.AF_UNSPEC, socket.SOCK_DGRAM, 0, socket.AI_PASSIVE
        )[0]
        self._sock = socket.socket(family, sock_type, proto)
        try:
            self._sock.bind(addr)
        except OSError:
            self._sock.close()
            raise
        self.number = self._new_number()

    @property
    def address(self):
        """The address the server is bound to."""
        return self._sock.getsockname()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _new_number(self):
        number = self.rng.randint(1, MAX_NUMBER)
        log.info("New game started. Number: %d", number)
        return number

    def _wait(self, timeout):
        ready, _, _ = select.select([self._sock], [], [], timeout)
        return bool(ready)

    def play_round(self):
        """Play one round with the current number, then draw the next one."""
        number = self.number
        best_diff = NO_GUESS_DIFF
        best_guess = None
        sender = None
        timeout = self.first_timeout

        while True:
            log.info("Waiting for guesses (%dms)...", round(timeout * 1000))
            if not self._wait(timeout):
                break
            try:
                data, sender = self._sock.recvfrom(_BUFFER_SIZE)
            except OSError:
                continue
            guess = parse_guess(data.decode("ascii", errors="replace"))
            diff = abs(guess - number)
            log.info("Received %d", guess)
            if diff < best_diff:
                best_diff = diff
                best_guess = guess
            timeout = next_timeout(timeout, self.min_timeout)

        message = None
        if sender is not None:
            message = result_message(best_diff)
            self._send(message, sender)

        late_address = None
        if self._wait(self.late_window):
            try:
                _, late_address = self._sock.recvfrom(_BUFFER_SIZE)
            except OSError:
                late_address = None
            else:
                self._send(LATE_REPLY, late_address)

        self.number = self._new_number()
        return RoundResult(number, best_guess, best_diff, message, sender, late_address)

    def _send(self, message, address):
        try:
            self._sock.sendto(message.encode("ascii"), address)
        except OSError as exc:
            log.warning("sendto: %s", exc)

    def serve_forever(self):
        """Play rounds until interrupted."""
        while True:
            self.play_round()

    def close(self):
        """Release the socket."""
        self._sock.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the UDP number-guessing server.")
    parser.add_argument("--host", default=None, help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        server = UDPGuessServer(args.host, args.port)
    except OSError as exc:
        print(f"bind: {exc}", file=sys.stderr)
        return 1
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())