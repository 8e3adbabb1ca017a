"""Interactive client for the TCP number-guessing server."""

from __future__ import annotations

import argparse
import socket
import sys

from guessnet.tcp_server import CORRECT, MAX_TARGET, PORT, QUIT, encode_guess

_REPLY_SIZE = 31


def run_client(host, port=PORT, input_func=input, output=print):
    """Play against a server until the player quits or the server leaves.

    Returns the number of rounds won. Raises OSError when the server cannot
    be resolved or reached.
    """
    family, sock_type, proto, _, addr = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM
    )[0]
    wins = 0
    with socket.socket(family, sock_type, proto) as sock:
        sock.connect(addr)
        output(f"Connected to server. Guess numbers between 1 and {MAX_TARGET}.")
        while True:
            try:
                line = input_func(f"Enter your guess ({QUIT} to quit): ")
            except EOFError:
                line = str(QUIT)
            try:
                guess = int(line.strip())
                payload = encode_guess(guess)
            except ValueError:
                output("Please enter a whole number.")
                continue

            try:
                sock.sendall(payload)
            except OSError as exc:
                output(f"send: {exc}")
                break
            if guess == QUIT:
                break

            try:
                data = sock.recv(_REPLY_SIZE)
            except OSError:
                data = b""
            if not data:
                output("Disconnected from server.")
                break
            text = data.decode("ascii", errors="replace")
            output(f"Server says: {text}")
            if text == CORRECT:
                wins += 1
                output("You won! Starting new round...")
    return wins


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play the TCP number-guessing game.")
    parser.add_argument("host", nargs="?", help="server address")
    parser.add_argument("--port", type=int, default=PORT, help="server port")
    args = parser.parse_args(argv)

    try:
        host = args.host or input("Enter server IP: ").strip()
        run_client(host, args.port)
    except (EOFError, KeyboardInterrupt):
        return 0
    except OSError as exc:
        print(f"connect: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())