"""Interactive client for the UDP number-guessing server."""

from __future__ import annotations

import argparse
import socket
import sys

from guessnet.udp_server import LATE_WINDOW, PORT

_BUFFER_SIZE = 999
NO_REPLY = "You lost ?"


def run_client(host, port=PORT, input_func=input, output=print, timeout=LATE_WINDOW):
    """Send guesses and print the server's answers until input runs out.

    Every whitespace-separated word typed is sent as one guess. When no
    answer arrives within the timeout the player is told they lost.
    """
    family, sock_type, proto, _, addr = socket.getaddrinfo(
        host, port, socket.AF_UNSPEC, socket.SOCK_DGRAM
    )[0]
    with socket.socket(family, sock_type, proto) as sock:
        sock.settimeout(timeout)
        while True:
            try:
                line = input_func("Enter guess: ")
            except EOFError:
                break
            for word in line.split():
                sock.sendto(word.encode("utf-8"), addr)
                try:
                    data, _ = sock.recvfrom(_BUFFER_SIZE)
                except OSError:
                    output(NO_REPLY)
                else:
                    output(f"Server: {data.decode('utf-8', errors='replace')}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play the UDP number-guessing game.")
    parser.add_argument("host", nargs="?", help="server address")
    parser.add_argument("--port", type=int, default=PORT, help="server port")
    args = parser.parse_args(argv)

    try:
        host = args.host or input("Server IP: ").strip()
        run_client(host, args.port)
    except (EOFError, KeyboardInterrupt):
        return 0
    except OSError as exc:
        print(f"getaddrinfo: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())