import socket
import threading

import pytest

from guessnet.tcp_client import run_client
from guessnet.tcp_server import TCPGuessServer, decode_guess

CONNECTED = "Connected to server. Guess numbers between 1 and 1000000."


def _scripted(lines):
    it = iter(lines)

    def fake_input(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


def _recv_exactly(sock, size):
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            return None
        data += chunk
    return data


class _FakeServer:
    def __init__(self, replies):
        self.listener = socket.create_server(("127.0.0.1", 0))
        self.port = self.listener.getsockname()[1]
        self.received = []
        self._replies = list(replies)
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()

    def _run(self):
        conn, _ = self.listener.accept()
        with conn:
            replies = iter(self._replies)
            while True:
                frame = _recv_exactly(conn, 4)
                if frame is None:
                    return
                guess = decode_guess(frame)
                self.received.append(guess)
                if guess == -1:
                    return
                reply = next(replies, None)
                if reply is None:
                    return
                conn.sendall(reply)

    def finish(self):
        self.thread.join(5)
        self.listener.close()


class _Seq:
    def __init__(self, *values):
        self._values = iter(values)

    def randint(self, low, high):
        return next(self._values)


def test_plays_and_reports_win():
    server = _FakeServer([b"Hoger", b"Correct"])
    output = []
    wins = run_client("127.0.0.1", server.port, _scripted(["10", "20", "-1"]), output.append)
    server.finish()
    assert server.received == [10, 20, -1]
    assert output == [
        CONNECTED,
        "Server says: Hoger",
        "Server says: Correct",
        "You won! Starting new round...",
    ]
    assert wins == 1


def test_invalid_input_is_rejected():
    server = _FakeServer([])
    output = []
    run_client("127.0.0.1", server.port, _scripted(["abc", "-1"]), output.append)
    server.finish()
    assert server.received == [-1]
    assert output == [CONNECTED, "Please enter a whole number."]


def test_server_disconnect_ends_game():
    server = _FakeServer([])
    output = []
    wins = run_client("127.0.0.1", server.port, _scripted(["5", "6"]), output.append)
    server.finish()
    assert server.received == [5]
    assert output[-1] == "Disconnected from server."
    assert wins == 0


def test_end_of_input_quits():
    server = _FakeServer([b"Lager"])
    output = []
    run_client("127.0.0.1", server.port, _scripted(["7"]), output.append)
    server.finish()
    assert server.received == [7, -1]
    assert output == [CONNECTED, "Server says: Lager"]


def test_connection_refused_raises():
    probe = socket.create_server(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(OSError):
        run_client("127.0.0.1", port, _scripted([]), lambda line: None)


def test_against_real_server():
    server = TCPGuessServer("127.0.0.1", 0, _Seq(500, 7))
    stop = threading.Event()

    def loop():
        while not stop.is_set():
            server.serve_once(0.05)

    thread = threading.Thread(target=loop, daemon=True)
    thread.start()
    output = []
    try:
        wins = run_client(
            "127.0.0.1",
            server.address[1],
            _scripted(["100", "900", "500", "-1"]),
            output.append,
        )
    finally:
        stop.set()
        thread.join(5)
        server.close()
    assert output[1:4] == ["Server says: Hoger", "Server says: Lager", "Server says: Correct"]
    assert wins == 1