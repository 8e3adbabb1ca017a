# guessnet

Two small number guessing games played over the network: one over TCP, one
over UDP. Both servers listen on port 8888 by default. The package has no
dependencies beyond the Python standard library.

## Install

```
pip install .
```

## TCP game

Every connected player gets their own secret number between 1 and 1,000,000.
Each guess is sent as a 4-byte big-endian signed integer and the server
answers `Hoger` (higher), `Lager` (lower) or `Correct`. After a correct guess
a new number is drawn for that player and the next round starts at once.
Sending `-1` leaves the game. The server handles many players at once.

Start the server:

```
guessnet-tcp-server [--host HOST] [--port PORT]
```

By default it binds to all addresses. Connections, disconnections and
departures are logged to standard output.

Play against it:

```
guessnet-tcp-client [HOST] [--port PORT]
```

If no host is given, the client asks for the server address. It then asks
for guesses until you enter `-1`, end the input, or the server goes away.
Input that is not a whole number is refused and asked for again.

## UDP game

The server draws a number between 1 and 100 and collects guesses from any
player. It waits 8 seconds for the first guess; after each guess the waiting
time is halved, never below half a second. When no more guesses arrive in
time, the sender of the last guess is told `You won !` if the closest guess
was exact, or `You won ?` otherwise (nothing is sent if no guess came in).
The server then waits up to 16 seconds for one late guess and answers it
with `You lost !`. Then a new round starts with a new number.

Guesses are read as text: a leading integer is taken, and text without one
counts as 0.

Start the server:

```
guessnet-udp-server [--host HOST] [--port PORT]
```

Play against it:

```
guessnet-udp-client [HOST] [--port PORT]
```

If no host is given, the client asks for the server address. Every
whitespace-separated word you type is sent as one guess; for each one the
client waits up to 16 seconds for an answer and prints `You lost ?` if none
comes. The client stops when the input ends.

## Using the library

The servers can also be run from Python, for instance with a seeded random
generator:

```python
import random
from guessnet.tcp_server import TCPGuessServer

with TCPGuessServer("127.0.0.1", 8888, random.Random(1)) as server:
    server.serve_forever()
```

`TCPGuessServer.serve_once(timeout)` waits for activity once, handles it and
returns the number of events; `address` gives the address it listens on.
`GuessSession.handle_guess(guess)` returns the reply for one guess, and
`encode_guess` / `decode_guess` convert guesses to and from their 4-byte
form.

`guessnet.udp_server.UDPGuessServer(host, port, rng, first_timeout,
min_timeout, late_window)` works the same way as a context manager. Its
`play_round()` method plays a single round and returns a `RoundResult` with
the number, the best guess and its difference, the message sent, who it was
sent to, and the address of a late guess if there was one. The helpers
`parse_guess`, `next_timeout` and `result_message` are available too.

The clients are available as `guessnet.tcp_client.run_client` and
`guessnet.udp_client.run_client`, which take the host, the port, an input
function and an output function; the TCP one returns the number of rounds
won.

## Tests

```
pip install .[test]
pytest
```