"""Number guessing games played over TCP and UDP sockets: servers and clients."""

__version__ = "0.1.0"