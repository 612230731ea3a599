"""Host-side services for streaming games: settings, pairing, HTTPS server, heartbeat and stream helper."""

__version__ = "1.0.0"