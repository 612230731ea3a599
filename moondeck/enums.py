"""Enumerations shared by the PC control, streaming and server parts."""

from __future__ import annotations

import ssl
from enum import Enum


class PcState(Enum):
    """Power state the PC is transitioning into."""

    NORMAL = "Normal"
    RESTARTING = "Restarting"
    SHUTTING_DOWN = "ShuttingDown"
    SUSPENDING = "Suspending"


class StreamState(Enum):
    """State of the streaming helper process."""

    NOT_STREAMING = "NotStreaming"
    STREAMING = "Streaming"
    STREAM_ENDING = "StreamEnding"


class SslProtocol(Enum):
    """TLS protocol selection accepted in the settings file."""

    SECURE_PROTOCOLS = "SecureProtocols"
    TLS_V1_2 = "TlsV1_2"
    TLS_V1_2_OR_LATER = "TlsV1_2OrLater"
    TLS_V1_3 = "TlsV1_3"
    TLS_V1_3_OR_LATER = "TlsV1_3OrLater"

    @classmethod
    def from_name(cls, value: object) -> SslProtocol | None:
        """Return the protocol named by ``value`` or None if it is not a known name."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def version_range(self) -> tuple[ssl.TLSVersion, ssl.TLSVersion]:
        """Minimum and maximum TLS versions this selection allows."""
        return _VERSION_RANGES[self]


_VERSION_RANGES = {
    SslProtocol.SECURE_PROTOCOLS: (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.MAXIMUM_SUPPORTED),
    SslProtocol.TLS_V1_2: (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.TLSv1_2),
    SslProtocol.TLS_V1_2_OR_LATER: (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.MAXIMUM_SUPPORTED),
    SslProtocol.TLS_V1_3: (ssl.TLSVersion.TLSv1_3, ssl.TLSVersion.TLSv1_3),
    SslProtocol.TLS_V1_3_OR_LATER: (ssl.TLSVersion.TLSv1_3, ssl.TLSVersion.MAXIMUM_SUPPORTED),
}