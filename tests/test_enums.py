import ssl

import pytest

from moondeck.enums import PcState, SslProtocol, StreamState


def test_pc_state_round_trip():
    values = ["Normal", "Restarting", "ShuttingDown", "Suspending"]
    assert [PcState(value).value for value in values] == values
    assert [PcState(value) for value in values] == list(PcState)


def test_stream_state_round_trip():
    values = ["NotStreaming", "Streaming", "StreamEnding"]
    assert [StreamState(value).value for value in values] == values
    assert [StreamState(value) for value in values] == list(StreamState)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("SecureProtocols", SslProtocol.SECURE_PROTOCOLS),
        ("TlsV1_2", SslProtocol.TLS_V1_2),
        ("TlsV1_2OrLater", SslProtocol.TLS_V1_2_OR_LATER),
        ("TlsV1_3", SslProtocol.TLS_V1_3),
        ("TlsV1_3OrLater", SslProtocol.TLS_V1_3_OR_LATER),
    ],
)
def test_from_name_known(name, expected):
    assert SslProtocol.from_name(name) is expected


@pytest.mark.parametrize("name", ["bogus", "tlsv1_2", "", None, 5])
def test_from_name_unknown(name):
    assert SslProtocol.from_name(name) is None


def test_version_range_exact():
    assert SslProtocol.from_name("TlsV1_3").version_range == (ssl.TLSVersion.TLSv1_3, ssl.TLSVersion.TLSv1_3)
    assert SslProtocol.from_name("TlsV1_2").version_range == (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.TLSv1_2)


def test_version_range_or_later():
    low, high = SslProtocol.from_name("TlsV1_2OrLater").version_range
    assert low == ssl.TLSVersion.TLSv1_2
    assert high == ssl.TLSVersion.MAXIMUM_SUPPORTED
    assert SslProtocol.from_name("SecureProtocols").version_range == (low, high)