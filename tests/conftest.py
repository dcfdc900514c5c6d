import socket

import pytest

from portscan.models import Protocol, ScanRequest, ScanResult, Status


@pytest.fixture
def tcp_listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(50)
    try:
        yield srv.getsockname()[1]
    finally:
        srv.close()


def _port_is_free(port):
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False
    finally:
        s.close()


@pytest.fixture
def listener_between_closed_ports():
    """A tcp listener on port N where nothing is bound to N-1 or N+1."""
    for _ in range(20):
        srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        srv.bind(("127.0.0.1", 0))
        port = srv.getsockname()[1]
        if port < 65535 and _port_is_free(port - 1) and _port_is_free(port + 1):
            srv.listen(50)
            try:
                yield port
            finally:
                srv.close()
            return
        srv.close()
    pytest.skip("no free port pair around an ephemeral port")


@pytest.fixture
def udp_listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    srv.bind(("127.0.0.1", 0))
    srv.settimeout(2.0)
    try:
        yield srv
    finally:
        srv.close()


@pytest.fixture
def closed_port():
    # bound then released: nothing is listening there afterwards
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def fake_probe():
    """Factory for a deterministic probe that reports `open_ports` as open."""

    def _factory(open_ports):
        def _probe(request: ScanRequest) -> ScanResult:
            status = Status.OPEN if request.port in open_ports else Status.CLOSED
            return ScanResult(request.host, request.port, request.protocol, status)

        return _probe

    return _factory


@pytest.fixture
def make_result():
    def _make(port, status=Status.OPEN, protocol=Protocol.TCP, host="127.0.0.1"):
        return ScanResult(host, port, protocol, status)

    return _make
