"""
Single-port liveness probes.

TCP is a plain connect() with a timeout. UDP has no handshake, so openness is
guessed from whether datagrams can be sent at all: the kernel only refuses a
send once it has seen an ICMP port-unreachable (or cannot route / resolve the
target). A successful send does NOT mean a service is listening, so many UDP
ports report open that are really closed or filtered. That is a known
limitation of this probe, not something callers should try to correct for.
"""
from __future__ import annotations

import logging
import socket

from .models import Protocol, ScanRequest, ScanResult, Status

DIAL_TIMEOUT_S = 1.0
UDP_PROBE_COUNT = 10

logger = logging.getLogger(__name__)


def probe_tcp(host: str, port: int, timeout: float = DIAL_TIMEOUT_S) -> Status:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return Status.OPEN
    except (socket.timeout, ConnectionRefusedError, OSError, ValueError) as e:
        # ValueError covers host names that cannot be IDNA-encoded
        logger.debug("tcp probe %s:%d failed: %s", host, port, e)
        return Status.CLOSED


def probe_udp(
    host: str,
    port: int,
    timeout: float = DIAL_TIMEOUT_S,
    attempts: int = UDP_PROBE_COUNT,
) -> Status:
    try:
        family, type_, proto, _, addr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
    except (OSError, ValueError) as e:
        logger.debug("udp probe %s:%d could not resolve: %s", host, port, e)
        return Status.CLOSED

    sent = 0
    try:
        with socket.socket(family, type_, proto) as sock:
            sock.settimeout(timeout)
            sock.connect(addr)
            for _ in range(attempts):
                try:
                    sock.send(b"")
                    sent += 1
                except OSError as e:
                    logger.debug("udp probe %s:%d send failed: %s", host, port, e)
    except OSError as e:
        logger.debug("udp probe %s:%d failed: %s", host, port, e)

    return Status.OPEN if sent > 0 else Status.CLOSED


def probe(request: ScanRequest, timeout: float = DIAL_TIMEOUT_S) -> ScanResult:
    if request.protocol is Protocol.UDP:
        status = probe_udp(request.host, request.port, timeout=timeout)
    else:
        status = probe_tcp(request.host, request.port, timeout=timeout)

    return ScanResult(
        host=request.host,
        port=request.port,
        protocol=request.protocol,
        status=status,
    )
