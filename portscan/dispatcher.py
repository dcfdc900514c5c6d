from __future__ import annotations

import queue

from .models import PortRange, Protocol, ScanRequest


def dispatch(host: str, port_range: PortRange, protocol: Protocol, requests: queue.Queue) -> int:
    """
    Enqueue one request per port, ascending. put() blocks while the queue is
    full and bumps the queue's unfinished-task count, which is what the
    session waits on.
    """
    count = 0
    for port in port_range.ports():
        requests.put(ScanRequest(host=host, port=port, protocol=protocol))
        count += 1
    return count
