from __future__ import annotations

import logging
import queue
from typing import Callable

from .models import PortRange, ScanRequest, ScanResult, Status
from .prober import probe

MAX_WORKERS = 100

# Put on a queue once per consumer to tell it no more items will follow.
CLOSE = object()

ProbeFn = Callable[[ScanRequest], ScanResult]

logger = logging.getLogger(__name__)


def pool_size(port_range: PortRange, cap: int = MAX_WORKERS) -> int:
    """
    Never more workers than ports, never more than `cap`.
    """
    if cap < 1:
        raise ValueError("worker cap must be >= 1")
    return min(cap, len(port_range))


def _safe_probe(probe_fn: ProbeFn, request: ScanRequest) -> ScanResult:
    try:
        return probe_fn(request)
    except Exception:
        logger.exception("probe crashed for %s:%d/%s", request.host, request.port, request.protocol.value)
        return ScanResult(
            host=request.host,
            port=request.port,
            protocol=request.protocol,
            status=Status.CLOSED,
        )


def run_worker(requests: queue.Queue, results: queue.Queue, probe_fn: ProbeFn = probe) -> None:
    """
    Pull requests until CLOSE arrives. Each request is marked done only after
    its result is on the results queue, so requests.join() returning means
    every result has been handed to the listener.
    """
    while True:
        request = requests.get()
        if request is CLOSE:
            requests.task_done()
            break

        try:
            results.put(_safe_probe(probe_fn, request))
        finally:
            requests.task_done()
