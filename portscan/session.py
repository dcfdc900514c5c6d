"""
Scan session: wires dispatcher -> request queue -> workers -> results queue
-> listener, and tears everything down in order.

States:
  IDLE -> DISPATCHING   queues created, listener + workers started, ports enqueued
  DISPATCHING -> DRAINING   every request completed, request queue closed
  DRAINING -> CLOSED   workers joined, results queue closed, listener joined

Shutdown only ever waits on Queue.join() and the pool futures. run() does not
return while any pool thread is still alive, and a worker or listener that
died is reported as ScanError instead of a short result list.
"""
from __future__ import annotations

import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Callable, List, Optional

from .dispatcher import dispatch
from .errors import ScanError
from .listener import listen
from .models import PortRange, Protocol, ScanRequest, ScanResult
from .output import format_summary
from .pool import CLOSE, MAX_WORKERS, ProbeFn, pool_size, run_worker
from .prober import DIAL_TIMEOUT_S, probe

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    CLOSED = "closed"


class ScanSession:
    def __init__(
        self,
        host: str,
        port_range: PortRange,
        protocol: Protocol = Protocol.TCP,
        *,
        max_workers: int = MAX_WORKERS,
        timeout: float = DIAL_TIMEOUT_S,
        probe_fn: Optional[ProbeFn] = None,
        emit: Callable[[str], None] = print,
        report_closed: bool = False,
    ):
        if not host:
            raise ValueError("host must be specified")

        self.host = host
        self.port_range = port_range
        self.protocol = protocol
        self.worker_count = pool_size(port_range, cap=max_workers)
        self.timeout = timeout
        self.probe_fn = probe_fn or self._default_probe
        self.emit = emit
        self.report_closed = report_closed

        self.state = SessionState.IDLE
        self.dispatched = 0
        self.results: List[ScanResult] = []

        self._requests: Optional[queue.Queue] = None
        self._results: Optional[queue.Queue] = None
        self._pool: Optional[ThreadPoolExecutor] = None
        self._workers: List[Future] = []
        self._listener: Optional[Future] = None
        self._requests_closed = False
        self._results_closed = False

    @property
    def completed(self) -> int:
        return len(self.results)

    def _default_probe(self, request: ScanRequest) -> ScanResult:
        return probe(request, timeout=self.timeout)

    def _spawn(self, fn: Callable[..., object], *args) -> Future:
        return self._pool.submit(fn, *args)

    def _close_requests(self) -> None:
        if self._requests_closed:
            raise ScanError("request queue already closed")
        self._requests_closed = True
        for _ in self._workers:
            self._requests.put(CLOSE)

    def _close_results(self) -> None:
        if self._results_closed:
            raise ScanError("results queue already closed")
        self._results_closed = True
        self._results.put(CLOSE)

    def _drain(self) -> None:
        self.state = SessionState.DRAINING
        self._close_requests()
        wait(self._workers)

        if self._listener is not None:
            self._close_results()
            wait([self._listener])
        self._pool.shutdown(wait=True)
        self.state = SessionState.CLOSED

    def _start(self) -> None:
        self._listener = self._spawn(listen, self._results, self.emit, self.report_closed)
        for _ in range(self.worker_count):
            self._workers.append(self._spawn(run_worker, self._requests, self._results, self.probe_fn))

    def _collect(self) -> List[ScanResult]:
        """
        Re-raise anything that killed a worker or the listener, so a lost
        report never looks like a finished scan.
        """
        try:
            for fut in self._workers:
                fut.result()
            return self._listener.result()
        except Exception as e:
            logger.error("scan did not complete: %r", e)
            raise ScanError(f"scan did not complete: {e!r}") from e

    def run(self) -> List[ScanResult]:
        if self.state is not SessionState.IDLE:
            raise ScanError(f"scan session already {self.state.value}")

        self._requests = queue.Queue(maxsize=self.worker_count)
        self._results = queue.Queue()
        self._pool = ThreadPoolExecutor(max_workers=self.worker_count + 1, thread_name_prefix="portscan")
        self.state = SessionState.DISPATCHING

        logger.info(
            "Scanning %s ports %d-%d/%s with %d workers",
            self.host,
            self.port_range.start,
            self.port_range.end,
            self.protocol.value,
            self.worker_count,
        )

        try:
            self._start()
        except (RuntimeError, MemoryError) as e:
            logger.error("could not start scan threads: %s", e)
            # drop any submitted job that never got a thread before draining
            self._pool.shutdown(wait=False, cancel_futures=True)
            self._drain()
            raise ScanError(f"could not start scan threads: {e}") from e

        self.dispatched = dispatch(self.host, self.port_range, self.protocol, self._requests)
        self._requests.join()
        self._drain()
        self.results = self._collect()

        logger.info("%s (%d dispatched)", format_summary(self.results), self.dispatched)
        return self.results


def scan_ports(
    host: str,
    port_range: PortRange,
    protocol: Protocol = Protocol.TCP,
    **kwargs,
) -> List[ScanResult]:
    return ScanSession(host, port_range, protocol, **kwargs).run()
