from __future__ import annotations

import queue
from typing import Callable, List

from .models import ScanResult
from .output import format_closed, format_open
from .pool import CLOSE


def listen(
    results: queue.Queue,
    emit: Callable[[str], None] = print,
    report_closed: bool = False,
) -> List[ScanResult]:
    """
    Sole consumer of the results queue and sole writer of report lines.
    Returns everything received, in completion order.
    """
    received: List[ScanResult] = []
    while True:
        r = results.get()
        if r is CLOSE:
            break

        received.append(r)
        if r.is_open:
            emit(format_open(r))
        elif report_closed:
            emit(format_closed(r))
    return received
