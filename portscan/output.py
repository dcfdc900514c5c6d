from __future__ import annotations

from typing import List

from .models import ScanResult


def format_open(r: ScanResult) -> str:
    return f"opening {r.port}/{r.protocol.value} port."


def format_closed(r: ScanResult) -> str:
    return f"{r.port}/{r.protocol.value} port is closed."


def format_summary(results: List[ScanResult]) -> str:
    open_count = sum(1 for r in results if r.is_open)
    return f"Scanned {len(results)} ports, found {open_count} open"
