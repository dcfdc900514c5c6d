from __future__ import annotations

import re

from .errors import PortRangeError
from .models import PortRange

DEFAULT_RANGE = PortRange(1, 1023)

_RANGE = re.compile(r"(\d*)-(\d*)")
_SINGLE = re.compile(r"\d+")


def parse_port_range(spec: str) -> PortRange:
    """
    Parses a port specification string into a PortRange.
    Supports:
    - Single ports: "80"
    - Ranges: "1-1024"
    An empty side of a range counts as 0, so "-1023" and "8000-" are
    rejected rather than widened.
    """
    spec = spec.strip()

    m = _RANGE.fullmatch(spec)
    if m:
        start = int(m.group(1) or 0)
        end = int(m.group(2) or 0)
        if start < 1 or end < start:
            raise PortRangeError(f"Invalid format for port range: {spec!r}")
        return PortRange(start, end)

    if _SINGLE.fullmatch(spec):
        p = int(spec)
        return PortRange(p, p)

    raise PortRangeError(f"Invalid format for port range: {spec!r}")
