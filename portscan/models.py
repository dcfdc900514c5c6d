from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .errors import PortRangeError

MIN_PORT = 1
MAX_PORT = 65535


class Protocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"


class Status(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class PortRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if not (MIN_PORT <= self.start <= self.end <= MAX_PORT):
            raise PortRangeError(f"Invalid port range: {self.start}-{self.end}")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def ports(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    @property
    def is_single(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class ScanRequest:
    host: str
    port: int
    protocol: Protocol


@dataclass(frozen=True)
class ScanResult:
    host: str
    port: int
    protocol: Protocol
    status: Status

    @property
    def is_open(self) -> bool:
        return self.status is Status.OPEN
