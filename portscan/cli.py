from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from . import __version__
from .errors import PortRangeError, PortScanError
from .models import Protocol
from .pool import MAX_WORKERS
from .ports import DEFAULT_RANGE, parse_port_range
from .prober import DIAL_TIMEOUT_S
from .session import ScanSession


@dataclass(frozen=True)
class BuildInfo:
    version: str = __version__
    revision: str = "unknown"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def build_parser(build: BuildInfo) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="scan", description="command-line port scan tool")
    p.add_argument("host", help="host name or IP address to scan")
    ports = p.add_mutually_exclusive_group()
    ports.add_argument("-p", "--port", help="port number")
    ports.add_argument("-r", "--port-range", help="port range. ex) 1-1023")
    p.add_argument("-u", "--udp", action="store_true", help="scan udp ports")
    p.add_argument("--timeout", type=float, default=DIAL_TIMEOUT_S, help="Probe timeout seconds (default: 1.0)")
    p.add_argument("--max-workers", type=int, default=MAX_WORKERS, help="Worker cap (default: 100)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {build.version} ({build.revision})")
    return p


def main(argv=None, build: Optional[BuildInfo] = None) -> int:
    parser = build_parser(build or BuildInfo())
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.host.strip():
        raise SystemExit("Error: host must be specified.")
    if args.timeout <= 0:
        raise SystemExit("--timeout must be > 0")
    if args.max_workers < 1:
        raise SystemExit("--max-workers must be >= 1")

    try:
        if args.port is not None:
            port_range = parse_port_range(args.port)
            if not port_range.is_single:
                raise PortRangeError(f"Invalid port: {args.port!r}")
        elif args.port_range is not None:
            port_range = parse_port_range(args.port_range)
        else:
            port_range = DEFAULT_RANGE

        session = ScanSession(
            args.host,
            port_range,
            Protocol.UDP if args.udp else Protocol.TCP,
            max_workers=args.max_workers,
            timeout=args.timeout,
            report_closed=args.port is not None,
        )
        session.run()
    except PortScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    raise SystemExit(main())
