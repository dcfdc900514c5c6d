class PortScanError(Exception):
    """Base class for errors raised by portscan."""


class PortRangeError(PortScanError, ValueError):
    """Port or port-range input that fails validation."""


class ScanError(PortScanError, RuntimeError):
    """
    The scan session could not run to completion
    (thread spawn failure, double close, session reuse).
    """
