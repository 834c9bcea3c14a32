"""Access log line formatting: caller address, request line, outcome."""
import logging
from typing import Mapping, Optional, Tuple

access_logger = logging.getLogger("tracklister.access")

RATE_LIMITED = "RateLimited"
FORWARDED_HEADERS = ("x-forwarded-for",)


def caller_address(headers: Mapping[str, str], peer: Optional[Tuple[str, int]]) -> str:
    """Forwarded-for header if a proxy set one, else the transport peer."""
    for key in FORWARDED_HEADERS:
        value = headers.get(key)
        if value:
            return value
    if peer:
        host, port = peer
        return f"{host}:{port}"
    return "-"


def request_target(path: str, query: str) -> str:
    return f"{path}?{query}" if query else path


def format_duration(seconds: float) -> str:
    return f"{seconds * 1000:.3f}ms"


def format_access_line(address: str, method: str, target: str, protocol: str, outcome: str) -> str:
    return f'({address}) "{method} {target} {protocol}" {outcome}'


def log_access(address: str, method: str, target: str, protocol: str, outcome: str) -> None:
    access_logger.info(format_access_line(address, method, target, protocol, outcome))
