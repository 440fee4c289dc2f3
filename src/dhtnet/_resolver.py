"""_resolver.py: host name lookups backing the address builders."""
import asyncio
import socket
from typing import Any, List, Optional, Tuple

from loguru import logger

from .errors import ResolutionError

SockAddr = Tuple[Any, ...]


def lookup(host: str,
           port: Optional[int] = None,
           numeric: bool = False,
           prefer_ipv4: bool = False,
) -> List[SockAddr]:
    """Resolves a host to the socket addresses a UDP socket could use.

    Args:
        host: IP literal or host name.
        port: Port to fill into the returned addresses (0 when omitted).
        numeric: Only accept IP literals; no DNS query is made.
        prefer_ipv4: Move IPv4 results ahead of IPv6 ones, keeping the
            resolver's order within each family.

    Returns:
        Socket address tuples, in the order the system resolver ranks them
        (IPv4 first when prefer_ipv4 is set).

    Raises:
        ResolutionError: The host could not be resolved.
    """
    flags = socket.AI_NUMERICHOST if numeric else 0
    try:
        infos = socket.getaddrinfo(host, port,
                                   type=socket.SOCK_DGRAM, flags=flags)
    except (OSError, UnicodeError) as e:
        logger.debug("lookup of {} failed: {}", host, e)
        raise ResolutionError(f"Cannot resolve {host!r}: {e}") from e
    return _sockaddrs(host, infos, prefer_ipv4=prefer_ipv4)


async def lookup_async(host: str,
                       port: Optional[int] = None,
                       timeout: Optional[float] = None,
) -> List[SockAddr]:
    """Resolves a host on the running event loop, bounded by a timeout.

    Cancelling the awaiting task, or hitting the timeout, abandons the
    await only; the blocking lookup keeps running in the executor thread
    until the system resolver returns.

    Raises:
        ResolutionError: The host could not be resolved in time.
    """
    loop = asyncio.get_running_loop()
    try:
        infos = await asyncio.wait_for(
            loop.getaddrinfo(host, port, type=socket.SOCK_DGRAM),
            timeout,
        )
    except asyncio.TimeoutError as e:
        logger.debug("lookup of {} timed out after {}s", host, timeout)
        raise ResolutionError(
            f"Timed out resolving {host!r} after {timeout}s"
        ) from e
    except (OSError, UnicodeError) as e:
        logger.debug("lookup of {} failed: {}", host, e)
        raise ResolutionError(f"Cannot resolve {host!r}: {e}") from e
    return _sockaddrs(host, infos)


def _sockaddrs(host: str,
               infos: List[Tuple[Any, ...]],
               prefer_ipv4: bool = False,
) -> List[SockAddr]:
    infos = [info for info in infos
             if info[0] in (socket.AF_INET, socket.AF_INET6)]
    if prefer_ipv4:
        # sorted is stable, so resolver order holds within a family
        infos = sorted(infos, key=lambda info: info[0] != socket.AF_INET)
    addrs = [info[4] for info in infos]
    if not addrs:
        logger.debug("lookup of {} returned no IP addresses", host)
        raise ResolutionError(f"No addresses found for {host!r}")
    logger.debug("resolved {} to {}", host, addrs[0][0])
    return addrs
