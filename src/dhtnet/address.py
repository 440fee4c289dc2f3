# address.py

import ipaddress
import socket
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Optional, Union

from loguru import logger

from . import _resolver
from ._resolver import SockAddr
from .errors import (
    InvalidHostError,
    InvalidPortError,
    ParseError,
    ResolutionError,
)

IPAddress = Union[IPv4Address, IPv6Address]

MIN_PORT: int = 1
MAX_PORT: int = 65535


@dataclass(frozen=True, eq=False, slots=True)
class Address:
    """
    An immutable network endpoint: an IP address and a port.

    This is the form used everywhere an endpoint is stored or compared
    (mapping keys, routing entries). Convert to a socket address with
    `sockaddr` only at the point of network I/O.

    Attributes:
        ip (IPv4Address | IPv6Address): The endpoint's address. Strings
            are parsed on construction.
        port (int): The endpoint's port, 1-65535.

    Equality and hashing treat an IPv4-mapped IPv6 address as the IPv4
    address it maps, so ``1.2.3.4:6881`` and ``[::ffff:1.2.3.4]:6881`` are
    the same endpoint.
    """
    ip: IPAddress
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.ip, (IPv4Address, IPv6Address)):
            # ip_address also takes ints, which are not address text
            if not isinstance(self.ip, str):
                raise ParseError(f"Invalid IP address: {self.ip!r}")
            try:
                ip = ipaddress.ip_address(self.ip)
            except ValueError as e:
                raise ParseError(f"Invalid IP address: {self.ip!r}") from e
            object.__setattr__(self, 'ip', ip)
        _check_port(self.port)



    def unmapped(self) -> "Address":
        """
        Returns this endpoint with an IPv4-mapped IPv6 address unmapped.

        Returns:
            Address: ``self`` if there is nothing to unmap.
        """
        ip = _unmap(self.ip)
        if ip is self.ip:
            return self
        return Address(ip, self.port)



    @property
    def sockaddr(self) -> SockAddr:
        """The socket address tuple for this endpoint.

        ``(host, port)`` for IPv4, ``(host, port, flowinfo, scope_id)`` for
        IPv6, as accepted by ``socket.sendto`` and friends.
        """
        if self.ip.version == 4:
            return (str(self.ip), self.port)
        host, _, scope = str(self.ip).partition('%')
        return (host, self.port, 0, _scope_index(scope))



    def __eq__(self, other: Any) -> bool:
        return compare_addresses(self, other)



    def __hash__(self) -> int:
        return hash((_unmap(self.ip), self.port))



    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


def validate_host_port(host: str, port: int) -> None:
    """Checks a host/port pair without doing any I/O.

    The host is checked before the port, so an empty host is reported even
    when the port is also invalid.

    Args:
        host: IP literal or host name.
        port: Port number.

    Raises:
        InvalidHostError: host is empty.
        InvalidPortError: port is not an int in 1-65535.
    """
    if not isinstance(host, str) or not host:
        raise InvalidHostError("Invalid host")
    _check_port(port)


def create_udp_addr(host: str, port: int) -> SockAddr:
    """Builds a socket address for sending UDP datagrams to host:port.

    IP literals are converted without touching DNS; anything else is
    looked up with the system resolver, which may block.

    Args:
        host: IP literal or host name.
        port: Port number.

    Returns:
        The first IPv4 socket address the resolver offers, or its first
        IPv6 one when the host has no IPv4 address.

    Raises:
        InvalidHostError: host is empty.
        InvalidPortError: port is out of range.
        ResolutionError: host could not be resolved.
    """
    validate_host_port(host, port)
    numeric = _parse_ip(host) is not None
    return _resolver.lookup(host, port, numeric=numeric,
                            prefer_ipv4=True)[0]


def create_addr_port(host: str, port: int) -> Address:
    """Builds an Address from a host and port.

    If host is not an IP literal it is looked up (blocking) and the first
    resolved address is used.

    Raises:
        InvalidHostError: host is empty.
        InvalidPortError: port is out of range.
        ResolutionError: host could not be resolved.
        ParseError: the resolved address could not be parsed.
    """
    validate_host_port(host, port)
    ip = _parse_ip(host)
    if ip is None:
        ip = _first_ip(host, _resolver.lookup(host))
    return Address(ip, port)


async def resolve_addr_port(host: str,
                            port: int,
                            timeout: Optional[float] = None,
) -> Address:
    """Async version of `create_addr_port`.

    The lookup runs in the event loop's executor. Cancelling or timing
    out abandons the await; the blocking lookup itself runs to completion.

    Args:
        host: IP literal or host name.
        port: Port number.
        timeout: Seconds to wait for the lookup; None waits indefinitely.

    Raises:
        InvalidHostError: host is empty.
        InvalidPortError: port is out of range.
        ResolutionError: host could not be resolved before the timeout.
        ParseError: the resolved address could not be parsed.
    """
    validate_host_port(host, port)
    ip = _parse_ip(host)
    if ip is None:
        ip = _first_ip(host, await _resolver.lookup_async(host,
                                                          timeout=timeout))
    return Address(ip, port)


def parse_addr_port(text: str) -> Address:
    """Parses ``ip:port`` or ``[ipv6]:port`` into an Address. No DNS.

    Raises:
        ParseError: text is not a literal address and port.
        InvalidPortError: the port is out of range.
    """
    host, sep, port_text = text.rpartition(':')
    if not sep or not host:
        raise ParseError(f"Missing port in address: {text!r}")

    bracketed = host.startswith('[') and host.endswith(']')
    if bracketed:
        host = host[1:-1]
    elif ':' in host:
        raise ParseError(f"IPv6 address must be bracketed: {text!r}")

    if not (port_text.isascii() and port_text.isdigit()):
        raise ParseError(f"Invalid port in address: {text!r}")

    ip = _parse_ip(host)
    if ip is None or (bracketed and ip.version != 6):
        raise ParseError(f"Invalid IP in address: {text!r}")
    return Address(ip, int(port_text))


def format_sockaddr(sockaddr: SockAddr) -> str:
    """Renders a socket address tuple as ``host:port`` (IPv6 bracketed)."""
    host, port = sockaddr[0], sockaddr[1]
    if ':' in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def compare_addresses(a: Any, b: Any) -> bool:
    """
    Checks whether two Addresses are the same network endpoint.

    IPv4-mapped IPv6 addresses are unmapped before comparing, so a peer
    reported as ``[::ffff:1.2.3.4]:6881`` matches ``1.2.3.4:6881``.

    Args:
        a (Address): First endpoint.
        b (Address): Second endpoint.

    Returns:
        bool: True if ports and unmapped addresses match. Anything that is
            not an Address (including None) compares unequal.
    """
    if not isinstance(a, Address) or not isinstance(b, Address):
        return False
    return a.port == b.port and _unmap(a.ip) == _unmap(b.ip)


def _check_port(port: Any) -> None:
    # bool is an int subclass, but True is not port 1
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidPortError("Invalid port")
    if port < MIN_PORT or port > MAX_PORT:
        raise InvalidPortError("Invalid port")


def _parse_ip(host: str) -> Optional[IPAddress]:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


def _unmap(ip: IPAddress) -> IPAddress:
    if isinstance(ip, IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _first_ip(host: str, sockaddrs: list[SockAddr]) -> IPAddress:
    text = sockaddrs[0][0]
    try:
        return ipaddress.ip_address(text)
    except ValueError as e:
        logger.debug("{} resolved to unparsable address {!r}", host, text)
        raise ParseError(
            f"{host!r} resolved to unparsable address {text!r}"
        ) from e


def _scope_index(scope: str) -> int:
    if not scope:
        return 0
    if scope.isdigit():
        return int(scope)
    try:
        return socket.if_nametoindex(scope)
    except OSError as e:
        raise ResolutionError(f"Unknown interface: {scope!r}") from e
