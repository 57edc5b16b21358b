import ipaddress
import socket
from dataclasses import dataclass
from typing import Tuple

import dns.exception
import dns.inet
import dns.message
import dns.name
import dns.query
import dns.rcode
import dns.rdatatype

from ..config import logger, DNS_PORT, DEFAULT_TIMEOUT, DEFAULT_RECORD_TYPE
from ..exceptions import ResolverSetupError
from ..models import Address


@dataclass(frozen=True)
class Resolved:
    addresses: Tuple[Address, ...]


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Timeout:
    pass


@dataclass(frozen=True)
class QueryError:
    detail: str


def parse_resolver_endpoint(value):
    """
    Parses 'ip:port', '[ipv6]:port' or a bare IP into (ip, port).
    Raises ValueError for anything else.
    """
    text = value.strip()
    port_text = None
    if text.startswith('['):
        host, closed, rest = text[1:].partition(']')
        if not closed or (rest and not rest.startswith(':')):
            raise ValueError(f"malformed resolver endpoint {value!r}")
        if rest:
            port_text = rest[1:]
    elif text.count(':') == 1:
        host, port_text = text.split(':')
    else:
        host = text

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"resolver endpoint {value!r} does not name an IP address") from None

    port = DNS_PORT
    if port_text is not None:
        if not port_text.isdigit() or not 0 < int(port_text) < 65536:
            raise ValueError(f"invalid port in resolver endpoint {value!r}")
        port = int(port_text)
    return str(ip), port


class ResolverClient:
    """
    One UDP socket to one resolver endpoint, reused for every query.

    A client belongs to a single worker and is not safe to share between
    threads. resolve() sends exactly one query and never retries.
    """

    def __init__(self, nameserver, port=DNS_PORT, timeout=DEFAULT_TIMEOUT, record_type=DEFAULT_RECORD_TYPE):
        self.nameserver = nameserver
        self.port = port
        self.timeout = timeout
        try:
            self.rdtype = dns.rdatatype.from_text(record_type)
            af = dns.inet.af_for_address(nameserver)
        except (ValueError, dns.exception.DNSException) as e:
            raise ResolverSetupError(f"Invalid resolver configuration {nameserver}:{port} ({record_type}): {e}") from e
        try:
            self._sock = socket.socket(af, socket.SOCK_DGRAM)
            self._sock.setblocking(False)
        except OSError as e:
            raise ResolverSetupError(f"Could not open a socket for resolver {nameserver}:{port}: {e}") from e

    def resolve(self, hostname):
        if self._sock is None:
            raise RuntimeError("ResolverClient is closed")

        try:
            qname = dns.name.from_text(hostname)
        except dns.exception.DNSException as e:
            return QueryError(f"invalid hostname {hostname!r}: {e}")

        query = dns.message.make_query(qname, self.rdtype)
        try:
            # Strays from other sources and late replies to earlier queries are skipped until the deadline
            response = dns.query.udp(query, self.nameserver, timeout=self.timeout, port=self.port,
                                     ignore_unexpected=True, ignore_errors=True, sock=self._sock)
        except dns.exception.Timeout:
            return Timeout()
        except (dns.exception.DNSException, OSError) as e:
            return QueryError(f"{type(e).__name__}: {e}")

        rcode = response.rcode()
        if rcode == dns.rcode.NXDOMAIN:
            return NotFound()
        if rcode != dns.rcode.NOERROR:
            return QueryError(f"resolver answered {dns.rcode.to_text(rcode)}")

        addresses = tuple(
            Address.from_text(rdata.address)
            for rrset in response.answer if rrset.rdtype == self.rdtype
            for rdata in rrset
        )
        return Resolved(addresses) if addresses else NotFound()

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def initialize_dns_resolver(self):
    """Opens the dedicated client used for the root domain lookup."""
    self.dns_resolver = self.resolver_factory()
    logger.debug(f" [.] Resolver client ready for {self.nameserver}:{self.port} (timeout {self.timeout}s).")
    return self.dns_resolver
