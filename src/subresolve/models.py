"""Report data models and the state shared by resolution workers."""

import ipaddress
import threading
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from tqdm import tqdm

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Address:
    ip: IPAddress

    @classmethod
    def from_text(cls, text):
        return cls(ipaddress.ip_address(text))

    def __str__(self):
        return str(self.ip)


@dataclass(frozen=True)
class Subdomain:
    name: str
    addresses: Tuple[Address, ...]


@dataclass
class RootDomain:
    name: str
    addresses: List[Address] = field(default_factory=list)
    subdomains: List[Subdomain] = field(default_factory=list)


class DomainReport:
    """
    Lock-guarded owner of the RootDomain while the worker pool is running.

    Workers only ever append; the critical section is the append plus the
    found counter bump. finalize() hands the RootDomain over once the pool
    has been joined and drops the report's own reference to it.
    """

    def __init__(self, root):
        self._root = root
        self.name = root.name
        self.found_count = 0
        self.data_lock = threading.Lock()
        self._finalized = False

    def add_subdomain(self, subdomain):
        with self.data_lock:
            if self._finalized:
                raise RuntimeError(f"Report for {self.name} is finalized; cannot add {subdomain.name}")
            self._root.subdomains.append(subdomain)
            self.found_count += 1

    def finalize(self):
        with self.data_lock:
            if self._finalized:
                raise RuntimeError(f"Report for {self.name} was already finalized")
            self._finalized = True
            root, self._root = self._root, None
        return root


class ProgressTracker:
    BAR_FORMAT = "{desc} [{elapsed}] |{bar:40}| {n_fmt}/{total_fmt} ({remaining})"

    def __init__(self, total, enabled=True, desc="Resolving"):
        self.count = 0
        self._lock = threading.Lock()
        self._bar = tqdm(total=total, desc=desc, unit="host", bar_format=self.BAR_FORMAT,
                         disable=not enabled, leave=True)

    def advance(self):
        with self._lock:
            self.count += 1
            self._bar.update(1)
            return self.count

    def finish(self):
        with self._lock:
            self._bar.close()
