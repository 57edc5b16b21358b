"""Shared fixtures: stub resolvers for the pool and a local UDP DNS responder."""

import socket
import threading
import time

import dns.message
import dns.rcode
import dns.rdatatype
import dns.rrset
import pytest

from subresolve.models import Address
from subresolve.utils.dns_utils import Resolved, NotFound, Timeout, QueryError


class StubResolver:
    """
    Deterministic resolver keyed by hostname. Values are a list of IP
    strings, or one of the outcome objects to return as is. Anything not
    listed is NotFound.
    """

    def __init__(self, answers, delay=0.0):
        self.answers = answers
        self.delay = delay
        self.queries = []
        self.closed = False

    def resolve(self, hostname):
        if self.closed:
            raise RuntimeError("resolve() on a closed stub")
        self.queries.append(hostname)
        if self.delay:
            time.sleep(self.delay)
        answer = self.answers.get(hostname)
        if answer is None:
            return NotFound()
        if isinstance(answer, (NotFound, Timeout, QueryError, Resolved)):
            return answer
        if callable(answer):
            return answer(hostname)
        return Resolved(tuple(Address.from_text(ip) for ip in answer))

    def close(self):
        self.closed = True


class StubResolverFactory:
    def __init__(self, answers, delay=0.0):
        self.answers = answers
        self.delay = delay
        self.clients = []
        self._lock = threading.Lock()

    def __call__(self):
        client = StubResolver(self.answers, self.delay)
        with self._lock:
            self.clients.append(client)
        return client

    @property
    def queried(self):
        return [hostname for client in self.clients for hostname in client.queries]


@pytest.fixture
def stub_factory():
    return StubResolverFactory


@pytest.fixture
def wordlist(tmp_path):
    def _write(lines, name="dns.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        return str(path)
    return _write


class UDPResponder(threading.Thread):
    """
    Answers A/AAAA queries on 127.0.0.1. records maps a name (no trailing
    dot) to a list of IPs, a dns.rcode value, or a callable building the
    response. Names in silent are never answered, names in delayed are
    answered after the given number of seconds; unknown names get NXDOMAIN.
    """

    def __init__(self, records=None, silent=(), delayed=None):
        super().__init__(daemon=True)
        self.records = records or {}
        self.silent = set(silent)
        self.delayed = delayed or {}
        self._timers = []
        self.seen = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.settimeout(0.05)
        self.port = self.sock.getsockname()[1]
        self._halt = threading.Event()

    def run(self):
        while not self._halt.is_set():
            try:
                data, peer = self.sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                return
            query = dns.message.from_wire(data)
            question = query.question[0]
            name = question.name.to_text().rstrip('.')
            self.seen.append(name)
            if name in self.silent:
                continue
            wire = self._answer(query, question, name).to_wire(want_shuffle=False)
            if name in self.delayed:
                timer = threading.Timer(self.delayed[name], self._send_late, args=(wire, peer))
                timer.start()
                self._timers.append(timer)
                continue
            self.sock.sendto(wire, peer)

    def _send_late(self, wire, peer):
        try:
            self.sock.sendto(wire, peer)
        except OSError:
            pass

    def _answer(self, query, question, name):
        response = dns.message.make_response(query)
        record = self.records.get(name)
        if record is None:
            response.set_rcode(dns.rcode.NXDOMAIN)
        elif callable(record):
            record(response, question)
        elif isinstance(record, list):
            if record:
                rdtype = dns.rdatatype.to_text(question.rdtype)
                response.answer.append(dns.rrset.from_text(question.name, 60, 'IN', rdtype, *record))
        else:
            response.set_rcode(record)
        return response

    def stop(self):
        self._halt.set()
        for timer in self._timers:
            timer.cancel()
        self.join(timeout=2)
        self.sock.close()


@pytest.fixture
def udp_responder():
    started = []

    def _start(records=None, silent=(), delayed=None):
        responder = UDPResponder(records, silent, delayed)
        responder.start()
        started.append(responder)
        return responder

    yield _start
    for responder in started:
        responder.stop()
