from .config import (logger, DEFAULT_DNS_RESOLVER, DEFAULT_CONCURRENCY, DEFAULT_SUBDOMAINS_FILE,
                     DEFAULT_OUTPUT_FILE, DEFAULT_TIMEOUT, DEFAULT_RECORD_TYPE, RECORD_TYPES)
from .exceptions import ResolverSetupError
from .models import DomainReport
from .utils.dns_utils import ResolverClient, parse_resolver_endpoint, initialize_dns_resolver
from .utils.input_utils import read_candidates
from .utils.output_utils import write_report
from .phases.active import resolve_root_domain, active_brute_force

import functools
import logging

from tqdm.contrib.logging import logging_redirect_tqdm


class SubdomainEnumerator:
    def __init__(self, domain, subdomains_file=DEFAULT_SUBDOMAINS_FILE, output_file=DEFAULT_OUTPUT_FILE,
                 dns_resolver=DEFAULT_DNS_RESOLVER, concurrency=DEFAULT_CONCURRENCY, timeout=DEFAULT_TIMEOUT,
                 record_type=DEFAULT_RECORD_TYPE, show_progress=True, verbose=False, resolver_factory=None):
        self.domain = domain.strip().rstrip('.')
        if not self.domain:
            raise ValueError("Target domain must not be empty")
        if concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1, got {concurrency}")
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        if record_type not in RECORD_TYPES:
            raise ValueError(f"Unsupported record type {record_type!r}, expected one of {', '.join(RECORD_TYPES)}")

        self.subdomains_file = subdomains_file
        self.output_file = output_file
        self.concurrency = concurrency
        self.timeout = timeout
        self.record_type = record_type
        self.show_progress = show_progress
        self.verbose = verbose

        try:
            self.nameserver, self.port = parse_resolver_endpoint(dns_resolver)
        except ValueError as e:
            raise ResolverSetupError(str(e)) from e

        # Called once for the root lookup and once per worker; clients are never shared
        self.resolver_factory = resolver_factory or functools.partial(
            ResolverClient, self.nameserver, self.port, timeout=self.timeout, record_type=self.record_type)

        self.dns_resolver = None
        self.root_domain = None
        self.found_count = 0
        self.processed_count = 0

        if self.verbose:
            logger.setLevel(logging.DEBUG)

    def run(self):
        logger.info(f"Target: {self.domain}")
        logger.info(f"DNS Resolver: {self.nameserver}:{self.port}")
        logger.info(f"Concurrency: {self.concurrency}")
        logger.info(f"Subdomains file: {self.subdomains_file}")
        logger.info(f"Output file: {self.output_file}")

        candidates = read_candidates(self.subdomains_file)

        initialize_dns_resolver(self)
        try:
            root = resolve_root_domain(self)
        finally:
            self.dns_resolver.close()

        report = DomainReport(root)
        self.phase_active_dns_discovery(candidates, report)
        return self.phase_final_reporting(report)

    def phase_active_dns_discovery(self, candidates, report):
        if self.show_progress:
            with logging_redirect_tqdm():
                self.processed_count = active_brute_force(self, candidates, report)
        else:
            self.processed_count = active_brute_force(self, candidates, report)

    def phase_final_reporting(self, report):
        # Every worker has returned, so the report has no other holder left
        self.found_count = report.found_count
        self.root_domain = report.finalize()

        logger.info(f"Found {self.found_count} subdomains.")
        if self.output_file:
            write_report(self.root_domain, self.output_file)
        return self.root_domain
