from concurrent.futures import ThreadPoolExecutor, wait

from ..config import logger
from ..models import RootDomain, Subdomain, ProgressTracker
from ..utils.dns_utils import Resolved, Timeout, QueryError
from ..utils.work_queue import WorkQueue


def resolve_root_domain(self):
    """Looks up the target itself once, before any worker exists."""
    outcome = self.dns_resolver.resolve(self.domain)
    if isinstance(outcome, Resolved):
        logger.info(f"[*] Root domain {self.domain} resolves to: {', '.join(map(str, outcome.addresses))}")
        return RootDomain(name=self.domain, addresses=list(outcome.addresses))

    if isinstance(outcome, QueryError):
        logger.warning(f" [!] Query error for root domain {self.domain}: {outcome.detail}. Continuing without root addresses.")
    elif isinstance(outcome, Timeout):
        logger.warning(f" [!] Timed out resolving root domain {self.domain}. Continuing without root addresses.")
    else:
        logger.warning(f" [!] No addresses found for root domain {self.domain}. Continuing without root addresses.")
    return RootDomain(name=self.domain)


def open_worker_clients(self):
    clients = []
    try:
        for _ in range(self.concurrency):
            clients.append(self.resolver_factory())
    except Exception:
        for client in clients:
            client.close()
        raise
    return clients


def produce_candidates(self, work_queue, candidates):
    for candidate in candidates:
        work_queue.put(f"{candidate}.{self.domain}")
    work_queue.close()


def resolve_worker(self, work_queue, client, report, progress):
    processed = 0
    try:
        for hostname in work_queue:
            outcome = client.resolve(hostname)
            if isinstance(outcome, Resolved):
                # Query runs outside the report lock; only the append is serialized
                report.add_subdomain(Subdomain(name=hostname, addresses=outcome.addresses))
                logger.info(f" [+] Found {len(outcome.addresses)} address(es) for {hostname}: "
                            f"{', '.join(map(str, outcome.addresses))}")
            elif isinstance(outcome, QueryError):
                logger.warning(f" [!] Query error for {hostname}: {outcome.detail}")
            elif isinstance(outcome, Timeout):
                logger.debug(f" [-] Timed out resolving {hostname}")
            else:
                logger.debug(f" [-] No addresses found for {hostname}")
            progress.advance()
            processed += 1
    finally:
        client.close()
    return processed


def active_brute_force(self, candidates, report):
    """
    Resolves every candidate under the target with a fixed pool of
    self.concurrency workers, each holding its own resolver client.

    Workers are started first, then fed through a WorkQueue that is closed
    once the last candidate is in. Returns the number of processed
    candidates. On KeyboardInterrupt the pending candidates are dropped,
    every worker is joined, and the interrupt is re-raised.
    """
    total = len(candidates)
    logger.info(f"[*] Resolving {total} candidates for {self.domain} with {self.concurrency} worker(s)...")

    clients = open_worker_clients(self)
    progress = ProgressTracker(total, enabled=self.show_progress)
    work_queue = WorkQueue()
    try:
        with ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix='resolver') as executor:
            futures = []
            while clients:
                futures.append(executor.submit(resolve_worker, self, work_queue, clients.pop(), report, progress))
            try:
                produce_candidates(self, work_queue, candidates)
                wait(futures)
            except KeyboardInterrupt:
                dropped = work_queue.cancel()
                logger.warning(f" [!] Interrupted. Dropped {dropped} pending candidates, waiting for workers to finish...")
                wait(futures)
                raise

        processed = sum(future.result() for future in futures)
    finally:
        progress.finish()
        for client in clients:
            client.close()

    logger.debug(f"Worker pool joined after processing {processed}/{total} candidates.")
    return progress.count
