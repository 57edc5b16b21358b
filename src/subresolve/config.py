import os
import logging

# Defaults for a run (overridable from the environment, then the command line)
DEFAULT_DNS_RESOLVER = "8.8.8.8:53"
DEFAULT_CONCURRENCY = 1
DEFAULT_SUBDOMAINS_FILE = "./dns.txt"
DEFAULT_OUTPUT_FILE = "./port-scanner.json"
DEFAULT_TIMEOUT = 1.0
DEFAULT_RECORD_TYPE = "A"
RECORD_TYPES = ("A", "AAAA")

DNS_PORT = 53

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger("subresolve")


def configure_logging(verbose=False, stream=None):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=stream,
    )
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _env_number(name, cast, default, minimum):
    raw = os.getenv(name, '').strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a valid {cast.__name__}.")
        return default
    if value < minimum:
        logger.warning(f"Ignoring {name}={raw!r}: must be >= {minimum}.")
        return default
    return value


# Run defaults (loaded from env vars)
def load_env_defaults():
    return {
        'dns_resolver': os.getenv('SUBRESOLVE_DNS_RESOLVER', '').strip() or DEFAULT_DNS_RESOLVER,
        'concurrency': _env_number('SUBRESOLVE_CONCURRENCY', int, DEFAULT_CONCURRENCY, 1),
        'timeout': _env_number('SUBRESOLVE_TIMEOUT', float, DEFAULT_TIMEOUT, 0.001),
    }
