import argparse
import sys

from .config import (logger, configure_logging, load_env_defaults, DEFAULT_SUBDOMAINS_FILE,
                     DEFAULT_OUTPUT_FILE, DEFAULT_RECORD_TYPE, RECORD_TYPES)
from .enumerator import SubdomainEnumerator
from .exceptions import SetupError
from .utils.dns_utils import parse_resolver_endpoint


def _resolver_endpoint(value):
    try:
        parse_resolver_endpoint(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def _positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _positive_float(value):
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {number}")
    return number


def build_parser(env_defaults=None):
    defaults = env_defaults if env_defaults is not None else load_env_defaults()
    parser = argparse.ArgumentParser(prog="subresolve",
                                     description="Resolve a subdomain word-list against a DNS resolver and write a JSON report.",
                                     formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument("-t", "--target", required=True, help="Target domain (e.g., example.com)")
    parser.add_argument("-d", "--dns-resolver", type=_resolver_endpoint, default=defaults['dns_resolver'],
                        help=f"Resolver endpoint as ip:port (default: {defaults['dns_resolver']})")
    parser.add_argument("-c", "--concurrency", type=_positive_int, default=defaults['concurrency'],
                        help=f"Number of parallel workers (default: {defaults['concurrency']})")
    parser.add_argument("-s", "--subdomains-file", default=DEFAULT_SUBDOMAINS_FILE,
                        help=f"Candidate subdomains file, one per line (default: {DEFAULT_SUBDOMAINS_FILE})")
    parser.add_argument("-o", "--output-file", default=DEFAULT_OUTPUT_FILE,
                        help=f"JSON report path (default: {DEFAULT_OUTPUT_FILE})")
    parser.add_argument("--timeout", type=_positive_float, default=defaults['timeout'],
                        help=f"Per-query timeout in seconds (default: {defaults['timeout']})")
    parser.add_argument("--record-type", choices=RECORD_TYPES, default=DEFAULT_RECORD_TYPE,
                        help=f"Address record type to query (default: {DEFAULT_RECORD_TYPE})")
    parser.add_argument("--no-progress", action="store_false", dest="show_progress", default=True,
                        help="Disable the progress bar.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging (display debug messages).")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, stream=sys.stdout)

    try:
        subdomain_enumerator = SubdomainEnumerator(
            domain=args.target,
            subdomains_file=args.subdomains_file,
            output_file=args.output_file,
            dns_resolver=args.dns_resolver,
            concurrency=args.concurrency,
            timeout=args.timeout,
            record_type=args.record_type,
            show_progress=args.show_progress,
            verbose=args.verbose,
        )
    except (SetupError, ValueError) as e:
        logger.critical(f"Aborting: {e}")
        return 1

    try:
        subdomain_enumerator.run()
    except SetupError as e:
        logger.critical(f"Aborting: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. No report was written.")
        return 130
    except Exception as e:
        logger.critical(f"An unhandled error occurred during enumeration: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
