import json
import os
import tempfile

from ..config import logger
from ..exceptions import OutputError
from ..models import Address, RootDomain, Subdomain

REPORT_MODE = 0o666


def _current_umask():
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _addresses_to_list(addresses):
    return [{'ip': str(address.ip)} for address in addresses]


def report_to_dict(root):
    return {
        'name': root.name,
        'addresses': _addresses_to_list(root.addresses),
        'subdomains': [
            {'name': sub.name, 'addresses': _addresses_to_list(sub.addresses)}
            for sub in root.subdomains
        ],
    }


def report_from_dict(data):
    return RootDomain(
        name=data['name'],
        addresses=[Address.from_text(a['ip']) for a in data.get('addresses', [])],
        subdomains=[
            Subdomain(name=s['name'], addresses=tuple(Address.from_text(a['ip']) for a in s.get('addresses', [])))
            for s in data.get('subdomains', [])
        ],
    )


def report_to_json(root):
    return json.dumps(report_to_dict(root))


def write_report(root, output_file):
    """
    Serializes the finalized report and writes it in one go. The buffer goes
    to a temporary file next to output_file which then replaces it, so a
    failed write never leaves a partial report behind.
    """
    payload = report_to_json(root)
    logger.debug(f"JSON: {payload}")

    directory = os.path.dirname(os.path.abspath(output_file))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix='.subresolve-', suffix='.json', dir=directory)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(payload)
        # mkstemp creates 0600; match what a plain open(..., "w") would give
        os.chmod(tmp_path, REPORT_MODE & ~_current_umask())
        os.replace(tmp_path, output_file)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise OutputError(f"Could not write output file {output_file}: {e}") from e

    logger.info(f"Wrote output to {output_file}")
    return output_file
