from ..config import logger
from ..exceptions import WordlistError


def read_candidates(path):
    """Returns the stripped, non-empty lines of a word-list in file order."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            candidates = [line.strip() for line in f if line.strip()]
    except FileNotFoundError:
        raise WordlistError(f"Subdomains file not found: {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise WordlistError(f"Couldn't read subdomains file {path}: {e}") from e

    logger.debug(f"Loaded {len(candidates)} candidates from {path}.")
    return candidates
