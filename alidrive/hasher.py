"""SHA-1 helpers.

- pre_hash: SHA-1 of the first 1 KB, sent with create_with_proof so the
  server can short-circuit uploads of content it already holds.
- content hash: SHA-1 of the whole file, as reported in an item's
  ``content_hash`` (``content_hash_name == "sha1"``).
"""

import hashlib
import logging

from . import config

log = logging.getLogger(__name__)


def compute_pre_hash(filepath: str) -> str:
    with open(filepath, "rb") as f:
        data = f.read(config.PRE_HASH_SIZE)
    return hashlib.sha1(data).hexdigest().upper()


def compute_content_hash(filepath: str, read_size: int = 65536) -> str:
    log.debug("Computing content hash for %s", filepath)
    h = hashlib.sha1()
    with open(filepath, "rb") as f:
        while True:
            data = f.read(read_size)
            if not data:
                break
            h.update(data)
    return h.hexdigest().upper()


def matches_content_hash(filepath: str, item) -> bool:
    """True when a local file has the same SHA-1 as a remote item."""
    if (item.content_hash_name or "sha1").lower() != "sha1" or not item.content_hash:
        return False
    return compute_content_hash(filepath) == item.content_hash.upper()
