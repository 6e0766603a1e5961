"""Primary key generator for ledger rows and cache entries."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string id."""
    return str(_next_cuid())
