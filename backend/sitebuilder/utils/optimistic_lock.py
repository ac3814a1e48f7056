from datetime import timezone

from dateutil.parser import ParserError, parse
from flask import request

from sitebuilder.domain.exceptions import EditConflict, InvalidPrecondition


def as_utc(ts):
    """Naive timestamps coming back from SQLite are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(block):
    """
    Refuse to overwrite a block the editor loaded before someone else
    saved it. Opt-in through the If-Unmodified-Since header.
    """
    header = request.headers.get("If-Unmodified-Since")
    if not header or block.updated_at is None:
        return

    try:
        loaded_at = as_utc(parse(header))
    except (ParserError, OverflowError):
        raise InvalidPrecondition("Invalid If-Unmodified-Since header") from None

    if as_utc(block.updated_at) > loaded_at:
        raise EditConflict(f"Block {block.id} was modified by someone else")
