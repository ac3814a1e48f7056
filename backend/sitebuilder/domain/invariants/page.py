from .block import assert_block_order, assert_block_payload
from .exceptions import InvariantViolation

def assert_page(page, blocks=()):
    if not page.title or not page.slug:
        raise InvariantViolation("Page must have a title and a slug.")

    if not page.tenant_id:
        raise InvariantViolation("Page must belong to a tenant.")

    assert_block_order(blocks)

    for block in blocks:
        assert_block_payload(block)
