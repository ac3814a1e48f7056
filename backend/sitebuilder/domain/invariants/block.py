from collections import Counter

from .exceptions import InvariantViolation

def assert_block_order(blocks):
    """
    Active blocks of a page must hold pairwise distinct order values.
    Gaps are allowed.
    """
    counts = Counter(block.order for block in blocks)
    duplicates = sorted(order for order, count in counts.items() if count > 1)

    if duplicates:
        raise InvariantViolation(
            f"Block orders are not unique within the page: {duplicates}"
        )

def assert_order_unshared(blocks, order):
    shared = [block.id for block in blocks if block.order == order]
    if len(shared) > 1:
        raise InvariantViolation(
            f"Order {order} is held by more than one block: {shared}"
        )

def assert_block_payload(block):
    if not isinstance(block.payload, dict):
        raise InvariantViolation(
            f"{block.type} block payload must be a JSON object."
        )
