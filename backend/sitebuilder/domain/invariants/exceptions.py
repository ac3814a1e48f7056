class InvariantViolation(Exception):
    """Raised when persisted state breaks a domain invariant."""
