"""Router error classes.

Every failure raised by the router derives from RouterError and belongs to one
of four categories: validation, slippage, invariant, external call. Any of them
aborts the enclosing entrypoint as a whole.
"""


class RouterError(Exception):
    """Base error for router operations."""

    pass


# --- Validation ---


class ValidationError(RouterError):
    """Request is malformed before any pool is consulted."""

    pass


class DegenerateOrder(ValidationError):
    """A token pair cannot be ordered because both sides are the same token."""

    pass


class InvalidPath(ValidationError):
    """Path is shorter than two tokens, longer than allowed, or repeats a hop token."""

    pass


class InvalidAmount(ValidationError):
    """Amount is zero where a positive amount is required, or is outside uint256."""

    pass


class InvalidNativePath(ValidationError):
    """Native-currency variant whose path does not start or end at the wrapped-native token."""

    pass


# --- Slippage ---


class SlippageViolation(RouterError):
    """Caller-supplied slippage bound not met."""

    pass


class InsufficientOutputAmount(SlippageViolation):
    """Path output is below the caller's minimum."""

    pass


class ExcessiveInputAmount(SlippageViolation):
    """Path input exceeds the caller's maximum."""

    pass


class InsufficientAAmount(SlippageViolation):
    """Optimal token A amount is below amount_a_min."""

    pass


class InsufficientBAmount(SlippageViolation):
    """Optimal token B amount is below amount_b_min."""

    pass


# --- Invariant ---


class InvariantViolation(RouterError):
    """An internally asserted property failed. Not recoverable by the caller."""

    pass


# --- External ---


class ExternalCallFailure(RouterError):
    """A pool, token or registry call failed or reported failure."""

    pass


class PoolNotFound(ExternalCallFailure):
    """The registry has no pool for a hop that must already exist."""

    pass


CATEGORIES = (ValidationError, SlippageViolation, InvariantViolation, ExternalCallFailure)


def category(err: RouterError) -> str:
    """Top-level taxonomy name of an error, e.g. "SlippageViolation"."""
    for base in CATEGORIES:
        if isinstance(err, base):
            return base.__name__
    return type(err).__name__
