"""Domain errors raised by the composition engine.

Services raise these (all ``ValueError`` subclasses); routers turn them into
HTTP responses. Degraded conversions, incomplete compositions and dangling
group references are reported as data, never raised.
"""


class StructuralValidationError(ValueError):
    """Traveler groups do not reconcile with the trip party."""


class GroupRemovalNotConfirmed(ValueError):
    """A non-empty group was removed without the caller's confirmation."""


class CategoryDisabledError(ValueError):
    """A selection was added to a category that is switched off."""


class CompositionFrozenError(ValueError):
    """The composition was already finalized and can no longer change."""


class RateSourceError(RuntimeError):
    """The live exchange-rate source failed or returned an unusable payload."""
