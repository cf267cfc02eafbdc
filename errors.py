# errors.py
"""
Exception hierarchy for the equivalence-testing backend.

Every error derives from `EquivalenceTestError`, which is itself a
`ValueError`, so callers that already guard calls with ``except ValueError``
keep working. All of them are raised before any statistic is computed.
"""

from typing import Optional


class EquivalenceTestError(ValueError):
    """Base class for all equivalence-test input errors."""
    pass


class MissingDataError(EquivalenceTestError):
    """
    Missing values are present and removal was not requested.

    Attributes
    ----------
    n_missing : int or None
        Number of missing values found.
    """

    def __init__(self, message: str, n_missing: Optional[int] = None):
        super().__init__(message)
        self.n_missing = n_missing


class InsufficientDataError(EquivalenceTestError):
    """
    Sample is too small for the requested trimming or degrees of freedom.

    Attributes
    ----------
    n : int or None
        Observed (effective) sample size.
    required : int or None
        Minimum size needed.
    """

    def __init__(self, message: str, n: Optional[int] = None, required: Optional[int] = None):
        super().__init__(message)
        self.n = n
        self.required = required


class MissingSampleSizeError(EquivalenceTestError):
    """A vector of correlations was supplied without a sample size."""
    pass


class InvalidInputTypeError(EquivalenceTestError):
    """Input container has the wrong type or shape."""
    pass


class InvalidEquivalenceIntervalError(EquivalenceTestError):
    """Equivalence interval is not a finite, strictly positive number."""
    pass


class InvalidCorrelationError(EquivalenceTestError):
    """Correlations fall outside [-1, 1] or do not form a valid correlation matrix."""
    pass
