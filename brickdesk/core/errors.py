"""Error taxonomy for order composition and submission.

Validation and resolution errors are raised before any network call.
Forecast and submission errors wrap a failed remote call and leave the
workflow in a retryable state. Auxiliary errors are logged, never raised
to the caller.
"""

from __future__ import annotations


class OrderEngineError(Exception):
    pass


class OrderValidationError(OrderEngineError, ValueError):
    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons))


class ResolutionError(OrderEngineError, LookupError):
    pass


class ForecastError(OrderEngineError, RuntimeError):
    pass


class SubmissionError(OrderEngineError, RuntimeError):
    pass


class AuxiliaryError(OrderEngineError, RuntimeError):
    pass


class WorkflowStateError(OrderEngineError, RuntimeError):
    pass
