"""
Prediction engine exceptions

Both error kinds are configuration or programming defects, never transient
conditions, so nothing in the engine catches or retries them.
"""


class PredictionError(ValueError):
    """Base exception for prediction engine errors"""


class InvalidInput(PredictionError):
    """Raised for a malformed catalog or an out-of-contract argument"""


class TemplateError(PredictionError):
    """Raised when a narrative template uses a placeholder that cannot be resolved"""
