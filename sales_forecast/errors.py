"""
Error Types

All failures are fatal for a forecasting run and propagate to the caller.
"""

from typing import Optional


class ForecastingError(Exception):
    """Base class for forecasting pipeline errors"""


class ParseError(ForecastingError, ValueError):
    """A transaction line could not be parsed"""

    def __init__(self, reason: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.reason = reason
        self.line_number = line_number
        self.line = line

        location = f"line {line_number}" if line_number is not None else "input line"
        message = f"Cannot parse {location}: {reason}"
        if line is not None:
            message += f" ({line!r})"
        super().__init__(message)


class NoDataError(ForecastingError, ValueError):
    """A step produced no rows where at least one is required"""


class TrainerFitError(ForecastingError, RuntimeError):
    """A candidate trainer failed to fit the training table"""

    def __init__(self, trainer_name: str, cause: Exception):
        self.trainer_name = trainer_name
        self.cause = cause
        super().__init__(f"Trainer '{trainer_name}' failed to fit: {cause}")
