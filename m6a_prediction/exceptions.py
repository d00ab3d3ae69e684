"""Errors raised while validating and encoding m6A prediction inputs."""

from typing import List, Optional, Sequence


class M6APredictionError(ValueError):
    """Base class for local validation failures."""


class SchemaError(M6APredictionError):
    """Batch input is missing required columns."""
    
    def __init__(self, missing_columns: List[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(
            f"Missing required columns: {', '.join(self.missing_columns)}"
        )


class EncodingError(M6APredictionError):
    """Sequences could not be split into categorical positions."""


class InvalidSequenceError(M6APredictionError):
    """Sequence is not exactly the expected length over A/T/C/G."""


class InvalidCategoryError(M6APredictionError):
    """Categorical value outside its declared level set."""
    
    def __init__(
        self,
        column: str,
        value,
        allowed: Optional[Sequence[str]] = None
    ):
        self.column = column
        self.value = value
        self.allowed = tuple(allowed or ())
        message = f"Invalid {column}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(self.allowed)})"
        super().__init__(message)


class ModelOutputError(M6APredictionError):
    """Model returned probabilities that do not line up with its input."""


class ReservedColumnError(M6APredictionError):
    """Batch input already holds the prediction output columns."""
    
    def __init__(self, columns: List[str]):
        self.columns = list(columns)
        super().__init__(
            f"Input already contains prediction columns: {', '.join(self.columns)}; "
            "drop them before predicting again"
        )
