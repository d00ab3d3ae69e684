"""Prediction of RNA m6A methylation sites with a pre-trained classifier."""

from .exceptions import (
    EncodingError,
    InvalidCategoryError,
    InvalidSequenceError,
    M6APredictionError,
    ModelOutputError,
    ReservedColumnError,
    SchemaError,
)
from .ml.predictor import M6APredictor, PredictionResult, predict_batch, predict_single
from .schema import FeatureSchema
from .sequence.encoder import SequenceEncoder, encode_sequences

__version__ = "0.1.0"

__all__ = [
    "EncodingError",
    "InvalidCategoryError",
    "InvalidSequenceError",
    "M6APredictionError",
    "ModelOutputError",
    "ReservedColumnError",
    "SchemaError",
    "M6APredictor",
    "PredictionResult",
    "predict_batch",
    "predict_single",
    "FeatureSchema",
    "SequenceEncoder",
    "encode_sequences",
]
