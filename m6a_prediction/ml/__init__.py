"""Machine learning modules for m6A site prediction."""

from .features import FeatureAssembler, Sample, to_design_matrix
from .model import SklearnProbabilityModel, as_probability_model, load_model, save_model
from .predictor import M6APredictor, PredictionResult, predict_batch, predict_single

__all__ = [
    "FeatureAssembler",
    "Sample",
    "to_design_matrix",
    "SklearnProbabilityModel",
    "as_probability_model",
    "load_model",
    "save_model",
    "M6APredictor",
    "PredictionResult",
    "predict_batch",
    "predict_single",
]
