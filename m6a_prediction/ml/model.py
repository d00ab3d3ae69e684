"""Adapters between trained classifiers and the prediction functions."""

import logging
import pickle
from pathlib import Path
from typing import Any, Callable, Optional, Union
import numpy as np
import pandas as pd

from ..exceptions import ModelOutputError
from ..schema import FeatureSchema
from .features import to_design_matrix

logger = logging.getLogger(__name__)

POSITIVE_CLASS_LABELS = (FeatureSchema.POSITIVE_LABEL, 1, True)
NEGATIVE_CLASS_LABELS = (FeatureSchema.NEGATIVE_LABEL, 0, False)


def check_probabilities(probabilities: Any, n_rows: int) -> np.ndarray:
    """Return probabilities as a float vector with one value per row."""
    proba = np.asarray(probabilities, dtype=float)
    if proba.ndim != 1:
        raise ModelOutputError(
            f"Model returned probabilities with shape {proba.shape}; expected ({n_rows},)"
        )
    if len(proba) != n_rows:
        raise ModelOutputError(
            f"Model returned {len(proba)} probabilities for {n_rows} row(s)"
        )
    return proba


class SklearnProbabilityModel:
    """Wrap a fitted scikit-learn classifier exposing ``predict_proba``."""
    
    def __init__(self, estimator: Any, one_hot: Optional[bool] = None):
        """Initialize adapter.
        
        Args:
            estimator: Fitted classifier, e.g. a RandomForestClassifier.
            one_hot: Feed the one-hot design matrix instead of the raw
                FeatureVector. If None, pipelines get the raw table and
                bare estimators get the design matrix.
        """
        if not hasattr(estimator, "predict_proba"):
            raise TypeError(f"{type(estimator).__name__} has no predict_proba")
        self.estimator = estimator
        if one_hot is None:
            one_hot = not hasattr(estimator, "steps")
        self.one_hot = one_hot
        self.positive_index = self._positive_class_index()
    
    def _positive_class_index(self) -> Optional[int]:
        """Locate the positive class column of ``predict_proba`` output.
        
        Falls back to the second column only for an unlabelled binary
        classifier; None means the estimator exposes no ``classes_``.
        """
        if not hasattr(self.estimator, "classes_"):
            return None
        classes = list(self.estimator.classes_)
        for label in POSITIVE_CLASS_LABELS:
            if label in classes:
                return classes.index(label)
        if len(classes) == 2 and not any(label in classes for label in NEGATIVE_CLASS_LABELS):
            return 1
        raise ModelOutputError(
            f"Cannot identify the positive class among model classes {classes}"
        )
    
    def predict_positive_proba(self, features: pd.DataFrame) -> np.ndarray:
        """Return the positive-class probability for each row."""
        X = to_design_matrix(features) if self.one_hot else features
        proba = np.asarray(self.estimator.predict_proba(X))
        if proba.ndim != 2:
            raise ModelOutputError(
                f"predict_proba returned shape {proba.shape}; expected (n_rows, n_classes)"
            )
        index = self.positive_index
        if index is None:
            if proba.shape[1] != 2:
                raise ModelOutputError(
                    f"Model without classes_ returned {proba.shape[1]} columns; expected 2"
                )
            index = 1
        return check_probabilities(proba[:, index], len(features))


class CallableProbabilityModel:
    """Wrap a plain function mapping a FeatureVector table to probabilities."""
    
    def __init__(self, func: Callable[[pd.DataFrame], Any]):
        """Initialize adapter around ``func``."""
        self.func = func
    
    def predict_positive_proba(self, features: pd.DataFrame) -> np.ndarray:
        """Return the function output as one probability per row."""
        return check_probabilities(self.func(features), len(features))


def as_probability_model(model: Any):
    """Normalise ``model`` to an object with ``predict_positive_proba``."""
    if hasattr(model, "predict_positive_proba"):
        return model
    if hasattr(model, "predict_proba"):
        return SklearnProbabilityModel(model)
    if callable(model):
        return CallableProbabilityModel(model)
    raise TypeError(
        f"Unsupported model type {type(model).__name__}: expected predict_proba, "
        "predict_positive_proba or a callable"
    )


def load_model(path: Union[str, Path]):
    """Load a pickled classifier and wrap it for prediction."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    
    with open(path, "rb") as f:
        model = pickle.load(f)
    
    logger.info(f"Loaded {type(model).__name__} from {path}")
    return as_probability_model(model)


def save_model(model: Any, path: Union[str, Path]) -> None:
    """Pickle a fitted classifier so :func:`load_model` can read it back."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(model, SklearnProbabilityModel):
        model = model.estimator
    with open(path, "wb") as f:
        pickle.dump(model, f)
