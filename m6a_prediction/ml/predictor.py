"""m6A site prediction from a pre-trained classifier."""

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
import numpy as np
import pandas as pd

from ..exceptions import ReservedColumnError
from ..schema import FeatureSchema
from .features import FeatureAssembler, Sample
from .model import (
    CallableProbabilityModel,
    SklearnProbabilityModel,
    as_probability_model,
    check_probabilities,
    load_model,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5


@dataclass
class PredictionResult:
    """Prediction for a single candidate site."""
    
    predicted_m6A_prob: float
    predicted_m6A_status: str
    
    @property
    def is_positive(self) -> bool:
        """Check if predicted to be a methylation site."""
        return self.predicted_m6A_status == FeatureSchema.POSITIVE_LABEL
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            FeatureSchema.PROB_COLUMN: self.predicted_m6A_prob,
            FeatureSchema.STATUS_COLUMN: self.predicted_m6A_status,
        }


def validate_threshold(positive_threshold: float) -> float:
    """Return the threshold as a float, rejecting values outside [0, 1]."""
    if isinstance(positive_threshold, bool):
        raise ValueError("positive_threshold must be a number, got bool")
    threshold = float(positive_threshold)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(
            f"positive_threshold must be between 0 and 1, got {positive_threshold}"
        )
    return threshold


def classify(probabilities: np.ndarray, positive_threshold: float) -> np.ndarray:
    """Map probabilities to Positive/Negative; the threshold itself is Positive."""
    return np.where(
        np.asarray(probabilities) >= positive_threshold,
        FeatureSchema.POSITIVE_LABEL,
        FeatureSchema.NEGATIVE_LABEL
    )


def _positive_proba(model: Any, features: pd.DataFrame) -> np.ndarray:
    """Run the model and return one positive-class probability per row."""
    adapted = as_probability_model(model)
    proba = adapted.predict_positive_proba(features)
    if isinstance(adapted, (SklearnProbabilityModel, CallableProbabilityModel)):
        return proba
    # as_probability_model passes these through without output checks
    return check_probabilities(proba, len(features))


def predict_single(
    model: Any,
    gc_content: float,
    RNA_type: str,
    RNA_region: str,
    exon_length: float,
    distance_to_junction: float,
    evolutionary_conservation: float,
    DNA_5mer: str,
    positive_threshold: float = DEFAULT_THRESHOLD
) -> PredictionResult:
    """Predict m6A probability and status for one sample.
    
    Args:
        model: Trained classifier (see :func:`as_probability_model`).
        gc_content: GC content of the surrounding window.
        RNA_type: One of mRNA, lincRNA, lncRNA, pseudogene.
        RNA_region: One of CDS, intron, 3'UTR, 5'UTR.
        exon_length: Length of the containing exon.
        distance_to_junction: Distance to the nearest splice junction.
        evolutionary_conservation: Conservation score of the site.
        DNA_5mer: Five nucleotides centred on the candidate site.
        positive_threshold: Probabilities at or above this are Positive.
    
    Returns:
        PredictionResult with probability and status.
    
    Raises:
        InvalidCategoryError: RNA_type or RNA_region not a declared level.
        InvalidSequenceError: DNA_5mer not five characters from A/T/C/G.
    """
    threshold = validate_threshold(positive_threshold)
    sample = Sample(
        gc_content=gc_content,
        RNA_type=RNA_type,
        RNA_region=RNA_region,
        exon_length=exon_length,
        distance_to_junction=distance_to_junction,
        evolutionary_conservation=evolutionary_conservation,
        DNA_5mer=DNA_5mer
    )
    
    features = FeatureAssembler().assemble(sample.to_frame(), strict=True)
    proba = float(_positive_proba(model, features)[0])
    status = str(classify(np.array([proba]), threshold)[0])
    
    logger.debug(f"Single prediction for {DNA_5mer}: {proba:.4f} ({status})")
    return PredictionResult(predicted_m6A_prob=proba, predicted_m6A_status=status)


def predict_batch(
    model: Any,
    feature_df: pd.DataFrame,
    positive_threshold: float = DEFAULT_THRESHOLD,
    strict_categories: bool = False
) -> pd.DataFrame:
    """Predict m6A probability and status for every row of a table.
    
    Args:
        model: Trained classifier (see :func:`as_probability_model`).
        feature_df: Table with at least the seven required columns. Extra
            columns are carried through to the output untouched.
        positive_threshold: Probabilities at or above this are Positive.
        strict_categories: Raise on unknown RNA_type/RNA_region values
            instead of passing them to the model as missing categories.
    
    Returns:
        Copy of ``feature_df`` with ``predicted_m6A_prob`` and
        ``predicted_m6A_status`` appended.
    
    Raises:
        SchemaError: Required columns are missing.
        ReservedColumnError: Prediction columns are already present.
    """
    threshold = validate_threshold(positive_threshold)
    reserved = [
        c for c in (FeatureSchema.PROB_COLUMN, FeatureSchema.STATUS_COLUMN)
        if c in feature_df.columns
    ]
    if reserved:
        raise ReservedColumnError(reserved)
    
    features = FeatureAssembler().assemble(feature_df, strict=strict_categories)
    if len(features) == 0:
        proba = np.array([], dtype=float)
    else:
        proba = _positive_proba(model, features)
    
    result = feature_df.copy()
    result[FeatureSchema.PROB_COLUMN] = proba
    result[FeatureSchema.STATUS_COLUMN] = classify(proba, threshold)
    
    n_positive = int((result[FeatureSchema.STATUS_COLUMN] == FeatureSchema.POSITIVE_LABEL).sum())
    logger.info(
        f"Predicted {len(result)} site(s): {n_positive} positive at threshold {threshold}"
    )
    return result


class M6APredictor:
    """Bind a trained m6A classifier to a decision threshold."""
    
    def __init__(
        self,
        model: Any,
        positive_threshold: float = DEFAULT_THRESHOLD,
        strict_categories: bool = False
    ):
        self.model = as_probability_model(model)
        self.positive_threshold = validate_threshold(positive_threshold)
        self.strict_categories = strict_categories
    
    @classmethod
    def from_file(
        cls,
        model_path: Union[str, Path],
        positive_threshold: float = DEFAULT_THRESHOLD,
        strict_categories: bool = False
    ) -> "M6APredictor":
        """Create a predictor from a pickled model artifact."""
        return cls(load_model(model_path), positive_threshold, strict_categories)
    
    def predict(self, **sample_fields) -> PredictionResult:
        """Predict a single sample given its fields as keyword arguments."""
        return predict_single(
            self.model,
            positive_threshold=self.positive_threshold,
            **sample_fields
        )
    
    def predict_sample(self, sample: Sample) -> PredictionResult:
        """Predict a single :class:`Sample`."""
        return self.predict(**sample.to_dict())
    
    def predict_batch(
        self,
        feature_df: pd.DataFrame,
        strict_categories: Optional[bool] = None
    ) -> pd.DataFrame:
        """Predict every row of ``feature_df``."""
        if strict_categories is None:
            strict_categories = self.strict_categories
        return predict_batch(
            self.model,
            feature_df,
            positive_threshold=self.positive_threshold,
            strict_categories=strict_categories
        )
