import pytest
import numpy as np
import pandas as pd

from m6a_prediction.ml.features import FeatureAssembler, to_design_matrix
from m6a_prediction.schema import FeatureSchema


class FakeModel:
    """Probability model returning canned values and recording its inputs."""

    def __init__(self, probabilities):
        self.probabilities = probabilities
        self.calls = []

    def predict_positive_proba(self, features):
        self.calls.append(features.copy())
        if callable(self.probabilities):
            return self.probabilities(features)
        return np.asarray(self.probabilities, dtype=float)


@pytest.fixture
def fake_model():
    """Factory for FakeModel instances."""
    return FakeModel


@pytest.fixture
def single_sample():
    """Field values of the documented single-sample example."""
    return {
        "gc_content": 0.6,
        "RNA_type": "mRNA",
        "RNA_region": "CDS",
        "exon_length": 12,
        "distance_to_junction": 50,
        "evolutionary_conservation": 0.8,
        "DNA_5mer": "ATGAT",
    }


@pytest.fixture
def feature_df():
    """Four-row batch covering every RNA region."""
    return pd.DataFrame({
        "gc_content": [0.6, 0.45, 0.52, 0.38],
        "RNA_type": ["mRNA", "lncRNA", "lincRNA", "mRNA"],
        "RNA_region": ["CDS", "3'UTR", "intron", "5'UTR"],
        "exon_length": [12, 8, 15, 5],
        "distance_to_junction": [50, 120, 32, 210],
        "evolutionary_conservation": [0.8, 0.35, 0.91, 0.22],
        "DNA_5mer": ["ATGAT", "GGACT", "AGACA", "TGACC"],
    })


@pytest.fixture
def training_df():
    """Random samples for fitting a small forest."""
    rng = np.random.default_rng(0)
    n = 80
    return pd.DataFrame({
        "gc_content": rng.uniform(0, 1, n),
        "RNA_type": rng.choice(list(FeatureSchema.RNA_TYPES), n),
        "RNA_region": rng.choice(list(FeatureSchema.RNA_REGIONS), n),
        "exon_length": rng.integers(1, 30, n),
        "distance_to_junction": rng.uniform(0, 300, n),
        "evolutionary_conservation": rng.uniform(0, 1, n),
        "DNA_5mer": ["".join(rng.choice(list("ATCG"), 5)) for _ in range(n)],
    })


@pytest.fixture
def fitted_forest(training_df):
    """RandomForestClassifier fit on the one-hot design matrix."""
    from sklearn.ensemble import RandomForestClassifier

    X = to_design_matrix(FeatureAssembler().assemble(training_df))
    y = np.where(training_df["gc_content"] > 0.5, "Positive", "Negative")

    model = RandomForestClassifier(n_estimators=10, random_state=0)
    model.fit(X, y)
    return model
