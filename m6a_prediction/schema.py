"""Fixed feature schema shared by the encoder and both prediction paths."""

from typing import List, Dict, Tuple
import pandas as pd


class FeatureSchema:
    """Column layout and categorical levels the m6A model was trained on.

    Level order matters: the forest was fit against these exact factor levels,
    so every code path builds its categoricals from here.
    """
    
    VERSION = "1.0"
    
    NUCLEOTIDES = ("A", "T", "C", "G")
    SEQUENCE_LENGTH = 5
    SEQUENCE_COLUMN = "DNA_5mer"
    SEQUENCE_PREFIX = "nt_pos"
    
    RNA_TYPES = ("mRNA", "lincRNA", "lncRNA", "pseudogene")
    RNA_REGIONS = ("CDS", "intron", "3'UTR", "5'UTR")
    
    NUMERIC_COLUMNS = (
        "gc_content",
        "exon_length",
        "distance_to_junction",
        "evolutionary_conservation",
    )
    
    # Input column order; the sequence column is always last
    REQUIRED_COLUMNS = (
        "gc_content",
        "RNA_type",
        "RNA_region",
        "exon_length",
        "distance_to_junction",
        "evolutionary_conservation",
        "DNA_5mer",
    )
    
    PROB_COLUMN = "predicted_m6A_prob"
    STATUS_COLUMN = "predicted_m6A_status"
    POSITIVE_LABEL = "Positive"
    NEGATIVE_LABEL = "Negative"
    
    @classmethod
    def categorical_levels(cls) -> Dict[str, Tuple[str, ...]]:
        """Return declared levels for the scalar categorical columns."""
        return {
            "RNA_type": cls.RNA_TYPES,
            "RNA_region": cls.RNA_REGIONS,
        }
    
    @classmethod
    def sequence_columns(cls, length: int = SEQUENCE_LENGTH) -> List[str]:
        """Return encoded sequence column names, ``nt_pos1..nt_posN``."""
        return [f"{cls.SEQUENCE_PREFIX}{i}" for i in range(1, length + 1)]
    
    @classmethod
    def scalar_columns(cls) -> List[str]:
        """Required columns other than the raw sequence, in model order."""
        return [c for c in cls.REQUIRED_COLUMNS if c != cls.SEQUENCE_COLUMN]
    
    @classmethod
    def feature_columns(cls) -> List[str]:
        """Full FeatureVector column order expected by the model."""
        return cls.scalar_columns() + cls.sequence_columns()
    
    @classmethod
    def nucleotide_dtype(cls) -> pd.CategoricalDtype:
        """Categorical dtype for a single encoded sequence position."""
        return pd.CategoricalDtype(categories=list(cls.NUCLEOTIDES))
    
    @classmethod
    def categorical_dtype(cls, column: str) -> pd.CategoricalDtype:
        """Categorical dtype for any categorical FeatureVector column."""
        if column.startswith(cls.SEQUENCE_PREFIX):
            return cls.nucleotide_dtype()
        levels = cls.categorical_levels()
        if column not in levels:
            raise KeyError(f"Not a categorical feature: {column}")
        return pd.CategoricalDtype(categories=list(levels[column]))
    
    @classmethod
    def missing_columns(cls, columns) -> List[str]:
        """Return required columns absent from ``columns``, in schema order."""
        present = set(columns)
        return [c for c in cls.REQUIRED_COLUMNS if c not in present]
