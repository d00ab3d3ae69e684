"""Feature assembly for the m6A site classifier."""

from dataclasses import dataclass, asdict
import logging
from typing import Any, Dict, List, Optional
import pandas as pd

from ..exceptions import InvalidCategoryError, SchemaError
from ..schema import FeatureSchema
from ..sequence.encoder import SequenceEncoder, validate_sequence

logger = logging.getLogger(__name__)


@dataclass
class Sample:
    """One candidate m6A site."""
    
    gc_content: float
    RNA_type: str
    RNA_region: str
    exon_length: float
    distance_to_junction: float
    evolutionary_conservation: float
    DNA_5mer: str
    
    def __post_init__(self):
        for name in FeatureSchema.NUMERIC_COLUMNS:
            setattr(self, name, float(getattr(self, name)))
        
        for column, levels in FeatureSchema.categorical_levels().items():
            value = getattr(self, column)
            if value not in levels:
                raise InvalidCategoryError(column, value, levels)
        
        validate_sequence(self.DNA_5mer)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in schema column order."""
        values = asdict(self)
        return {c: values[c] for c in FeatureSchema.REQUIRED_COLUMNS}
    
    def to_frame(self) -> pd.DataFrame:
        """Return the sample as a one-row table."""
        return pd.DataFrame([self.to_dict()], columns=list(FeatureSchema.REQUIRED_COLUMNS))
    
    @staticmethod
    def feature_names() -> List[str]:
        """Return list of raw input field names."""
        return list(FeatureSchema.REQUIRED_COLUMNS)


class FeatureAssembler:
    """Build model-ready FeatureVector tables from raw sample tables.
    
    Single-sample and batch prediction both go through :meth:`assemble`, so
    the two paths hand the model identically shaped and typed input.
    """
    
    def __init__(self, encoder: Optional[SequenceEncoder] = None):
        """Initialize assembler.
        
        Args:
            encoder: Sequence encoder; defaults to the A/T/C/G encoder.
        """
        self.encoder = encoder or SequenceEncoder()
    
    def validate_columns(self, df: pd.DataFrame) -> None:
        """Raise SchemaError if any required column is missing."""
        missing = FeatureSchema.missing_columns(df.columns)
        if missing:
            raise SchemaError(missing)
    
    def coerce(self, df: pd.DataFrame, strict: bool = False) -> pd.DataFrame:
        """Return the scalar feature columns with schema dtypes applied.
        
        Args:
            df: Table holding at least the required columns.
            strict: Raise on values outside the declared category levels
                instead of turning them into missing categories.
        """
        scalars = df[FeatureSchema.scalar_columns()].copy()
        
        for column in FeatureSchema.NUMERIC_COLUMNS:
            scalars[column] = pd.to_numeric(scalars[column]).astype(float)
        
        for column, levels in FeatureSchema.categorical_levels().items():
            unknown = ~scalars[column].isin(levels)
            if unknown.any():
                if strict:
                    raise InvalidCategoryError(
                        column, scalars.loc[unknown, column].iloc[0], levels
                    )
                logger.warning(
                    f"{int(unknown.sum())} row(s) have {column} outside "
                    f"{', '.join(levels)}; treating as missing"
                )
            scalars[column] = scalars[column].astype(FeatureSchema.categorical_dtype(column))
        
        return scalars
    
    def assemble(self, df: pd.DataFrame, strict: bool = False) -> pd.DataFrame:
        """Build the FeatureVector table for ``df``.
        
        Returns:
            Scalar features followed by ``nt_pos1..nt_pos5``, one row per
            input row with the input index preserved.
        """
        self.validate_columns(df)
        scalars = self.coerce(df, strict=strict)
        encoded = self.encoder.encode(
            df[FeatureSchema.SEQUENCE_COLUMN],
            length=FeatureSchema.SEQUENCE_LENGTH
        )
        features = pd.concat(
            [scalars.reset_index(drop=True), encoded.reset_index(drop=True)],
            axis=1
        )
        features.index = df.index

        logger.debug(f"Assembled feature table with shape {features.shape}")
        return features[FeatureSchema.feature_columns()]


def to_design_matrix(features: pd.DataFrame) -> pd.DataFrame:
    """Expand a FeatureVector table into a fixed-width numeric matrix.
    
    Categorical columns become one indicator column per declared level
    (``<column>_<level>``); missing categories yield all-zero indicators.
    """
    parts = []
    for column in features.columns:
        values = features[column]
        if isinstance(values.dtype, pd.CategoricalDtype):
            parts.append(pd.get_dummies(values, prefix=column, dtype=float))
        else:
            parts.append(values.astype(float).to_frame())
    return pd.concat(parts, axis=1)


def design_matrix_columns() -> List[str]:
    """Return design matrix column names in order."""
    names = []
    for column in FeatureSchema.feature_columns():
        if column in FeatureSchema.NUMERIC_COLUMNS:
            names.append(column)
        else:
            levels = FeatureSchema.categorical_dtype(column).categories
            names.extend(f"{column}_{level}" for level in levels)
    return names
