"""Reading and writing m6A feature tables."""

import logging
from pathlib import Path
from typing import Optional, Union
import pandas as pd

from ..schema import FeatureSchema

logger = logging.getLogger(__name__)

TAB_SUFFIXES = (".tsv", ".txt", ".tab")

# Keep categorical and sequence columns as text regardless of content
TEXT_COLUMNS = {
    "RNA_type": str,
    "RNA_region": str,
    FeatureSchema.SEQUENCE_COLUMN: str,
}


def infer_separator(path: Union[str, Path]) -> str:
    """Return tab for .tsv/.txt/.tab files, comma otherwise."""
    return "\t" if Path(path).suffix.lower() in TAB_SUFFIXES else ","


def read_feature_table(
    path: Union[str, Path],
    sep: Optional[str] = None
) -> pd.DataFrame:
    """Load a delimited feature table with a header row."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input table not found: {path}")
    
    df = pd.read_csv(path, sep=sep or infer_separator(path), dtype=TEXT_COLUMNS)
    logger.info(f"Loaded {len(df)} row(s) with {len(df.columns)} column(s) from {path}")
    return df


def write_predictions(
    df: pd.DataFrame,
    path: Union[str, Path],
    sep: Optional[str] = None
) -> Path:
    """Write an augmented prediction table and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, sep=sep or infer_separator(path), index=False)
    logger.info(f"Predictions saved to {path}")
    return path
