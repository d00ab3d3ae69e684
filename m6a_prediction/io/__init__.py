"""Input and output of feature tables."""

from .tables import infer_separator, read_feature_table, write_predictions

__all__ = ["infer_separator", "read_feature_table", "write_predictions"]
