"""Unit tests for feature assembly."""

import logging
import pytest
import numpy as np
import pandas as pd

from m6a_prediction.exceptions import InvalidCategoryError, InvalidSequenceError, SchemaError
from m6a_prediction.ml.features import FeatureAssembler, Sample, design_matrix_columns, to_design_matrix
from m6a_prediction.schema import FeatureSchema


class TestFeatureSchema:
    """Tests for FeatureSchema constants."""
    
    def test_feature_columns(self):
        """Test FeatureVector column order."""
        assert FeatureSchema.feature_columns() == [
            "gc_content", "RNA_type", "RNA_region", "exon_length",
            "distance_to_junction", "evolutionary_conservation",
            "nt_pos1", "nt_pos2", "nt_pos3", "nt_pos4", "nt_pos5",
        ]
    
    def test_missing_columns(self):
        """Test detection of absent required columns."""
        missing = FeatureSchema.missing_columns(["gc_content", "DNA_5mer", "extra"])
        
        assert missing == [
            "RNA_type", "RNA_region", "exon_length",
            "distance_to_junction", "evolutionary_conservation",
        ]
    
    def test_categorical_dtype(self):
        """Test declared level order."""
        assert list(FeatureSchema.categorical_dtype("RNA_region").categories) == [
            "CDS", "intron", "3'UTR", "5'UTR"
        ]
        assert list(FeatureSchema.categorical_dtype("nt_pos3").categories) == ["A", "T", "C", "G"]
        
        with pytest.raises(KeyError):
            FeatureSchema.categorical_dtype("gc_content")


class TestSample:
    """Tests for Sample."""
    
    def test_numeric_coercion(self, single_sample):
        """Test that numeric fields become floats."""
        sample = Sample(**{**single_sample, "exon_length": "12"})
        
        assert sample.exon_length == 12.0
        assert isinstance(sample.distance_to_junction, float)
    
    def test_invalid_rna_type(self, single_sample):
        """Test rejection of an undeclared RNA type."""
        with pytest.raises(InvalidCategoryError) as exc_info:
            Sample(**{**single_sample, "RNA_type": "tRNA"})
        
        assert exc_info.value.column == "RNA_type"
        assert exc_info.value.value == "tRNA"
    
    def test_invalid_rna_region(self, single_sample):
        """Test rejection of an undeclared RNA region."""
        with pytest.raises(InvalidCategoryError):
            Sample(**{**single_sample, "RNA_region": "UTR"})
    
    def test_invalid_sequence(self, single_sample):
        """Test rejection of a malformed 5-mer."""
        with pytest.raises(InvalidSequenceError):
            Sample(**{**single_sample, "DNA_5mer": "ATGA"})
    
    def test_to_frame(self, single_sample):
        """Test one-row table export."""
        df = Sample(**single_sample).to_frame()
        
        assert list(df.columns) == list(FeatureSchema.REQUIRED_COLUMNS)
        assert len(df) == 1
        assert df.loc[0, "DNA_5mer"] == "ATGAT"


class TestFeatureAssembler:
    """Tests for FeatureAssembler."""
    
    def test_assemble_layout(self, feature_df):
        """Test FeatureVector columns, dtypes and row order."""
        features = FeatureAssembler().assemble(feature_df)
        
        assert list(features.columns) == FeatureSchema.feature_columns()
        assert "DNA_5mer" not in features.columns
        assert list(features["nt_pos1"]) == ["A", "G", "A", "T"]
        assert list(features["RNA_region"]) == ["CDS", "3'UTR", "intron", "5'UTR"]
        assert features["exon_length"].dtype == np.float64
    
    def test_extra_columns_excluded(self, feature_df):
        """Test that pass-through columns do not reach the model input."""
        df = feature_df.assign(site_id=["s1", "s2", "s3", "s4"])
        features = FeatureAssembler().assemble(df)
        
        assert "site_id" not in features.columns
    
    def test_column_order_independent(self, feature_df):
        """Test that input column order does not change the FeatureVector."""
        shuffled = feature_df[list(reversed(feature_df.columns))]
        
        pd.testing.assert_frame_equal(
            FeatureAssembler().assemble(shuffled),
            FeatureAssembler().assemble(feature_df)
        )
    
    def test_missing_columns(self, feature_df):
        """Test SchemaError names every missing column."""
        with pytest.raises(SchemaError) as exc_info:
            FeatureAssembler().assemble(feature_df.drop(columns=["RNA_type", "DNA_5mer"]))
        
        assert exc_info.value.missing_columns == ["RNA_type", "DNA_5mer"]
        assert "RNA_type" in str(exc_info.value)
    
    def test_unknown_category_lenient(self, feature_df, caplog):
        """Test that unknown categories become missing with a warning."""
        df = feature_df.copy()
        df.loc[1, "RNA_type"] = "snoRNA"
        
        with caplog.at_level(logging.WARNING):
            features = FeatureAssembler().assemble(df)
        
        assert pd.isna(features.loc[1, "RNA_type"])
        assert features.loc[0, "RNA_type"] == "mRNA"
        assert "RNA_type" in caplog.text
    
    def test_unknown_category_strict(self, feature_df):
        """Test that strict mode rejects unknown categories."""
        df = feature_df.copy()
        df.loc[2, "RNA_region"] = "exon"
        
        with pytest.raises(InvalidCategoryError, match="exon"):
            FeatureAssembler().assemble(df, strict=True)
    
    def test_non_default_index(self, feature_df):
        """Test that the input index is kept."""
        df = feature_df.set_index(pd.Index([7, 7, 2, 9]))
        features = FeatureAssembler().assemble(df)
        
        assert list(features.index) == [7, 7, 2, 9]
        assert list(features["nt_pos1"]) == ["A", "G", "A", "T"]


class TestDesignMatrix:
    """Tests for the one-hot design matrix."""
    
    def test_fixed_width(self, feature_df):
        """Test width is independent of the levels observed."""
        full = to_design_matrix(FeatureAssembler().assemble(feature_df))
        one = to_design_matrix(FeatureAssembler().assemble(feature_df.iloc[[0]]))
        
        assert list(full.columns) == design_matrix_columns()
        assert list(one.columns) == design_matrix_columns()
        assert full.shape == (4, 4 + 4 + 4 + 5 * 4)
    
    def test_indicators(self, feature_df):
        """Test one indicator set per categorical value."""
        X = to_design_matrix(FeatureAssembler().assemble(feature_df))
        
        assert X.loc[1, "RNA_region_3'UTR"] == 1.0
        assert X.loc[1, "RNA_region_CDS"] == 0.0
        assert X.loc[0, "nt_pos2_T"] == 1.0
        assert X.loc[0, "gc_content"] == 0.6
    
    def test_missing_category_all_zero(self, feature_df):
        """Test that a missing category yields all-zero indicators."""
        df = feature_df.copy()
        df.loc[0, "RNA_type"] = "unknown"
        X = to_design_matrix(FeatureAssembler().assemble(df))
        
        type_columns = [c for c in X.columns if c.startswith("RNA_type_")]
        assert X.loc[0, type_columns].sum() == 0.0
