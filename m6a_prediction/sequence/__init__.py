"""Nucleotide sequence encoding."""

from .encoder import SequenceEncoder, encode_sequences, validate_sequence

__all__ = ["SequenceEncoder", "encode_sequences", "validate_sequence"]
