"""Positional categorical encoding of fixed-length DNA k-mers."""

import logging
from typing import Iterable, List, Optional, Union
import pandas as pd

from ..exceptions import EncodingError, InvalidSequenceError
from ..schema import FeatureSchema

logger = logging.getLogger(__name__)


def validate_sequence(
    sequence,
    length: int = FeatureSchema.SEQUENCE_LENGTH
) -> str:
    """Check a single k-mer and return it unchanged.
    
    Raises:
        InvalidSequenceError: If ``sequence`` is not a string of exactly
            ``length`` characters drawn from A/T/C/G.
    """
    if not isinstance(sequence, str):
        raise InvalidSequenceError(
            f"{FeatureSchema.SEQUENCE_COLUMN} must be a string, got {type(sequence).__name__}"
        )
    if len(sequence) != length:
        raise InvalidSequenceError(
            f"{FeatureSchema.SEQUENCE_COLUMN} must be {length} characters long, "
            f"got {len(sequence)}: {sequence!r}"
        )
    invalid = sorted(set(sequence) - set(FeatureSchema.NUCLEOTIDES))
    if invalid:
        raise InvalidSequenceError(
            f"{FeatureSchema.SEQUENCE_COLUMN} {sequence!r} contains invalid "
            f"nucleotides: {', '.join(invalid)}"
        )
    return sequence


class SequenceEncoder:
    """Split equal-length nucleotide strings into one categorical column per position.
    
    Every output column carries the full A/T/C/G level set, not just the
    letters observed in the batch, so the encoding width and level order are
    identical across calls.
    """
    
    def __init__(self, alphabet: Iterable[str] = FeatureSchema.NUCLEOTIDES):
        self.alphabet = tuple(alphabet)
        self._allowed = set(self.alphabet)
    
    def encode(
        self,
        sequences: Union[pd.Series, Iterable[str]],
        length: Optional[int] = None
    ) -> pd.DataFrame:
        """Encode sequences into ``nt_pos1..nt_posN`` columns.
        
        Args:
            sequences: Strings to encode. A Series keeps its index.
            length: Required sequence length; if None the length of the
                first sequence is used.
        
        Returns:
            DataFrame with one row per input sequence, in input order.
        
        Raises:
            EncodingError: Non-string entries, inconsistent lengths or
                characters outside the alphabet.
            InvalidSequenceError: Consistent lengths that differ from ``length``.
        """
        index = sequences.index if isinstance(sequences, pd.Series) else None
        seqs = list(sequences)
        width = self._validate(seqs, length)
        
        columns = FeatureSchema.sequence_columns(width)
        encoded = pd.DataFrame(
            [list(s) for s in seqs],
            columns=columns,
            index=index
        )
        dtype = pd.CategoricalDtype(categories=list(self.alphabet))
        encoded = encoded.astype({c: dtype for c in columns})
        
        logger.debug(f"Encoded {len(seqs)} sequence(s) into {width} positions")
        return encoded
    
    def _validate(self, seqs: List, length: Optional[int]) -> int:
        """Validate sequences and return the encoding width."""
        for i, seq in enumerate(seqs):
            if not isinstance(seq, str):
                raise EncodingError(
                    f"Sequence at row {i} is not a string: {seq!r}"
                )
        
        if not seqs:
            return length if length is not None else FeatureSchema.SEQUENCE_LENGTH
        
        width = len(seqs[0])
        lengths = {len(s) for s in seqs}
        if len(lengths) > 1:
            raise EncodingError(
                f"Sequences have inconsistent lengths: {sorted(lengths)}"
            )
        
        if length is not None and width != length:
            raise InvalidSequenceError(
                f"Sequences must be {length} characters long, got {width}"
            )
        
        if width == 0:
            raise EncodingError("Cannot encode empty sequences")
        
        for i, seq in enumerate(seqs):
            invalid = set(seq) - self._allowed
            if invalid:
                raise EncodingError(
                    f"Sequence {seq!r} at row {i} contains characters outside "
                    f"{'/'.join(self.alphabet)}: {', '.join(sorted(invalid))}"
                )
        
        return width


def encode_sequences(
    sequences: Union[pd.Series, Iterable[str]],
    length: Optional[int] = None
) -> pd.DataFrame:
    """Encode sequences with the default A/T/C/G encoder."""
    return SequenceEncoder().encode(sequences, length=length)
