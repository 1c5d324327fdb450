"""
Correlation quote table.

Provides:
- CorrelationQuoteMatrix: live view over a [loss level][tenor] table of quotes
- load_correlation_quotes: build such a table from a CSV file or DataFrame
"""

from typing import Iterator, List, Optional, Sequence, Tuple, Union
import numpy as np
import pandas as pd

from ..dates import Period
from ..errors import InvalidInputError
from ..observer import Observer
from ..quotes import Quote, SimpleQuote

QuoteLike = Union[Quote, float]


class CorrelationQuoteMatrix:
    """
    Quotes arranged by (loss level row, tenor column).
    
    The quotes are owned by whoever feeds market data; this class only holds
    references and always reads the live value. The column count is that of
    the full tenor list, regardless of how many tenors are still alive.
    """
    
    def __init__(self, quotes: Sequence[Sequence[QuoteLike]]):
        if len(quotes) == 0 or len(quotes[0]) == 0:
            raise InvalidInputError("empty correlation quote table")
        width = len(quotes[0])
        for i, row in enumerate(quotes):
            if len(row) != width:
                raise InvalidInputError(
                    f"ragged correlation quote table: row {i} has {len(row)} columns, expected {width}"
                )
        self._quotes: List[List[Quote]] = [
            [q if isinstance(q, Quote) else SimpleQuote(q) for q in row]
            for row in quotes
        ]
    
    @property
    def rows(self) -> int:
        return len(self._quotes)
    
    @property
    def columns(self) -> int:
        """Total number of tenor columns in the table."""
        return len(self._quotes[0])
    
    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.columns
    
    def quote(self, row: int, col: int) -> Quote:
        return self._quotes[row][col]
    
    def value(self, row: int, col: int) -> float:
        """Current value of the quote at (row, col)."""
        return self._quotes[row][col].value()
    
    def __iter__(self) -> Iterator[Quote]:
        for row in self._quotes:
            yield from row
    
    def subscribe_all(self, observer: Observer) -> None:
        for q in self:
            q.subscribe(observer)
    
    def unsubscribe_all(self, observer: Observer) -> None:
        for q in self:
            q.unsubscribe(observer)
    
    def values(self, offset: int = 0, n_columns: Optional[int] = None) -> np.ndarray:
        """
        Read current values into a (rows, n_columns) array.
        
        Args:
            offset: First table column to read
            n_columns: Number of columns to read (default: through the last)
        """
        if n_columns is None:
            n_columns = self.columns - offset
        if offset < 0 or offset + n_columns > self.columns:
            raise InvalidInputError(
                f"columns {offset}..{offset + n_columns - 1} outside table of {self.columns} columns"
            )
        out = np.empty((self.rows, n_columns), dtype=np.float64)
        for i in range(self.rows):
            for j in range(n_columns):
                out[i, j] = self._quotes[i][offset + j].value()
        return out


def _resolve_columns(df: pd.DataFrame, candidates: List[str]) -> Optional[str]:
    """Return the first column present from a candidate list."""
    for c in candidates:
        if c in df.columns:
            return c
    return None


def load_correlation_quotes(
    source: Union[str, pd.DataFrame]
) -> Tuple[List[Period], List[float], List[List[SimpleQuote]]]:
    """
    Load base correlation quotes from a long-format table.
    
    Expected columns (case-insensitive):
    tenor, loss_level (or detachment), correlation (or base_correlation, corr)
    
    Args:
        source: Path to a CSV file or a DataFrame
        
    Returns:
        Tuple of (sorted tenors, sorted loss levels, quote table) where the
        table is indexed [loss level][tenor]
    """
    if isinstance(source, str):
        df = pd.read_csv(source)
    else:
        df = source.copy()
    
    # Standardize column names
    df.columns = [str(c).strip().lower() for c in df.columns]
    
    tenor_col = _resolve_columns(df, ["tenor", "maturity"])
    loss_col = _resolve_columns(df, ["loss_level", "detachment", "strike"])
    corr_col = _resolve_columns(df, ["correlation", "base_correlation", "corr"])
    if tenor_col is None or loss_col is None or corr_col is None:
        raise InvalidInputError("Correlation quotes must include tenor, loss_level and correlation columns.")
    
    df["_tenor"] = [Period.parse(t) for t in df[tenor_col]]
    df["_loss"] = df[loss_col].astype(float)
    
    duplicated = df.duplicated(subset=["_tenor", "_loss"])
    if duplicated.any():
        row = df[duplicated].iloc[0]
        raise InvalidInputError(f"duplicate quote for tenor {row['_tenor']} and loss level {row['_loss']}")
    
    tenors = sorted(set(df["_tenor"]))
    loss_levels = sorted(float(l) for l in set(df["_loss"]))
    lookup = {(t, l): float(c) for t, l, c in zip(df["_tenor"], df["_loss"], df[corr_col])}
    
    table: List[List[SimpleQuote]] = []
    for loss in loss_levels:
        row = []
        for tenor in tenors:
            if (tenor, loss) not in lookup:
                raise InvalidInputError(f"missing quote for tenor {tenor} and loss level {loss}")
            row.append(SimpleQuote(lookup[(tenor, loss)]))
        table.append(row)
    
    return tenors, loss_levels, table


__all__ = ["CorrelationQuoteMatrix", "load_correlation_quotes"]
