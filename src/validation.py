import pandera as pa
from pandera.typing import Series
from typing import Optional

from src.models import MatchStatus


class MatchFrameSchema(pa.DataFrameModel):
    """Schema for the match table shown in the dashboard."""
    id: Series[int] = pa.Field(unique=True)
    date: Series[pa.DateTime] = pa.Field(coerce=True)
    time: Optional[Series[str]] = pa.Field(nullable=True)
    club: Series[str]
    team: Series[str]
    result: Optional[Series[str]] = pa.Field(nullable=True)
    status: Series[str] = pa.Field(isin=[s.value for s in MatchStatus])

    class Config:
        strict = False  # Allow extra columns
