"""
Domain module - Business models

Contains pure business models without external dependencies.
All models are JSON-serializable through to_dict().
"""

from predictarb.domain.models import (
    Contract,
    Market,
    MarketSnapshot,
    AnalysisResult,
    MarketEvaluation,
    ClassifiedResult,
    CycleReport,
)
from predictarb.domain.priority import Priority

__all__ = [
    "Contract",
    "Market",
    "MarketSnapshot",
    "AnalysisResult",
    "MarketEvaluation",
    "ClassifiedResult",
    "CycleReport",
    "Priority",
]
