"""View models for service outputs."""

from hilljump.domain.views.drip import DripResult, ReinvestmentStep
from hilljump.domain.views.summaries import (
    ImportSummary,
    IngestionSummary,
    BatchSummary,
    CachedDripView,
)

__all__ = [
    "DripResult",
    "ReinvestmentStep",
    "ImportSummary",
    "IngestionSummary",
    "BatchSummary",
    "CachedDripView",
]
