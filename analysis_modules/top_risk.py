from __future__ import annotations

from typing import Sequence, Tuple

from core.models import AppRecord
from .base import BaseReportAnalyzer

DEFAULT_TOP_RISK_LIMIT = 10


class TopRiskRanker(BaseReportAnalyzer[Tuple[AppRecord, ...]]):
    name = "TopRiskRanker"

    def __init__(self, limit: int = DEFAULT_TOP_RISK_LIMIT) -> None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self.limit = limit

    def analyze(self, apps: Sequence[AppRecord]) -> Tuple[AppRecord, ...]:
        assessed = [app for app in apps if app.risk_analysis is not None]
        # sorted() is stable, equal scores keep their input order
        ranked = sorted(assessed, key=lambda app: app.risk_score, reverse=True)
        return tuple(ranked[: self.limit])
