from __future__ import annotations

from typing import Dict, List, Sequence

from core.models import AppRecord, RiskCategories, RiskLevel
from .base import BaseReportAnalyzer


class RiskCategorizer(BaseReportAnalyzer[RiskCategories]):
    name = "RiskCategorizer"

    def analyze(self, apps: Sequence[AppRecord]) -> RiskCategories:
        groups: Dict[RiskLevel, List[AppRecord]] = {level: [] for level in RiskLevel}
        for app in apps:
            groups[app.risk_level].append(app)

        return RiskCategories(
            high_risk=tuple(groups[RiskLevel.HIGH_RISK]),
            medium_risk=tuple(groups[RiskLevel.MEDIUM_RISK]),
            low_risk=tuple(groups[RiskLevel.LOW_RISK]),
            no_risk=tuple(groups[RiskLevel.NO_RISK]),
        )
