from __future__ import annotations

from typing import Dict, Sequence

from core.formatting import format_bytes, percentage, round_half_up
from core.models import AppRecord, RiskLevel, Statistics
from .base import BaseReportAnalyzer


class StatisticsAggregator(BaseReportAnalyzer[Statistics]):
    name = "StatisticsAggregator"

    def analyze(self, apps: Sequence[AppRecord]) -> Statistics:
        total_apps = len(apps)
        tiers: Dict[RiskLevel, int] = {level: 0 for level in RiskLevel}
        total_permissions = 0
        total_data = 0

        for app in apps:
            tiers[app.risk_level] += 1
            total_permissions += len(app.unique_permissions)
            total_data += app.total_data

        average = int(round_half_up(total_permissions / total_apps)) if total_apps else 0

        return Statistics(
            total_apps=total_apps,
            high_risk=tiers[RiskLevel.HIGH_RISK],
            medium_risk=tiers[RiskLevel.MEDIUM_RISK],
            low_risk=tiers[RiskLevel.LOW_RISK],
            no_risk=tiers[RiskLevel.NO_RISK],
            risk_percentage=percentage(tiers[RiskLevel.HIGH_RISK], total_apps),
            average_permissions=average,
            total_data_usage=format_bytes(total_data),
        )
