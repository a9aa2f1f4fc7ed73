# analysis_modules/permissions_analyzer.py
from __future__ import annotations

from typing import Dict, Sequence, Set

from core.models import AppRecord, PermissionAnalysis, PermissionCount, PermissionLevel
from .base import BaseReportAnalyzer

MOST_COMMON_LIMIT = 10


class PermissionsAnalyzer(BaseReportAnalyzer[PermissionAnalysis]):
    """
    Two independent facets:
    - prevalence: how many apps request each permission (all permissions);
    - risk factors: distinct permissions the upstream assessor flagged per level.
    """

    name = "PermissionsAnalyzer"

    def analyze(self, apps: Sequence[AppRecord]) -> PermissionAnalysis:
        permission_count: Dict[str, int] = {}
        flagged: Dict[PermissionLevel, Set[str]] = {level: set() for level in PermissionLevel}

        for app in apps:
            for permission in app.unique_permissions:
                permission_count[permission] = permission_count.get(permission, 0) + 1

            if app.risk_analysis is None:
                continue
            for factor in app.risk_analysis.risk_factors:
                if factor.level is None:
                    continue
                flagged[factor.level].add(factor.permission)

        ranked = sorted(permission_count.items(), key=lambda item: item[1], reverse=True)
        most_common = tuple(
            PermissionCount(permission=permission, count=count)
            for permission, count in ranked[:MOST_COMMON_LIMIT]
        )

        return PermissionAnalysis(
            permission_count=permission_count,
            most_common=most_common,
            high_risk_permissions=len(flagged[PermissionLevel.HIGH]),
            medium_risk_permissions=len(flagged[PermissionLevel.MEDIUM]),
            low_risk_permissions=len(flagged[PermissionLevel.LOW]),
        )
