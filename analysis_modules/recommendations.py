from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from core.config import Config
from core.models import ReportModel

AVERAGE_PERMISSIONS_THRESHOLD = 10
SENSITIVE_PERMISSIONS_THRESHOLD = 5
FAIR_MAX_HIGH_RISK = 2

BEST_PRACTICES: Tuple[str, ...] = (
    "Regularly review and uninstall apps you no longer use",
    "Check app permissions before installing new applications",
    "Keep all apps updated to the latest versions",
    f"Use {Config.PRODUCT_NAME} weekly to track new security issues",
    "Review app permissions in device settings monthly",
)


class AdviceSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    CAUTION = "caution"


class OverallStatus(str, Enum):
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_ATTENTION = "Needs Attention"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    OverallStatus.GOOD: "No high-risk apps detected",
    OverallStatus.FAIR: "Some concerns to address",
    OverallStatus.NEEDS_ATTENTION: "Multiple high-risk apps",
}


@dataclass(frozen=True)
class Recommendation:
    severity: AdviceSeverity
    title: str
    message: str


@dataclass(frozen=True)
class RecommendationReport:
    recommendations: Tuple[Recommendation, ...]
    status: OverallStatus
    next_steps: str


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def overall_status(high_risk: int) -> OverallStatus:
    if high_risk == 0:
        return OverallStatus.GOOD
    if high_risk <= FAIR_MAX_HIGH_RISK:
        return OverallStatus.FAIR
    return OverallStatus.NEEDS_ATTENTION


def build_recommendations(model: ReportModel) -> RecommendationReport:
    stats = model.stats
    high_risk_permissions = model.permission_analysis.high_risk_permissions
    items: List[Recommendation] = []

    if stats.high_risk > 0:
        items.append(
            Recommendation(
                severity=AdviceSeverity.CRITICAL,
                title="Critical: Review High-Risk Apps",
                message=(
                    f"You have {stats.high_risk} high-risk {_plural(stats.high_risk, 'app')} installed. "
                    "Review their permissions in device settings and consider if they're essential. "
                    "Look for alternative apps with fewer permission requirements."
                ),
            )
        )

    if stats.average_permissions > AVERAGE_PERMISSIONS_THRESHOLD:
        items.append(
            Recommendation(
                severity=AdviceSeverity.WARNING,
                title="Warning: High Permission Usage",
                message=(
                    f"Your apps request an average of {stats.average_permissions} permissions, "
                    "which is above normal. Review which permissions are truly necessary and "
                    "revoke unused ones in your device settings."
                ),
            )
        )

    if high_risk_permissions > SENSITIVE_PERMISSIONS_THRESHOLD:
        items.append(
            Recommendation(
                severity=AdviceSeverity.CAUTION,
                title="Caution: Multiple Sensitive Permissions",
                message=(
                    f"{high_risk_permissions} distinct sensitive permissions such as Camera, "
                    "Microphone or Location were flagged as high risk. Regularly audit which apps "
                    "need these permissions and revoke access for apps that don't actively use them."
                ),
            )
        )

    return RecommendationReport(
        recommendations=tuple(items),
        status=overall_status(stats.high_risk),
        next_steps=(
            "Review high-risk apps immediately"
            if stats.high_risk > 0
            else "Continue monitoring regularly"
        ),
    )
