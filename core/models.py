from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class RiskLevel(str, Enum):
    HIGH_RISK = "HIGH_RISK"
    MEDIUM_RISK = "MEDIUM_RISK"
    LOW_RISK = "LOW_RISK"
    NO_RISK = "NO_RISK"

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel":
        """Unknown or missing levels collapse into NO_RISK."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.NO_RISK

    @property
    def short_label(self) -> str:
        # HIGH_RISK -> HIGH, NO_RISK -> SAFE
        if self is RiskLevel.NO_RISK:
            return "SAFE"
        return self.value.replace("_RISK", "")


class PermissionLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def parse(cls, value: Any) -> Optional["PermissionLevel"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return None


def _number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    # NaN and Infinity are valid JSON for the json module
    return number if math.isfinite(number) else 0


# ---------- INPUT RECORDS ----------


@dataclass(frozen=True)
class RiskFactor:
    permission: str
    level: Optional[PermissionLevel]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskFactor":
        return cls(
            permission=str(data.get("permission", "")),
            level=PermissionLevel.parse(data.get("level")),
        )


@dataclass(frozen=True)
class RiskAnalysis:
    risk_level: RiskLevel = RiskLevel.NO_RISK
    risk_score: float = 0
    high_risk_count: float = 0
    risk_factors: Tuple[RiskFactor, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskAnalysis":
        factors = data.get("riskFactors") or ()
        return cls(
            risk_level=RiskLevel.parse(data.get("riskLevel")),
            risk_score=_number(data.get("riskScore")),
            high_risk_count=_number(data.get("highRiskCount")),
            risk_factors=tuple(
                RiskFactor.from_dict(f) for f in factors if isinstance(f, Mapping)
            ),
        )


@dataclass(frozen=True)
class DataUsage:
    total: float = 0
    wifi: float = 0
    mobile: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataUsage":
        return cls(
            total=_number(data.get("total")),
            wifi=_number(data.get("wifi")),
            mobile=_number(data.get("mobile")),
        )


@dataclass(frozen=True)
class AppRecord:
    name: Optional[str]
    package_name: str
    app_name: Optional[str] = None
    category: str = "Other"
    permissions: Tuple[str, ...] = ()
    risk_analysis: Optional[RiskAnalysis] = None
    data_usage: Optional[DataUsage] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppRecord":
        risk = data.get("riskAnalysis")
        usage = data.get("dataUsage")
        return cls(
            name=data.get("name") or None,
            package_name=str(data.get("packageName") or ""),
            app_name=data.get("appName") or None,
            category=data.get("category") or "Other",
            permissions=tuple(str(p) for p in (data.get("permissions") or ())),
            risk_analysis=RiskAnalysis.from_dict(risk) if isinstance(risk, Mapping) else None,
            data_usage=DataUsage.from_dict(usage) if isinstance(usage, Mapping) else None,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.app_name or "Unknown"

    @property
    def unique_permissions(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(self.permissions))

    @property
    def risk_level(self) -> RiskLevel:
        if self.risk_analysis is None:
            return RiskLevel.NO_RISK
        return self.risk_analysis.risk_level

    @property
    def risk_score(self) -> float:
        if self.risk_analysis is None:
            return 0
        return self.risk_analysis.risk_score

    @property
    def high_risk_count(self) -> float:
        if self.risk_analysis is None:
            return 0
        return self.risk_analysis.high_risk_count

    @property
    def total_data(self) -> float:
        if self.data_usage is None:
            return 0
        return self.data_usage.total


# ---------- DERIVED AGGREGATES ----------


@dataclass(frozen=True)
class PermissionInfo:
    level: PermissionLevel
    description: str


@dataclass(frozen=True)
class Statistics:
    total_apps: int
    high_risk: int
    medium_risk: int
    low_risk: int
    no_risk: int
    risk_percentage: int
    average_permissions: int
    total_data_usage: str


@dataclass(frozen=True)
class RiskCategories:
    high_risk: Tuple[AppRecord, ...] = ()
    medium_risk: Tuple[AppRecord, ...] = ()
    low_risk: Tuple[AppRecord, ...] = ()
    no_risk: Tuple[AppRecord, ...] = ()

    def total(self) -> int:
        return len(self.high_risk) + len(self.medium_risk) + len(self.low_risk) + len(self.no_risk)


@dataclass(frozen=True)
class PermissionCount:
    permission: str
    count: int


@dataclass(frozen=True)
class PermissionAnalysis:
    permission_count: Mapping[str, int]
    most_common: Tuple[PermissionCount, ...]
    high_risk_permissions: int
    medium_risk_permissions: int
    low_risk_permissions: int

    @property
    def total_unique_permissions(self) -> int:
        return len(self.permission_count)


@dataclass(frozen=True)
class DataConsumer:
    name: str
    package_name: str
    total: float
    wifi: float = 0
    mobile: float = 0


@dataclass(frozen=True)
class DataUsageSummary:
    total_wifi: str
    total_mobile: str
    total_combined: str
    top_data_consumers: Tuple[DataConsumer, ...] = ()

    @property
    def apps_with_usage(self) -> int:
        return len(self.top_data_consumers)


@dataclass(frozen=True)
class DeviceInfo:
    platform: str
    os_version: str


@dataclass(frozen=True)
class ReportModel:
    generated_at: datetime
    app_version: str
    device_info: DeviceInfo
    stats: Statistics
    risk_categories: RiskCategories
    top_risky_apps: Tuple[AppRecord, ...]
    permission_analysis: PermissionAnalysis
    data_usage_summary: DataUsageSummary
    apps: Tuple[AppRecord, ...]
    settings: Dict[str, Any] = field(default_factory=dict)
    scan_results: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GeneratedReport:
    file_path: str
    number_of_pages: int = 0
    base64: str = ""
