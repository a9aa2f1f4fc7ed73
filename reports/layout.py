# reports/layout.py
"""
What the report contains, independent of how it is drawn.

`build_document` turns a ReportModel into an ordered tuple of Section records.
Every string stored in a block is paragraph markup for the PDF serializer, so
user supplied text (app and package names, categories, permission ids) goes
through `escape_markup` here, exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from analysis_modules.recommendations import (
    BEST_PRACTICES,
    AdviceSeverity,
    RecommendationReport,
    build_recommendations,
)
from core.config import Config
from core.formatting import format_bytes, percentage
from core.models import AppRecord, PermissionLevel, ReportModel, RiskLevel
from core.permission_catalog import get_permission_info

TOP_PRIORITY_LIMIT = 5
INVENTORY_LIMIT = 30
DETAIL_SECTIONS_LIMIT = 10
# table cells cannot split across pages, so user text in them is clipped
CELL_TEXT_LIMIT = 120

_MARKUP_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


def escape_markup(text: object) -> str:
    if text is None:
        return ""
    return "".join(_MARKUP_ESCAPES.get(ch, ch) for ch in str(text))


def clip_text(text: object, limit: int = CELL_TEXT_LIMIT) -> str:
    """Escaped markup for user supplied text, cut to `limit` characters."""
    if text is None:
        return ""
    text = str(text)
    if len(text) > limit:
        text = text[: max(limit - 3, 0)] + "..."
    return escape_markup(text)


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


# ---------- BLOCKS ----------


class SectionKind(str, Enum):
    COVER = "cover"
    RISK_OVERVIEW = "risk_overview"
    TOP_PRIORITY = "top_priority"
    DATA_USAGE = "data_usage"
    INVENTORY = "inventory"
    APP_DETAIL = "app_detail"
    RECOMMENDATIONS = "recommendations"


class Tone(str, Enum):
    """Colour family of badges, bars and callouts."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SAFE = "safe"
    NEUTRAL = "neutral"


RISK_TONES = {
    RiskLevel.HIGH_RISK: Tone.HIGH,
    RiskLevel.MEDIUM_RISK: Tone.MEDIUM,
    RiskLevel.LOW_RISK: Tone.LOW,
    RiskLevel.NO_RISK: Tone.SAFE,
}

PERMISSION_TONES = {
    PermissionLevel.HIGH: Tone.HIGH,
    PermissionLevel.MEDIUM: Tone.MEDIUM,
    PermissionLevel.LOW: Tone.LOW,
}

ADVICE_TONES = {
    AdviceSeverity.CRITICAL: Tone.HIGH,
    AdviceSeverity.WARNING: Tone.MEDIUM,
    AdviceSeverity.CAUTION: Tone.MEDIUM,
}


@dataclass(frozen=True)
class SubHeading:
    text: str


@dataclass(frozen=True)
class TextBlock:
    text: str
    style: str = "body"


@dataclass(frozen=True)
class KeyValueGrid:
    items: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class Bar:
    label: str
    value: int
    fraction: float
    tone: Tone


@dataclass(frozen=True)
class BarChart:
    bars: Tuple[Bar, ...]


@dataclass(frozen=True)
class TableBlock:
    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    col_widths: Tuple[float, ...]
    trailer: Optional[str] = None
    # per row tone of the badge column, if any
    badge_column: Optional[int] = None
    row_tones: Tuple[Tone, ...] = ()


@dataclass(frozen=True)
class Callout:
    title: str
    text: str
    tone: Tone = Tone.NEUTRAL


@dataclass(frozen=True)
class BulletList:
    title: str
    items: Tuple[str, ...]


Block = Union[SubHeading, TextBlock, KeyValueGrid, BarChart, TableBlock, Callout, BulletList]


@dataclass(frozen=True)
class Section:
    kind: SectionKind
    title: str
    blocks: Tuple[Block, ...] = field(default_factory=tuple)


# ---------- SECTIONS ----------


def _cover(model: ReportModel) -> Section:
    stats = model.stats
    when = model.generated_at
    blocks: List[Block] = [
        TextBlock(f"{escape_markup(Config.PRODUCT_NAME)}", style="logo"),
        TextBlock("Security &amp; Privacy Report", style="title"),
        TextBlock("Comprehensive App Analysis", style="subtitle"),
        KeyValueGrid(
            (
                ("Report Generated", when.strftime("%Y-%m-%d")),
                ("Report Time", when.strftime("%H:%M:%S")),
                ("Platform", escape_markup(model.device_info.platform.upper())),
                ("App Version", f"v{escape_markup(model.app_version)}"),
            )
        ),
        SubHeading("Executive Summary"),
        TextBlock(f"<b>Total Apps Analyzed:</b> {stats.total_apps} applications"),
        TextBlock(
            f"<b>Security Status:</b> {stats.high_risk} high-risk apps detected "
            f"({stats.risk_percentage}% of total)"
        ),
        TextBlock(f"<b>Average Permissions:</b> {stats.average_permissions} permissions per app"),
        TextBlock(f"<b>Total Data Usage:</b> {stats.total_data_usage}"),
    ]
    if stats.high_risk > 0:
        suffix = "s" if stats.high_risk > 1 else ""
        blocks.append(
            Callout(
                title="Important Recommendation",
                text=(
                    f"You have {stats.high_risk} high-risk app{suffix} on your device. "
                    "We recommend reviewing their permissions and considering alternatives "
                    "if they're not essential."
                ),
                tone=Tone.HIGH,
            )
        )
    blocks.append(
        TextBlock(
            "This report contains confidential information about your device security",
            style="note",
        )
    )
    return Section(SectionKind.COVER, "Security Report", tuple(blocks))


def _bar(label: str, value: int, total: int, tone: Tone) -> Bar:
    fraction = value / total if total > 0 else 0.0
    return Bar(label=label, value=value, fraction=fraction, tone=tone)


def _risk_overview(model: ReportModel) -> Section:
    stats = model.stats
    analysis = model.permission_analysis
    total = stats.total_apps

    rows = tuple(
        (
            f"<b>{clip_text(item.permission)}</b>",
            str(item.count),
            f"{percentage(item.count, total)}%",
        )
        for item in analysis.most_common
    )

    blocks: Tuple[Block, ...] = (
        KeyValueGrid(
            (
                ("High Risk", str(stats.high_risk)),
                ("Medium Risk", str(stats.medium_risk)),
                ("Low Risk", str(stats.low_risk)),
                ("Safe Apps", str(stats.no_risk)),
            )
        ),
        SubHeading("Risk Distribution"),
        BarChart(
            (
                _bar("High Risk", stats.high_risk, total, Tone.HIGH),
                _bar("Medium Risk", stats.medium_risk, total, Tone.MEDIUM),
                _bar("Low Risk", stats.low_risk, total, Tone.LOW),
                _bar("Safe", stats.no_risk, total, Tone.SAFE),
            )
        ),
        SubHeading("Permission Analysis"),
        KeyValueGrid(
            (
                ("High Risk Permissions", str(analysis.high_risk_permissions)),
                ("Medium Risk Permissions", str(analysis.medium_risk_permissions)),
                ("Average Permissions/App", str(stats.average_permissions)),
                ("Total Unique Permissions", str(analysis.total_unique_permissions)),
            )
        ),
        SubHeading("Most Common Permissions"),
        TableBlock(
            header=("Permission", "Apps Using", "Percentage"),
            rows=rows,
            col_widths=(0.6, 0.2, 0.2),
        ),
    )
    return Section(SectionKind.RISK_OVERVIEW, "Security Overview", blocks)


def _top_priority(model: ReportModel) -> Optional[Section]:
    if not model.top_risky_apps:
        return None

    blocks: List[Block] = [
        TextBlock(
            "These apps have the highest security risk scores and should be reviewed carefully."
        )
    ]
    for index, app in enumerate(model.top_risky_apps[:TOP_PRIORITY_LIMIT], start=1):
        name = clip_text(app.name or app.app_name or "Unknown App")
        blocks.append(
            SubHeading(f"{index}. {name} ({clip_text(app.package_name)})")
        )
        blocks.append(
            KeyValueGrid(
                (
                    ("Risk Level", app.risk_level.value),
                    ("Risk Score", _number(app.risk_score)),
                    ("Permissions", str(len(app.unique_permissions))),
                    ("High Risk Permissions", _number(app.high_risk_count)),
                    ("Data Usage", format_bytes(app.total_data)),
                )
            )
        )
    blocks.append(
        TextBlock("See detailed permission analysis in individual app pages below.", style="note")
    )
    return Section(SectionKind.TOP_PRIORITY, "High Priority Apps", tuple(blocks))


def _data_usage(model: ReportModel) -> Section:
    summary = model.data_usage_summary
    blocks: List[Block] = [
        KeyValueGrid(
            (
                ("Total WiFi Usage", summary.total_wifi),
                ("Total Mobile Data", summary.total_mobile),
                ("Combined Total", summary.total_combined),
                ("Apps with Data Usage", str(summary.apps_with_usage)),
            )
        )
    ]
    if summary.top_data_consumers:
        rows = tuple(
            (
                f"<b>{clip_text(c.name)}</b><br/>"
                f"<font size='7' color='#666666'>{clip_text(c.package_name)}</font>",
                f"<b>{format_bytes(c.total)}</b>",
                format_bytes(c.wifi),
                format_bytes(c.mobile),
            )
            for c in summary.top_data_consumers
        )
        blocks.append(SubHeading("Top Data Consumers"))
        blocks.append(
            TableBlock(
                header=("App Name", "Total Usage", "WiFi", "Mobile"),
                rows=rows,
                col_widths=(0.46, 0.18, 0.18, 0.18),
            )
        )
    else:
        blocks.append(TextBlock("No data usage information available."))
    return Section(SectionKind.DATA_USAGE, "Data Usage Analysis", tuple(blocks))


def _app_cell(app: AppRecord) -> str:
    return (
        f"<b>{clip_text(app.display_name)}</b><br/>"
        f"<font size='7' color='#666666'>{clip_text(app.package_name)}</font>"
    )


def _inventory(model: ReportModel) -> Section:
    apps = model.apps
    shown = apps[:INVENTORY_LIMIT]
    rows = tuple(
        (
            str(index),
            _app_cell(app),
            clip_text(app.category),
            app.risk_level.short_label.replace("_", " "),
            f"<b>{len(app.unique_permissions)}</b>",
        )
        for index, app in enumerate(shown, start=1)
    )
    hidden = len(apps) - len(shown)
    trailer = f"<i>... and {hidden} more apps</i>" if hidden > 0 else None

    blocks = (
        TextBlock(
            f"Complete list of all {len(apps)} analyzed applications "
            f"(showing first {INVENTORY_LIMIT})"
        ),
        TableBlock(
            header=("#", "App Name", "Category", "Risk Level", "Permissions"),
            rows=rows,
            col_widths=(0.07, 0.45, 0.18, 0.15, 0.15),
            trailer=trailer,
            badge_column=3,
            row_tones=tuple(RISK_TONES[app.risk_level] for app in shown),
        ),
    )
    return Section(SectionKind.INVENTORY, "Complete App Inventory", blocks)


def detail_candidates(apps: Sequence[AppRecord]) -> Tuple[AppRecord, ...]:
    with_permissions = [app for app in apps if app.unique_permissions]
    return tuple(with_permissions[:DETAIL_SECTIONS_LIMIT])


def _app_detail(app: AppRecord, rank: int) -> Section:
    permissions = app.unique_permissions
    name = clip_text(app.display_name)
    infos = [get_permission_info(p) for p in permissions]

    blocks: List[Block] = [
        SubHeading(f"{name} ({clip_text(app.package_name)})"),
        KeyValueGrid(
            (
                ("Category", clip_text(app.category)),
                ("Risk Level", app.risk_level.short_label.replace("_", " ")),
                ("Risk Score", _number(app.risk_score)),
                ("Total Permissions", str(len(permissions))),
                ("High Risk Perms", _number(app.high_risk_count)),
            )
        ),
        SubHeading(f"All Permissions ({len(permissions)})"),
        TableBlock(
            header=("#", "Permission", "Risk Level", "Description"),
            rows=tuple(
                (
                    str(index),
                    f"<b>{clip_text(permission)}</b>",
                    info.level.value,
                    escape_markup(info.description),
                )
                for index, (permission, info) in enumerate(zip(permissions, infos), start=1)
            ),
            col_widths=(0.06, 0.34, 0.15, 0.45),
            badge_column=2,
            row_tones=tuple(PERMISSION_TONES[info.level] for info in infos),
        ),
    ]

    usage = app.data_usage
    if usage is not None and usage.total > 0:
        blocks.append(SubHeading("Data Usage"))
        blocks.append(
            KeyValueGrid(
                (
                    ("Total Usage", format_bytes(usage.total)),
                    ("WiFi", format_bytes(usage.wifi)),
                    ("Mobile Data", format_bytes(usage.mobile)),
                    ("Usage Rank", f"#{rank}"),
                )
            )
        )
    return Section(SectionKind.APP_DETAIL, f"App Details: {name}", tuple(blocks))


def _recommendations(model: ReportModel, advice: RecommendationReport) -> Section:
    stats = model.stats
    blocks: List[Block] = [
        Callout(title=item.title, text=item.message, tone=ADVICE_TONES[item.severity])
        for item in advice.recommendations
    ]
    blocks.append(BulletList(title="Best Practices", items=BEST_PRACTICES))
    blocks.append(SubHeading("Report Summary"))
    blocks.append(
        TextBlock(
            f"This comprehensive security report analyzed {stats.total_apps} applications "
            f"on your {escape_markup(model.device_info.platform.upper())} device."
        )
    )
    blocks.append(
        TextBlock(
            f"<b>Overall Security Status:</b> {advice.status.value} - {advice.status.description}"
        )
    )
    blocks.append(TextBlock(f"<b>Next Steps:</b> {advice.next_steps}"))
    blocks.append(
        TextBlock(
            "This report is confidential and contains sensitive information about your device "
            "security. Keep this document secure and do not share with unauthorized parties.",
            style="note",
        )
    )
    return Section(SectionKind.RECOMMENDATIONS, "Security Recommendations", tuple(blocks))


def build_document(
    model: ReportModel,
    advice: Optional[RecommendationReport] = None,
) -> Tuple[Section, ...]:
    advice = advice or build_recommendations(model)

    sections: List[Section] = [_cover(model), _risk_overview(model)]
    top = _top_priority(model)
    if top is not None:
        sections.append(top)
    sections.append(_data_usage(model))
    sections.append(_inventory(model))
    sections.extend(
        _app_detail(app, rank)
        for rank, app in enumerate(detail_candidates(model.apps), start=1)
    )
    sections.append(_recommendations(model, advice))
    return tuple(sections)
