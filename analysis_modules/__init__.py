"""Read-only analyzers over an app snapshot and the report model builder."""

from .data_usage import DataUsageSummarizer
from .permissions_analyzer import PermissionsAnalyzer
from .recommendations import build_recommendations
from .report_analysis import build_report_model
from .risk_categorizer import RiskCategorizer
from .stats_aggregator import StatisticsAggregator
from .top_risk import TopRiskRanker

__all__ = [
    "DataUsageSummarizer",
    "PermissionsAnalyzer",
    "RiskCategorizer",
    "StatisticsAggregator",
    "TopRiskRanker",
    "build_recommendations",
    "build_report_model",
]
