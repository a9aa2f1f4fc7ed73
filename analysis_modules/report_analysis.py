# analysis_modules/report_analysis.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence, TypeVar

from core.blob_store import SCAN_RESULTS_KEY, SETTINGS_KEY, BlobStore
from core.config import Config
from core.host import HostPlatform, detect_host_platform
from core.models import AppRecord, ReportModel
from .base import BaseReportAnalyzer
from .data_usage import DataUsageSummarizer
from .permissions_analyzer import PermissionsAnalyzer
from .risk_categorizer import RiskCategorizer
from .stats_aggregator import StatisticsAggregator
from .top_risk import DEFAULT_TOP_RISK_LIMIT, TopRiskRanker

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


def _run(analyzer: BaseReportAnalyzer[ResultT], apps: Sequence[AppRecord]) -> ResultT:
    logger.debug("Running %s on %d apps", analyzer.name, len(apps))
    try:
        return analyzer.analyze(apps)
    except Exception as e:
        logger.error("Analyzer %s failed: %s", analyzer.name, e)
        raise


def build_report_model(
    apps: Sequence[AppRecord],
    store: Optional[BlobStore] = None,
    host: Optional[HostPlatform] = None,
    clock: Callable[[], datetime] = datetime.now,
    app_version: str = Config.APP_VERSION,
    top_risk_limit: int = DEFAULT_TOP_RISK_LIMIT,
) -> ReportModel:
    """
    Main report pipeline: runs the app snapshot through every analyzer and
    assembles one model. Built fresh on each request, never cached.
    """
    apps = tuple(apps)
    host = host or detect_host_platform()

    settings = store.load(SETTINGS_KEY) if store is not None else {}
    scan_results = store.load(SCAN_RESULTS_KEY) if store is not None else {}

    return ReportModel(
        generated_at=clock(),
        app_version=app_version,
        device_info=host.device_info(),
        stats=_run(StatisticsAggregator(), apps),
        risk_categories=_run(RiskCategorizer(), apps),
        top_risky_apps=_run(TopRiskRanker(top_risk_limit), apps),
        permission_analysis=_run(PermissionsAnalyzer(), apps),
        data_usage_summary=_run(DataUsageSummarizer(), apps),
        apps=apps,
        settings=settings,
        scan_results=scan_results,
    )
