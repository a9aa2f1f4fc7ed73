from __future__ import annotations

from typing import Sequence

from core.formatting import format_bytes
from core.models import AppRecord, DataConsumer, DataUsageSummary
from .base import BaseReportAnalyzer

TOP_CONSUMERS_LIMIT = 10


class DataUsageSummarizer(BaseReportAnalyzer[DataUsageSummary]):
    name = "DataUsageSummarizer"

    def analyze(self, apps: Sequence[AppRecord]) -> DataUsageSummary:
        consumers = [
            DataConsumer(
                name=app.display_name,
                package_name=app.package_name,
                total=app.data_usage.total,
                wifi=app.data_usage.wifi,
                mobile=app.data_usage.mobile,
            )
            for app in apps
            if app.data_usage is not None and app.data_usage.total > 0
        ]
        consumers.sort(key=lambda c: c.total, reverse=True)

        # totals cover every app, not only the listed consumers
        total_wifi = 0
        total_mobile = 0
        for app in apps:
            if app.data_usage is not None:
                total_wifi += app.data_usage.wifi
                total_mobile += app.data_usage.mobile

        return DataUsageSummary(
            total_wifi=format_bytes(total_wifi),
            total_mobile=format_bytes(total_mobile),
            total_combined=format_bytes(total_wifi + total_mobile),
            top_data_consumers=tuple(consumers[:TOP_CONSUMERS_LIMIT]),
        )
