import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest import mock

from analysis_modules.recommendations import (
    BEST_PRACTICES,
    AdviceSeverity,
    OverallStatus,
    build_recommendations,
    overall_status,
)
from analysis_modules.report_analysis import build_report_model
from core.blob_store import SCAN_RESULTS_KEY, SETTINGS_KEY, JsonBlobStore, MemoryBlobStore
from core.host import HostPlatform
from core.models import AppRecord

FIXED_NOW = datetime(2026, 3, 14, 9, 30, 0)


def _host():
    return HostPlatform(
        name="linux",
        os_version="6.1",
        downloads_dir="/tmp/downloads",
        documents_dir="/tmp/documents",
    )


def _app(name, level=None, score=0, permissions=(), factors=()):
    data = {"name": name, "packageName": f"com.example.{name.lower()}", "permissions": list(permissions)}
    if level:
        data["riskAnalysis"] = {
            "riskLevel": level,
            "riskScore": score,
            "riskFactors": [{"permission": p, "level": lv} for p, lv in factors],
        }
    return AppRecord.from_dict(data)


def _scenario():
    return [
        _app("A", "HIGH_RISK", 90, ["CAMERA", "CAMERA", "LOCATION"]),
        _app("B", "MEDIUM_RISK", 40, ["STORAGE"]),
        _app("C"),
    ]


class BlobStoreTests(unittest.TestCase):
    def test_missing_and_malformed_blobs_become_empty(self):
        store = MemoryBlobStore({SETTINGS_KEY: "{not json", SCAN_RESULTS_KEY: "[1, 2]"})
        with self.assertLogs("core.blob_store", level="WARNING"):
            self.assertEqual(store.load(SETTINGS_KEY), {})
        with self.assertLogs("core.blob_store", level="WARNING"):
            self.assertEqual(store.load(SCAN_RESULTS_KEY), {})
        self.assertEqual(store.load("absent"), {})

    def test_deeply_nested_blob_does_not_abort_model(self):
        store = MemoryBlobStore({SETTINGS_KEY: "[" * 200000, SCAN_RESULTS_KEY: json.dumps({"lastScan": 1})})
        with self.assertLogs("core.blob_store", level="WARNING"):
            model = build_report_model([], store=store, host=_host(), clock=lambda: FIXED_NOW)
        self.assertEqual(model.settings, {})
        self.assertEqual(model.scan_results, {"lastScan": 1})

    def test_failing_backend_reads_as_empty(self):
        class BrokenStore(MemoryBlobStore):
            def read_raw(self, key):
                raise RuntimeError("backend offline")

        with self.assertLogs("core.blob_store", level="WARNING"):
            self.assertEqual(BrokenStore().load(SETTINGS_KEY), {})

    def test_json_store_round_trip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonBlobStore(tmpdir)
            store.save(SETTINGS_KEY, {"theme": "dark", "notifications": True})
            self.assertEqual(store.load(SETTINGS_KEY), {"theme": "dark", "notifications": True})
            self.assertEqual(store.load(SCAN_RESULTS_KEY), {})

            Path(tmpdir, f"{SCAN_RESULTS_KEY}.json").write_bytes(b"\xff\xfe garbage")
            self.assertEqual(store.load(SCAN_RESULTS_KEY), {})


class ReportModelTests(unittest.TestCase):
    def test_scenario_model(self):
        store = MemoryBlobStore({SETTINGS_KEY: json.dumps({"autoScan": True})})
        model = build_report_model(
            _scenario(), store=store, host=_host(), clock=lambda: FIXED_NOW, app_version="2.0.1"
        )

        self.assertEqual(model.generated_at, FIXED_NOW)
        self.assertEqual(model.app_version, "2.0.1")
        self.assertEqual(model.device_info.platform, "linux")
        self.assertEqual(model.settings, {"autoScan": True})
        self.assertEqual(model.scan_results, {})

        self.assertEqual(model.stats.total_apps, 3)
        self.assertEqual(model.stats.risk_percentage, 33)
        self.assertEqual(model.stats.average_permissions, 1)
        self.assertEqual([a.name for a in model.top_risky_apps], ["A", "B"])
        self.assertEqual(model.risk_categories.total(), model.stats.total_apps)
        self.assertEqual([a.name for a in model.apps], ["A", "B", "C"])

    def test_without_store(self):
        model = build_report_model([], host=_host(), clock=lambda: FIXED_NOW)
        self.assertEqual(model.settings, {})
        self.assertEqual(model.stats.total_apps, 0)
        self.assertEqual(model.top_risky_apps, ())

    def test_top_risk_limit(self):
        apps = [_app(f"A{i}", "LOW_RISK", i) for i in range(8)]
        model = build_report_model(apps, host=_host(), clock=lambda: FIXED_NOW, top_risk_limit=3)
        self.assertEqual([a.name for a in model.top_risky_apps], ["A7", "A6", "A5"])

    def test_analyzer_failure_is_logged_by_name_and_raised(self):
        with mock.patch(
            "analysis_modules.report_analysis.RiskCategorizer.analyze",
            side_effect=RuntimeError("bad snapshot"),
        ):
            with self.assertLogs("analysis_modules.report_analysis", level="ERROR") as logs:
                with self.assertRaises(RuntimeError):
                    build_report_model(_scenario(), host=_host(), clock=lambda: FIXED_NOW)
        self.assertIn("RiskCategorizer", logs.output[0])
        self.assertIn("bad snapshot", logs.output[0])

    def test_every_analyzer_runs_by_name(self):
        with self.assertLogs("analysis_modules.report_analysis", level="DEBUG") as logs:
            build_report_model(_scenario(), host=_host(), clock=lambda: FIXED_NOW)
        text = "\n".join(logs.output)
        for name in ("StatisticsAggregator", "RiskCategorizer", "TopRiskRanker",
                     "PermissionsAnalyzer", "DataUsageSummarizer"):
            self.assertIn(name, text)


class RecommendationTests(unittest.TestCase):
    def _model(self, apps):
        return build_report_model(apps, host=_host(), clock=lambda: FIXED_NOW)

    def test_no_rules_fire_for_clean_device(self):
        advice = build_recommendations(self._model([_app("Calm", permissions=["INTERNET"])]))
        self.assertEqual(advice.recommendations, ())
        self.assertEqual(advice.status, OverallStatus.GOOD)
        self.assertEqual(advice.next_steps, "Continue monitoring regularly")

    def test_all_rules_fire_in_order(self):
        many = [f"PERM_{i}" for i in range(12)]
        factors = [(f"SENSITIVE_{i}", "HIGH") for i in range(6)]
        apps = [_app(f"Risky{i}", "HIGH_RISK", 90, many, factors) for i in range(3)]
        advice = build_recommendations(self._model(apps))

        self.assertEqual(
            [r.severity for r in advice.recommendations],
            [AdviceSeverity.CRITICAL, AdviceSeverity.WARNING, AdviceSeverity.CAUTION],
        )
        self.assertIn("3 high-risk apps", advice.recommendations[0].message)
        self.assertIn("average of 12 permissions", advice.recommendations[1].message)
        self.assertIn("6 distinct sensitive permissions", advice.recommendations[2].message)
        self.assertEqual(advice.status, OverallStatus.NEEDS_ATTENTION)
        self.assertEqual(advice.next_steps, "Review high-risk apps immediately")

    def test_thresholds_are_strict(self):
        ten = [f"PERM_{i}" for i in range(10)]
        five = [(f"SENSITIVE_{i}", "HIGH") for i in range(5)]
        advice = build_recommendations(self._model([_app("Edge", "LOW_RISK", 5, ten, five)]))
        self.assertEqual(advice.recommendations, ())

    def test_single_high_risk_app_message(self):
        advice = build_recommendations(self._model([_app("Solo", "HIGH_RISK", 70)]))
        self.assertIn("1 high-risk app installed", advice.recommendations[0].message)
        self.assertEqual(advice.status, OverallStatus.FAIR)

    def test_status_boundaries(self):
        self.assertEqual(overall_status(0), OverallStatus.GOOD)
        self.assertEqual(overall_status(1), OverallStatus.FAIR)
        self.assertEqual(overall_status(2), OverallStatus.FAIR)
        self.assertEqual(overall_status(3), OverallStatus.NEEDS_ATTENTION)
        self.assertEqual(OverallStatus.NEEDS_ATTENTION.value, "Needs Attention")

    def test_best_practices_fixed(self):
        self.assertEqual(len(BEST_PRACTICES), 5)


if __name__ == "__main__":
    unittest.main()
