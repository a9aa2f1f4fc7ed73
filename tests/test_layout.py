import unittest
from datetime import datetime

from analysis_modules.report_analysis import build_report_model
from core.host import HostPlatform
from core.models import AppRecord
from reports.layout import (
    CELL_TEXT_LIMIT,
    BarChart,
    BulletList,
    Callout,
    KeyValueGrid,
    SectionKind,
    TableBlock,
    build_document,
    clip_text,
    escape_markup,
)

FIXED_NOW = datetime(2026, 3, 14, 9, 30, 0)
HOST = HostPlatform(name="android", os_version="34", downloads_dir="/sdcard/Download",
                    documents_dir="/sdcard/Documents", api_level=34)


def _app(i, level="LOW_RISK", score=10, permissions=("INTERNET",), **extra):
    data = {
        "name": f"App {i}",
        "packageName": f"com.example.app{i}",
        "permissions": list(permissions),
        "riskAnalysis": {"riskLevel": level, "riskScore": score},
    }
    data.update(extra)
    return AppRecord.from_dict(data)


def _sections(apps):
    model = build_report_model(apps, host=HOST, clock=lambda: FIXED_NOW)
    return model, build_document(model)


def _of_kind(sections, kind):
    return [s for s in sections if s.kind is kind]


def _first(section, block_type):
    return next(b for b in section.blocks if isinstance(b, block_type))


class SectionOrderTests(unittest.TestCase):
    def test_order(self):
        _, sections = _sections([_app(1), _app(2, permissions=())])
        self.assertEqual(
            [s.kind for s in sections],
            [
                SectionKind.COVER,
                SectionKind.RISK_OVERVIEW,
                SectionKind.TOP_PRIORITY,
                SectionKind.DATA_USAGE,
                SectionKind.INVENTORY,
                SectionKind.APP_DETAIL,
                SectionKind.RECOMMENDATIONS,
            ],
        )

    def test_top_priority_omitted_without_assessed_apps(self):
        apps = [AppRecord.from_dict({"name": "Plain", "packageName": "com.plain"})]
        _, sections = _sections(apps)
        self.assertEqual(_of_kind(sections, SectionKind.TOP_PRIORITY), [])

    def test_top_priority_shows_five(self):
        apps = [_app(i, "HIGH_RISK", 100 - i) for i in range(8)]
        model, sections = _sections(apps)
        self.assertEqual(len(model.top_risky_apps), 8)
        top = _of_kind(sections, SectionKind.TOP_PRIORITY)[0]
        headings = [b.text for b in top.blocks if type(b).__name__ == "SubHeading"]
        self.assertEqual(len(headings), 5)
        self.assertTrue(headings[0].startswith("1. App 0"))


class InventoryTests(unittest.TestCase):
    def test_45_apps_render_30_rows_and_trailer(self):
        _, sections = _sections([_app(i) for i in range(45)])
        table = _first(_of_kind(sections, SectionKind.INVENTORY)[0], TableBlock)
        self.assertEqual(len(table.rows), 30)
        self.assertIn("and 15 more", table.trailer)
        self.assertIn("App 0", table.rows[0][1])
        self.assertIn("App 29", table.rows[29][1])

    def test_no_trailer_at_limit(self):
        _, sections = _sections([_app(i) for i in range(30)])
        table = _first(_of_kind(sections, SectionKind.INVENTORY)[0], TableBlock)
        self.assertEqual(len(table.rows), 30)
        self.assertIsNone(table.trailer)

    def test_row_uses_deduplicated_permissions(self):
        _, sections = _sections([_app(1, permissions=("CAMERA", "CAMERA", "SMS"))])
        table = _first(_of_kind(sections, SectionKind.INVENTORY)[0], TableBlock)
        self.assertEqual(table.rows[0][4], "<b>2</b>")
        self.assertEqual(table.rows[0][3], "LOW")


class DetailSectionTests(unittest.TestCase):
    def test_one_section_per_app_with_permissions(self):
        _, sections = _sections([_app(i) for i in range(10)])
        self.assertEqual(len(_of_kind(sections, SectionKind.APP_DETAIL)), 10)

    def test_never_more_than_ten(self):
        apps = [_app(i, permissions=() if i % 3 == 0 else ("CAMERA",)) for i in range(25)]
        _, sections = _sections(apps)
        details = _of_kind(sections, SectionKind.APP_DETAIL)
        self.assertEqual(len(details), 10)
        self.assertNotIn("App 0", " ".join(s.title for s in details))
        self.assertIn("App 1", details[0].title)

    def test_permission_rows_use_catalog(self):
        _, sections = _sections([_app(1, permissions=("CAMERA", "CAMERA", "MYSTERY"))])
        table = _first(_of_kind(sections, SectionKind.APP_DETAIL)[0], TableBlock)
        self.assertEqual(len(table.rows), 2)
        self.assertEqual(table.rows[0][2], "HIGH")
        self.assertEqual(table.rows[1][2], "LOW")
        self.assertEqual(table.rows[1][3], "System permission with low risk")

    def test_data_usage_grid_carries_usage_rank(self):
        apps = [
            _app(1, permissions=()),
            _app(2, dataUsage={"total": 100}),
            _app(3, dataUsage={"total": 4096, "wifi": 1024, "mobile": 3072}),
        ]
        _, sections = _sections(apps)
        details = _of_kind(sections, SectionKind.APP_DETAIL)
        grid = [b for b in details[1].blocks if isinstance(b, KeyValueGrid)][-1]
        self.assertEqual(
            grid.items,
            (("Total Usage", "4 KB"), ("WiFi", "1 KB"), ("Mobile Data", "3 KB"), ("Usage Rank", "#2")),
        )

    def test_no_usage_grid_without_data(self):
        _, sections = _sections([_app(1)])
        detail = _of_kind(sections, SectionKind.APP_DETAIL)[0]
        self.assertEqual(len([b for b in detail.blocks if isinstance(b, KeyValueGrid)]), 1)


class RiskOverviewTests(unittest.TestCase):
    def test_bars_are_proportional(self):
        apps = [_app(1, "HIGH_RISK", 90), _app(2, "LOW_RISK"), _app(3, "LOW_RISK"), _app(4, "NO_RISK")]
        _, sections = _sections(apps)
        chart = _first(_of_kind(sections, SectionKind.RISK_OVERVIEW)[0], BarChart)
        self.assertEqual([b.fraction for b in chart.bars], [0.25, 0.0, 0.5, 0.25])
        self.assertEqual([b.value for b in chart.bars], [1, 0, 2, 1])

    def test_empty_snapshot_has_zero_bars(self):
        _, sections = _sections([])
        chart = _first(_of_kind(sections, SectionKind.RISK_OVERVIEW)[0], BarChart)
        self.assertTrue(all(b.fraction == 0 for b in chart.bars))

    def test_prevalence_table_percentages(self):
        apps = [_app(1, permissions=("CAMERA",)), _app(2, permissions=("CAMERA", "SMS")), _app(3, permissions=())]
        _, sections = _sections(apps)
        table = _first(_of_kind(sections, SectionKind.RISK_OVERVIEW)[0], TableBlock)
        self.assertEqual(table.rows[0], ("<b>CAMERA</b>", "2", "67%"))
        self.assertEqual(table.rows[1], ("<b>SMS</b>", "1", "33%"))


class RecommendationSectionTests(unittest.TestCase):
    def test_callouts_and_best_practices(self):
        _, sections = _sections([_app(1, "HIGH_RISK", 90)])
        rec = _of_kind(sections, SectionKind.RECOMMENDATIONS)[0]
        callouts = [b for b in rec.blocks if isinstance(b, Callout)]
        self.assertEqual(len(callouts), 1)
        self.assertEqual(len(_first(rec, BulletList).items), 5)
        texts = " ".join(getattr(b, "text", "") for b in rec.blocks)
        self.assertIn("Fair", texts)
        self.assertIn("ANDROID", texts)

    def test_cover_callout_only_with_high_risk(self):
        _, clean = _sections([_app(1)])
        self.assertFalse(any(isinstance(b, Callout) for b in clean[0].blocks))
        _, risky = _sections([_app(1, "HIGH_RISK", 90)])
        self.assertTrue(any(isinstance(b, Callout) for b in risky[0].blocks))


class EscapingTests(unittest.TestCase):
    def test_escape_markup(self):
        self.assertEqual(escape_markup("""<a href="x">Tom & Jerry's</a>"""),
                         "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#039;s&lt;/a&gt;")
        self.assertEqual(escape_markup(None), "")

    def test_app_name_is_escaped_everywhere(self):
        app = AppRecord.from_dict({
            "name": "<script>alert(1)</script>",
            "packageName": "com.evil\"pkg",
            "category": "<b>Games</b>",
            "permissions": ["CAMERA"],
            "riskAnalysis": {"riskLevel": "HIGH_RISK", "riskScore": 99},
            "dataUsage": {"total": 2048, "wifi": 2048},
        })
        _, sections = _sections([app])

        dump = repr(sections)
        self.assertNotIn("<script>", dump)
        self.assertNotIn("com.evil\"pkg", dump)
        self.assertIn("&lt;script&gt;alert(1)&lt;/script&gt;", dump)
        self.assertIn("com.evil&quot;pkg", dump)
        self.assertIn("&lt;b&gt;Games&lt;/b&gt;", dump)

        inventory = _first(_of_kind(sections, SectionKind.INVENTORY)[0], TableBlock)
        self.assertIn("&lt;script&gt;", inventory.rows[0][1])
        detail = _of_kind(sections, SectionKind.APP_DETAIL)[0]
        self.assertIn("&lt;script&gt;", detail.title)

    def test_long_user_text_is_clipped(self):
        self.assertEqual(clip_text("abcdef", limit=5), "ab...")
        self.assertEqual(clip_text("&&&", limit=5), "&amp;&amp;&amp;")

        app = AppRecord.from_dict({
            "name": "X" * 15000,
            "packageName": "com." + "y" * 5000,
            "permissions": ["P" * 5000],
        })
        _, sections = _sections([app])
        inventory = _first(_of_kind(sections, SectionKind.INVENTORY)[0], TableBlock)
        cell = inventory.rows[0][1]
        self.assertIn("X" * (CELL_TEXT_LIMIT - 3) + "...", cell)
        self.assertNotIn("X" * CELL_TEXT_LIMIT, cell)
        self.assertLess(len(cell), 3 * CELL_TEXT_LIMIT)
        detail = _of_kind(sections, SectionKind.APP_DETAIL)[0]
        self.assertLess(len(detail.title), 2 * CELL_TEXT_LIMIT)


if __name__ == "__main__":
    unittest.main()
