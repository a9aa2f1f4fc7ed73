# main.py
import argparse
import logging
import sys
from typing import Sequence

from analysis_modules.recommendations import build_recommendations
from analysis_modules.report_analysis import build_report_model
from core.app_loader import load_app_records
from core.blob_store import JsonBlobStore
from core.config import Config
from core.errors import AppRecordError, ReportError
from core.formatting import format_bytes
from core.models import AppRecord
from reports.report_service import ReportService

logger = logging.getLogger(__name__)


def print_top_apps(apps: Sequence[AppRecord]) -> None:
    for i, app in enumerate(apps, start=1):
        print(f"{i:>2}. [{app.risk_level.value}] {app.display_name} ({app.package_name})")
        print(f"    score: {app.risk_score}  permissions: {len(app.unique_permissions)}  "
              f"data: {format_bytes(app.total_data)}")


def cmd_summary(apps_path: str, store_dir: str) -> int:
    try:
        apps = load_app_records(apps_path)
    except AppRecordError as e:
        print(f"Cannot load apps: {e}")
        return 1

    model = build_report_model(
        apps,
        store=JsonBlobStore(store_dir),
        top_risk_limit=Config.TOP_RISK_LIMIT,
    )
    stats = model.stats
    advice = build_recommendations(model)

    print("==== Summary ====")
    print(f"Apps:           {stats.total_apps}")
    print(f"High risk:      {stats.high_risk} ({stats.risk_percentage}%)")
    print(f"Medium risk:    {stats.medium_risk}")
    print(f"Low risk:       {stats.low_risk}")
    print(f"Safe:           {stats.no_risk}")
    print(f"Avg perms/app:  {stats.average_permissions}")
    print(f"Data usage:     {stats.total_data_usage}")
    print(f"Status:         {advice.status.value} - {advice.status.description}")
    print()

    if model.top_risky_apps:
        print("==== Top risky apps ====")
        print_top_apps(model.top_risky_apps)
        print()

    print("==== Recommendations ====")
    for item in advice.recommendations:
        print(f"[{item.severity.name}] {item.title}")
        print(f"  {item.message}")
    print(f"Next steps: {advice.next_steps}")
    return 0


def cmd_report(apps_path: str, store_dir: str, output_dir: str | None, with_base64: bool) -> int:
    try:
        apps = load_app_records(apps_path)
    except AppRecordError as e:
        print(f"Cannot load apps: {e}")
        return 1

    service = ReportService(store=JsonBlobStore(store_dir), output_dir=output_dir)
    try:
        result = service.generate(apps, include_base64=with_base64)
    except ReportError as e:
        logger.error("%s", e)
        print(f"Report generation failed: {e}")
        return 2

    print(f"PDF report saved to: {result.file_path}")
    print(f"Pages: {result.number_of_pages}")
    if with_base64:
        print(result.base64)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Device security report: aggregates app risk, permissions and data usage into a PDF."
    )
    parser.add_argument(
        "--store-dir",
        default=Config.STORE_DIR,
        help="Directory holding appSettings.json / scanResults.json",
    )
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command")

    p_summary = subparsers.add_parser("summary", help="Print report statistics to the console")
    p_summary.add_argument("apps", help="Path to JSON file with app records")

    p_report = subparsers.add_parser("report", help="Generate the PDF report")
    p_report.add_argument("apps", help="Path to JSON file with app records")
    p_report.add_argument(
        "--output-dir",
        dest="output_dir",
        help="Directory for the PDF (default: downloads on Android, documents elsewhere)",
    )
    p_report.add_argument(
        "--base64",
        action="store_true",
        help="Also print the PDF as base64",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    if args.command == "summary":
        return cmd_summary(args.apps, args.store_dir)
    if args.command == "report":
        return cmd_report(args.apps, args.store_dir, args.output_dir, args.base64)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
