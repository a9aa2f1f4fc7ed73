from __future__ import annotations

import base64
import logging
import os
import shutil
import tempfile
from datetime import datetime
from typing import Callable, Optional, Sequence

from analysis_modules.recommendations import build_recommendations
from analysis_modules.report_analysis import build_report_model
from core.blob_store import BlobStore
from core.config import Config
from core.errors import ReportExportError, StoragePermissionError
from core.host import HostPlatform, detect_host_platform, request_storage_permission
from core.models import AppRecord, GeneratedReport
from reports.pdf_report import render_pdf_report

logger = logging.getLogger(__name__)


def report_file_name(generated_at: datetime, label: str = Config.FILE_LABEL) -> str:
    return f"{label}_Report_{generated_at.date().isoformat()}.pdf"


def _default_file_mode() -> int:
    # os.umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomic(path: str, content: bytes) -> None:
    """Either the complete file appears at `path` or nothing does."""
    directory = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(prefix=".report-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        # mkstemp creates the file owner-only
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class ReportService:
    def __init__(
        self,
        store: Optional[BlobStore] = None,
        host: Optional[HostPlatform] = None,
        output_dir: Optional[str] = None,
        permission_prompt: Optional[Callable[[], bool]] = None,
        clock: Callable[[], datetime] = datetime.now,
        app_version: str = Config.APP_VERSION,
        top_risk_limit: int = Config.TOP_RISK_LIMIT,
    ) -> None:
        self.store = store
        self.host = host or detect_host_platform()
        self.output_dir = output_dir or Config.OUTPUT_DIR or self.host.default_output_dir()
        self.permission_prompt = permission_prompt
        self.clock = clock
        self.app_version = app_version
        self.top_risk_limit = top_risk_limit

    def generate(self, apps: Sequence[AppRecord], include_base64: bool = False) -> GeneratedReport:
        if not request_storage_permission(self.host, self.output_dir, self.permission_prompt):
            raise StoragePermissionError()

        try:
            model = build_report_model(
                apps,
                store=self.store,
                host=self.host,
                clock=self.clock,
                app_version=self.app_version,
                top_risk_limit=self.top_risk_limit,
            )
            rendered = render_pdf_report(model, build_recommendations(model))

            file_path = os.path.join(self.output_dir, report_file_name(model.generated_at))
            _write_atomic(file_path, rendered.content)

            if self.host.is_android and not self.host.is_in_downloads(file_path):
                file_path = self._copy_to_downloads(file_path)
        except Exception as e:
            raise ReportExportError(e) from e

        logger.info("Report written to %s (%d pages)", file_path, rendered.page_count)
        return GeneratedReport(
            file_path=file_path,
            number_of_pages=rendered.page_count,
            base64=base64.b64encode(rendered.content).decode("ascii") if include_base64 else "",
        )

    def _copy_to_downloads(self, file_path: str) -> str:
        os.makedirs(self.host.downloads_dir, exist_ok=True)
        target = os.path.join(self.host.downloads_dir, os.path.basename(file_path))
        shutil.copyfile(file_path, target)
        logger.info("Copied report into downloads: %s", target)
        return target
