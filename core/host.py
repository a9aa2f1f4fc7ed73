from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from core.models import DeviceInfo

logger = logging.getLogger(__name__)

ANDROID = "android"
# From this API level on, writing to shared storage needs no runtime grant.
ANDROID_SCOPED_STORAGE_API = 33


@dataclass(frozen=True)
class HostPlatform:
    name: str
    os_version: str
    downloads_dir: str
    documents_dir: str
    api_level: Optional[int] = None

    @property
    def is_android(self) -> bool:
        return self.name == ANDROID

    def default_output_dir(self) -> str:
        return self.downloads_dir if self.is_android else self.documents_dir

    def is_in_downloads(self, path: str) -> bool:
        downloads = os.path.abspath(self.downloads_dir)
        target = os.path.abspath(path)
        try:
            return os.path.commonpath([downloads, target]) == downloads
        except ValueError:
            # different drives
            return False

    def device_info(self) -> DeviceInfo:
        return DeviceInfo(platform=self.name, os_version=self.os_version)


def detect_host_platform() -> HostPlatform:
    home = os.path.expanduser("~")
    get_api_level = getattr(sys, "getandroidapilevel", None)
    if callable(get_api_level):
        api_level = get_api_level()
        storage = os.getenv("EXTERNAL_STORAGE", "/storage/emulated/0")
        return HostPlatform(
            name=ANDROID,
            os_version=str(api_level),
            downloads_dir=os.path.join(storage, "Download"),
            documents_dir=os.path.join(storage, "Documents"),
            api_level=api_level,
        )

    return HostPlatform(
        name=(platform.system() or sys.platform).lower(),
        os_version=platform.release(),
        downloads_dir=os.path.join(home, "Downloads"),
        documents_dir=os.path.join(home, "Documents"),
    )


def request_storage_permission(
    host: HostPlatform,
    directory: str,
    prompt: Optional[Callable[[], bool]] = None,
) -> bool:
    """
    Granted / denied, no retries. Older Android releases ask the user through
    `prompt`; every platform additionally needs a writable target directory.
    """
    if host.is_android and (host.api_level or 0) < ANDROID_SCOPED_STORAGE_API:
        if prompt is None:
            return False
        try:
            if not prompt():
                return False
        except Exception as e:
            logger.warning("Storage permission request failed: %s", e)
            return False

    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        logger.warning("Cannot create output directory %s: %s", directory, e)
        return False
    return os.access(directory, os.W_OK)
