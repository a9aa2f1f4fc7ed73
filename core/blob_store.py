from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_KEY = "appSettings"
SCAN_RESULTS_KEY = "scanResults"


def _decode_blob(key: str, raw: Optional[str]) -> Dict[str, Any]:
    if raw is None or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Stored blob %r is not valid JSON, using empty object: %s", key, e)
        return {}
    if not isinstance(value, dict):
        logger.warning("Stored blob %r is %s, not an object; using empty object", key, type(value).__name__)
        return {}
    return value


class BlobStore(ABC):
    """
    Key -> opaque JSON object storage (settings, scan history).
    The content is passed through to the report untouched.
    """

    @abstractmethod
    def read_raw(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def load(self, key: str) -> Dict[str, Any]:
        try:
            raw = self.read_raw(key)
        except Exception as e:
            logger.warning("Could not read stored blob %r: %s", key, e)
            return {}
        return _decode_blob(key, raw)


class JsonBlobStore(BlobStore):
    def __init__(self, directory: str) -> None:
        self.directory = directory

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def read_raw(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not os.path.isfile(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def save(self, key: str, value: Dict[str, Any]) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path_for(key), "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2)


class MemoryBlobStore(BlobStore):
    def __init__(self, blobs: Optional[Dict[str, str]] = None) -> None:
        self.blobs: Dict[str, str] = dict(blobs or {})

    def read_raw(self, key: str) -> Optional[str]:
        return self.blobs.get(key)
