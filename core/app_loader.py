import json
from collections.abc import Mapping
from typing import Tuple

from core.errors import AppRecordError
from core.models import AppRecord


def load_app_records(path: str) -> Tuple[AppRecord, ...]:
    """
    Reads an inventory snapshot: a JSON list of app records, or an object
    holding that list under "apps".
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise AppRecordError(f"Cannot read app records from {path}: {e}") from e

    if isinstance(data, Mapping):
        data = data.get("apps", [])
    if not isinstance(data, list):
        raise AppRecordError(f"Expected a list of app records in {path}")

    records = []
    for index, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise AppRecordError(f"App record #{index} in {path} is not an object")
        records.append(AppRecord.from_dict(item))
    return tuple(records)
