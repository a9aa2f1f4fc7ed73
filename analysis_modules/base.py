# analysis_modules/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

from core.models import AppRecord

ResultT = TypeVar("ResultT")


class BaseReportAnalyzer(ABC, Generic[ResultT]):
    name: str = "BaseReportAnalyzer"

    @abstractmethod
    def analyze(self, apps: Sequence[AppRecord]) -> ResultT:
        """
        Reads the snapshot and returns a fresh result; never modifies `apps`.
        """
        raise NotImplementedError
