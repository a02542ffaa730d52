# shopbooks/modules/reporting/query.py
"""
What a report screen binds to: a query object that re-runs a report on
demand and publishes {data, is_loading, error}.

Read failures never raise into the screen. Storage errors and bad stored
values (unparseable dates or numbers) land on `result.error` as a
QueryError while the last good data stays visible.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from ...errors import QueryError

_log = logging.getLogger(__name__)


@dataclass
class ReportResult:
    data: Any = None
    is_loading: bool = False
    error: Optional[QueryError] = None


class ReportQuery(QObject):
    """
    Wraps a report callable plus its keyword parameters.

        q = ReportQuery(SalesReports(conn).summary, date_range=rng)
        q.finished.connect(on_data)
        q.refresh()
    """

    loading_changed = Signal(bool)
    finished = Signal(object)   # the new data
    failed = Signal(object)     # QueryError

    def __init__(self, fetch: Callable[..., Any], parent: Optional[QObject] = None, **params: Any) -> None:
        super().__init__(parent)
        self._fetch = fetch
        self._params: dict = dict(params)
        self._result = ReportResult()

    @property
    def result(self) -> ReportResult:
        return self._result

    @property
    def data(self) -> Any:
        return self._result.data

    @property
    def is_loading(self) -> bool:
        return self._result.is_loading

    @property
    def error(self) -> Optional[QueryError]:
        return self._result.error

    @property
    def params(self) -> dict:
        return dict(self._params)

    def set_params(self, **params: Any) -> ReportResult:
        """Merge new parameters and re-run."""
        self._params.update(params)
        return self.refresh()

    def refresh(self) -> ReportResult:
        self._set_loading(True)
        try:
            data = self._fetch(**self._params)
        except (sqlite3.Error, ValueError, TypeError) as e:
            _log.warning("report query %s failed: %s", getattr(self._fetch, "__qualname__", self._fetch), e)
            err = QueryError(f"Could not load report: {e}", details={"params": self.params})
            err.__cause__ = e
            self._result = ReportResult(data=self._result.data, is_loading=False, error=err)
            self.loading_changed.emit(False)
            self.failed.emit(err)
            return self._result
        except Exception:
            self._set_loading(False)
            raise

        self._result = ReportResult(data=data, is_loading=False, error=None)
        self.loading_changed.emit(False)
        self.finished.emit(data)
        return self._result

    def _set_loading(self, loading: bool) -> None:
        self._result = ReportResult(data=self._result.data, is_loading=loading, error=self._result.error)
        self.loading_changed.emit(loading)
