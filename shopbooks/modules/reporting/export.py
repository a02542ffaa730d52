# shopbooks/modules/reporting/export.py
"""
Row exporters. CSV goes straight to disk; HTML is what a PDF renderer
(QTextDocument + QPrinter in the desktop shell) would consume.
"""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from jinja2 import Template
from PySide6.QtCore import QAbstractItemModel, QModelIndex, Qt

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportColumn:
    key: str
    label: str
    format_fn: Optional[Callable[[Any], str]] = None

    def render(self, row: Mapping) -> str:
        value = row.get(self.key)
        if self.format_fn is not None:
            return self.format_fn(value)
        return "" if value is None else str(value)


def export_csv(rows: Iterable[Mapping], columns: Sequence[ExportColumn], filename: str | Path) -> Path:
    """Write a header row of column labels followed by one line per row. Returns the path written."""
    path = Path(filename)
    if path.suffix.lower() != ".csv":
        path = path.with_suffix(".csv")
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow([c.label for c in columns])
        for r in rows:
            w.writerow([c.render(r) for c in columns])
            count += 1
    _log.info("exported %d rows to %s", count, path)
    return path


_TABLE_TPL = Template(
    """{% if title %}<h2>{{ title }}</h2>
{% endif %}{% if not rows %}<p>No data</p>{% else %}<table border="1" cellspacing="0" cellpadding="4">
<thead><tr>{% for h in headers %}<th>{{ h }}</th>{% endfor %}</tr></thead><tbody>
{% for row in rows %}<tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
{% endfor %}</tbody></table>{% endif %}""",
    autoescape=True,
)


def rows_to_html(title: str, rows: Iterable[Mapping], columns: Sequence[ExportColumn]) -> str:
    return _TABLE_TPL.render(
        title=title,
        headers=[c.label for c in columns],
        rows=[[c.render(r) for c in columns] for r in rows],
    )


def model_to_html(model: Optional[QAbstractItemModel], title: str = "") -> str:
    """Lightweight HTML table from whatever a Qt table model currently displays."""
    if model is None:
        return _TABLE_TPL.render(title=title, headers=[], rows=[])
    cols = model.columnCount()
    headers = [model.headerData(c, Qt.Horizontal, Qt.DisplayRole) for c in range(cols)]
    rows: List[List[str]] = []
    for r in range(model.rowCount()):
        cells = []
        for c in range(cols):
            idx: QModelIndex = model.index(r, c)
            val = model.data(idx, Qt.DisplayRole)
            cells.append("" if val is None else val)
        rows.append(cells)
    return _TABLE_TPL.render(title=title, headers=headers, rows=rows)
