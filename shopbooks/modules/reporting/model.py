# shopbooks/modules/reporting/model.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...utils.helpers import fmt_money

# column layout: (header, row key, kind) where kind is "text", "money" or "qty"
Column = Tuple[str, str, str]


class _RowsTableModel(QAbstractTableModel):
    """
    Read-only table over a list of dicts. Subclasses only declare COLUMNS.
    Money and quantity columns are right-aligned.
    """

    COLUMNS: Sequence[Column] = ()

    def __init__(self, rows: Optional[List[dict]] = None, parent=None) -> None:
        super().__init__(parent)
        self._rows: List[dict] = rows or []

    def set_rows(self, rows: List[dict]) -> None:
        self.beginResetModel()
        self._rows = rows or []
        self.endResetModel()

    def row_at(self, r: int) -> dict:
        return self._rows[r]

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.COLUMNS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):  # type: ignore[override]
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.COLUMNS[section][0]
        return str(section + 1)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        _, key, kind = self.COLUMNS[index.column()]
        row = self._rows[index.row()]

        if role == Qt.DisplayRole:
            value = row.get(key)
            if kind == "money":
                return fmt_money(value or 0.0)
            if kind == "qty":
                return f"{float(value or 0.0):g}"
            return "" if value is None else str(value)
        if role == Qt.TextAlignmentRole:
            if kind == "text":
                return Qt.AlignLeft | Qt.AlignVCenter
            return Qt.AlignRight | Qt.AlignVCenter
        return None


# ------------------------------ A) Aging ------------------------------------

class AgingTableModel(_RowsTableModel):
    COLUMNS = (
        ("Name", "name", "text"),
        ("Current", "current", "money"),
        ("1-30", "days_1_30", "money"),
        ("31-60", "days_31_60", "money"),
        ("61-90", "days_61_90", "money"),
        ("90+", "days_90_plus", "money"),
        ("Total Due", "total_due", "money"),
    )


# ------------------------------ B) Ledger / Statement -----------------------

class LedgerTableModel(_RowsTableModel):
    COLUMNS = (
        ("Date", "date", "text"),
        ("Reference", "reference_number", "text"),
        ("Description", "description", "text"),
        ("Debit", "debit", "money"),
        ("Credit", "credit", "money"),
        ("Balance", "balance", "money"),
    )


# ------------------------------ C) Stock Summary ----------------------------

class StockSummaryTableModel(_RowsTableModel):
    COLUMNS = (
        ("Item", "name", "text"),
        ("SKU", "sku", "text"),
        ("Qty", "stock_quantity", "qty"),
        ("Purchase Price", "purchase_price", "money"),
        ("Stock Value", "stock_value", "money"),
        ("Status", "status", "text"),
    )


# ------------------------------ D) Day Book ---------------------------------

class DayBookTableModel(_RowsTableModel):
    COLUMNS = (
        ("Type", "type", "text"),
        ("Reference", "reference_number", "text"),
        ("Party", "party_name", "text"),
        ("Description", "description", "text"),
        ("In", "amount_in", "money"),
        ("Out", "amount_out", "money"),
    )


# ------------------------------ E) Statement lines --------------------------

class FinancialStatementTableModel(_RowsTableModel):
    """Two-column label/amount view used for P&L and cash flow."""

    COLUMNS = (
        ("Line", "label", "text"),
        ("Amount", "amount", "money"),
    )


def profit_loss_lines(report) -> List[dict]:
    """Flatten a ProfitLossReport into label/amount lines."""
    lines = [
        {"label": "Revenue", "amount": report.revenue},
        {"label": "Cost of Goods Sold", "amount": report.cost_of_goods_sold},
        {"label": "Gross Profit", "amount": report.gross_profit},
    ]
    for e in report.expenses:
        lines.append({"label": f"  {str(e['category']).title()}", "amount": e["amount"]})
    lines.append({"label": "Total Expenses", "amount": report.total_expenses})
    lines.append({"label": "Net Profit", "amount": report.net_profit})
    return lines


def cash_flow_lines(report) -> List[dict]:
    lines = [{"label": "Opening Balance", "amount": report.opening_balance}]
    for source, amount in report.inflows.items():
        lines.append({"label": f"  {source.replace('_', ' ').title()}", "amount": amount})
    lines.append({"label": "Total Inflow", "amount": report.total_inflow})
    for source, amount in report.outflows.items():
        lines.append({"label": f"  {source.replace('_', ' ').title()}", "amount": amount})
    lines.append({"label": "Total Outflow", "amount": report.total_outflow})
    lines.append({"label": "Net Cash Flow", "amount": report.net_cash_flow})
    lines.append({"label": "Closing Balance", "amount": report.closing_balance})
    return lines


# ------------------------------ F) Cash Movement ----------------------------

class CashMovementTableModel(_RowsTableModel):
    COLUMNS = (
        ("Mode", "label", "text"),
        ("In", "in_amount", "money"),
        ("Out", "out_amount", "money"),
        ("Net", "net", "money"),
        ("Count", "transaction_count", "qty"),
    )
