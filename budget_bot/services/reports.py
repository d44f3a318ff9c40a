"""Chart and spreadsheet artifacts attached to report replies."""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from openpyxl import Workbook  # noqa: E402
from openpyxl.styles import Font  # noqa: E402

from budget_bot.schemas.transactions import TransactionRecord  # noqa: E402

CHART_MIME_TYPE = "image/png"
WORKBOOK_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def render_category_chart(totals: dict[str, float], title: str) -> bytes:
    """Render a pie chart of spending per category as PNG bytes."""
    labels = [name for name, amount in totals.items() if amount > 0]
    values = [totals[name] for name in labels]

    fig, ax = plt.subplots(figsize=(6, 6))
    try:
        if values:
            ax.pie(values, labels=labels, autopct="%1.0f%%", startangle=90)
            ax.axis("equal")
        else:
            ax.text(0.5, 0.5, "Belum ada data", ha="center", va="center")
            ax.axis("off")
        ax.set_title(title)
        buffer = BytesIO()
        fig.savefig(buffer, format="png", dpi=120, bbox_inches="tight")
    finally:
        plt.close(fig)
    return buffer.getvalue()


def build_transactions_workbook(transactions: Sequence[TransactionRecord], title: str) -> bytes:
    """Export transactions plus a per-category summary sheet as XLSX bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Transaksi"

    ws["A1"] = title
    ws["A1"].font = Font(bold=True, size=14)
    ws.append([])
    header = ["Tanggal", "Nama", "Kategori", "Nominal"]
    ws.append(header)
    for cell in ws[3]:
        cell.font = Font(bold=True)

    totals: dict[str, float] = {}
    for tx in transactions:
        ws.append([tx.tx_date.isoformat(), tx.item_name, tx.category, round(tx.amount, 2)])
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount

    ws.append([])
    ws.append(["", "", "Total", round(sum(totals.values()), 2)])
    ws.cell(row=ws.max_row, column=3).font = Font(bold=True)

    ws.column_dimensions["A"].width = 12
    ws.column_dimensions["B"].width = 30
    ws.column_dimensions["C"].width = 20
    ws.column_dimensions["D"].width = 15

    summary = wb.create_sheet("Ringkasan")
    summary.append(["Kategori", "Total"])
    for cell in summary[1]:
        cell.font = Font(bold=True)
    for category, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True):
        summary.append([category, round(amount, 2)])
    summary.column_dimensions["A"].width = 20
    summary.column_dimensions["B"].width = 15

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
