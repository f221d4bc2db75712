"""
Excel export of dashboard metrics.
"""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import OUTCOME_CATEGORIES, SUMMARY_ROW_LABELS


def write_header_row(ws, headers: list[str]):
    """Write bold headers into row 1."""
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def autosize_columns(ws, min_width: int = 10, max_width: int = 50):
    """Size columns to their longest value."""
    for col_idx, column in enumerate(ws.iter_cols(), start=1):
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(
            max(longest + 2, min_width), max_width
        )


def write_summary_sheet(ws, metrics: dict):
    """
    Write Sheet 1 - Summary.

    Two columns: label | value, one row per SUMMARY_ROW_LABELS entry.
    """
    summary = metrics["summary"]
    categories = metrics["outcome_categories"]

    values = [
        summary["date_range"]["start"],
        summary["date_range"]["end"],
        summary["dashboard_type"] or "all",
        summary["total_appointments"],
        summary["appointments_with_outcome"],
        categories["successful"],
        categories["nurture"],
        categories["failed"],
        summary["success_rate"],
        summary["nurture_rate"],
        summary["failed_rate"],
    ]

    write_header_row(ws, ["Metric", "Value"])
    for row_idx, (label, value) in enumerate(zip(SUMMARY_ROW_LABELS, values), start=2):
        ws.cell(row=row_idx, column=1, value=label)
        ws.cell(row=row_idx, column=2, value=value)


def write_breakdown_sheet(ws, breakdown: dict, label_header: str):
    """
    Write a label | Count | % sheet from a {counts, percentages} breakdown.

    Rows are sorted by count descending.
    """
    write_header_row(ws, [label_header, "Count", "% of Total"])

    rows = sorted(breakdown["counts"].items(), key=lambda item: item[1], reverse=True)
    for row_idx, (label, count) in enumerate(rows, start=2):
        ws.cell(row=row_idx, column=1, value=label)
        ws.cell(row=row_idx, column=2, value=count)
        ws.cell(row=row_idx, column=3, value=breakdown["percentages"][label])


def write_type_outcome_sheet(ws, by_type_outcome: dict):
    """
    Write Sheet 4 - Type x Outcome.

    One row per (type, outcome) pair, followed by the type's category totals.
    """
    headers = ["Appointment Type", "Outcome", "Count", "% of Type", "Category"]
    write_header_row(ws, headers)

    row_idx = 2
    sorted_types = sorted(by_type_outcome.items(), key=lambda item: item[1]["total"], reverse=True)
    for type_name, data in sorted_types:
        outcomes = sorted(data["counts"].items(), key=lambda item: item[1], reverse=True)
        for outcome, count in outcomes:
            ws.cell(row=row_idx, column=1, value=type_name)
            ws.cell(row=row_idx, column=2, value=outcome)
            ws.cell(row=row_idx, column=3, value=count)
            ws.cell(row=row_idx, column=4, value=data["percentages"][outcome])
            row_idx += 1

        for category in OUTCOME_CATEGORIES:
            ws.cell(row=row_idx, column=1, value=type_name)
            ws.cell(row=row_idx, column=3, value=data["outcome_categories"][category])
            cell = ws.cell(row=row_idx, column=5, value=category.title())
            cell.font = Font(italic=True)
            row_idx += 1


def write_agent_sheet(ws, by_agent: dict):
    """
    Write Sheet 5 - By Agent.

    Structure:
    Agent | Total | % of Total | Successful | Nurture | Failed | Success Rate
    """
    headers = ["Agent", "Total", "% of Total"] + [c.title() for c in OUTCOME_CATEGORIES] + [
        "Success Rate (%)"
    ]
    write_header_row(ws, headers)

    agents = sorted(by_agent.items(), key=lambda item: item[1]["total"], reverse=True)
    for row_idx, (agent_name, data) in enumerate(agents, start=2):
        row_data = [agent_name, data["total"], data["percentage"]]
        row_data += [data["outcome_categories"][c] for c in OUTCOME_CATEGORIES]
        row_data.append(data["success_rate"])

        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def create_metrics_excel_report(metrics: dict, output_path: Path):
    """
    Create Excel metrics report with five sheets.

    Sheet 1: "Summary" - Totals, category counts and rates
    Sheet 2: "By Type" - Appointment counts per type
    Sheet 3: "By Outcome" - Appointment counts per outcome
    Sheet 4: "Type x Outcome" - Outcome counts within each type
    Sheet 5: "By Agent" - Per-agent totals and categories
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Summary"
    write_summary_sheet(ws_summary, metrics)

    ws_type = wb.create_sheet(title="By Type")
    write_breakdown_sheet(ws_type, metrics["by_type"], "Appointment Type")

    ws_outcome = wb.create_sheet(title="By Outcome")
    write_breakdown_sheet(ws_outcome, metrics["by_outcome"], "Outcome")

    ws_type_outcome = wb.create_sheet(title="Type x Outcome")
    write_type_outcome_sheet(ws_type_outcome, metrics["by_type_outcome"])

    ws_agent = wb.create_sheet(title="By Agent")
    write_agent_sheet(ws_agent, metrics["by_agent"])

    for ws in wb.worksheets:
        autosize_columns(ws)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
