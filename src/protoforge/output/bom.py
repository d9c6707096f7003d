"""Bill-of-materials rendering (CSV and Markdown)."""

import csv
import io
from typing import Any

from protoforge.schemas.prototype import BomItem

CSV_HEADER = ["partNumber", "description", "quantity", "unitPrice", "link"]


def format_cell(value: Any) -> str:
    """Render a BOM value; whole floats drop their fractional part."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def bom_row(item: BomItem) -> list[str]:
    """Resolve one line item to CSV column values. Quantity defaults to 1."""
    quantity = item.quantity if item.quantity is not None else 1
    return [
        format_cell(item.part_number),
        format_cell(item.description),
        format_cell(quantity),
        format_cell(item.unit_price),
        format_cell(item.link),
    ]


def render_bom_csv(items: list[BomItem]) -> str:
    """
    Render line items as CSV.

    Fields containing a comma, quote or newline are wrapped in double quotes
    with embedded quotes doubled.

    Args:
        items: Resolved BOM line items

    Returns:
        CSV text with a header row and a trailing newline
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in items:
        writer.writerow(bom_row(item))
    return buffer.getvalue()


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def render_bom_markdown(items: list[BomItem]) -> str:
    """Render line items as a Markdown table."""
    lines = [
        "# Bill of Materials",
        "",
        "| # | Part Number | Description | Qty | Unit Price | Link |",
        "|---:|------------|-------------|---:|-----------:|------|",
    ]
    for idx, item in enumerate(items, start=1):
        part_number, description, quantity, unit_price, link = (
            _md_cell(value) for value in bom_row(item)
        )
        link_text = f"[link]({link})" if link else ""
        lines.append(
            f"| {idx} | {part_number} | {description} | {quantity} | {unit_price} | {link_text} |"
        )
    return "\n".join(lines) + "\n"
