import csv
import datetime
import html
import io
import json
from collections.abc import Sequence

from src.bom_summary.types import PartRow

CSV_HEADERS = ["Part Number", "Tier", "Total Quantity", "Description"]


def summary_filename(today: datetime.date | None = None, ext: str = "csv") -> str:
    """Suggested download name, e.g. '2024-05-01_BOM_Summary.csv'."""
    today = today or datetime.date.today()
    return f"{today.isoformat()}_BOM_Summary.{ext}"


def generate_summary_csv(rows: Sequence[PartRow], file_ids: Sequence[str]) -> bytes:
    """
    Generates the BOM summary CSV.

    One row per part in the given order, followed by one quantity column per
    file identifier. Text fields are always double-quoted; numbers are not.
    Files that did not use a part get a 0.

    Args:
        rows (list[PartRow]): Rows, already sorted for presentation.
        file_ids (list[str]): The aggregate's file identifiers, in column order.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()
    writer = csv.writer(csv_buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_HEADERS + list(file_ids))

    for row in rows:
        writer.writerow(
            [
                row["partNumber"],
                row["tier"],
                row["total_quantity"],
                row["description"] or "",
            ]
            + [row["file_quantities"].get(file_id, 0) for file_id in file_ids]
        )

    # encode "utf-8-sig" so Excel detects the encoding
    return csv_buf.getvalue().encode("utf-8-sig")


_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: system-ui, sans-serif; margin: 2rem; color: #1e293b; }}
h1 {{ font-size: 1.5rem; margin-bottom: 0.25rem; }}
p.meta {{ color: #64748b; margin-top: 0; }}
input#search {{ padding: 0.4rem 0.6rem; width: 20rem; margin-bottom: 1rem; }}
table {{ border-collapse: collapse; font-size: 0.85rem; }}
th, td {{ border-bottom: 1px solid #e2e8f0; padding: 0.4rem 0.8rem; }}
th {{ background: #f1f5f9; cursor: pointer; user-select: none; position: sticky; top: 0; }}
td.num {{ text-align: center; }}
span.t1 {{ background: #fef3c7; color: #92400e; border-radius: 9999px; padding: 0 0.5rem; }}
</style>
</head>
<body>
<h1>{title}</h1>
<p class="meta">{summary}</p>
<input id="search" type="search" placeholder="Search part number or description...">
<table id="bom">
<thead><tr>{header_cells}</tr></thead>
<tbody>
{body_rows}
</tbody>
</table>
<script>
const numericCols = {numeric_cols};
const table = document.getElementById("bom");
const tbody = table.tBodies[0];
let sortState = {{ col: -1, asc: true }};
table.tHead.rows[0].querySelectorAll("th").forEach((th, col) => {{
  th.addEventListener("click", () => {{
    sortState = {{ col, asc: sortState.col === col ? !sortState.asc : true }};
    const rows = Array.from(tbody.rows);
    rows.sort((a, b) => {{
      const x = a.cells[col].dataset.value, y = b.cells[col].dataset.value;
      const r = numericCols.includes(col)
        ? Number(x) - Number(y)
        : x.localeCompare(y, undefined, {{ numeric: true }});
      return sortState.asc ? r : -r;
    }});
    rows.forEach((row) => tbody.appendChild(row));
  }});
}});
document.getElementById("search").addEventListener("input", (e) => {{
  const q = e.target.value.toLowerCase();
  Array.from(tbody.rows).forEach((row) => {{
    const text = row.cells[0].textContent + " " + row.cells[3].textContent;
    row.style.display = text.toLowerCase().includes(q) ? "" : "none";
  }});
}});
</script>
</body>
</html>
"""


def _td(value: object, numeric: bool = False, display: str | None = None) -> str:
    text = "" if value is None else str(value)
    shown = display if display is not None else html.escape(text)
    css = ' class="num"' if numeric else ""
    return f'<td{css} data-value="{html.escape(text, quote=True)}">{shown}</td>'


def generate_summary_html(
    rows: Sequence[PartRow],
    file_ids: Sequence[str],
    title: str = "BOM Summary",
) -> str:
    """
    Generates a self-contained HTML report with client-side sort and search.

    Args:
        rows (list[PartRow]): Rows, already sorted for presentation.
        file_ids (list[str]): The aggregate's file identifiers, in column order.
        title (str): Page heading.

    Returns:
        str: The full HTML document.
    """
    headers = CSV_HEADERS + list(file_ids)
    header_cells = "".join(f"<th>{html.escape(h)}</th>" for h in headers)

    body_rows = []
    for row in rows:
        tier_html = html.escape(row["tier"])
        if row["tier"] == "Tier 1":
            tier_html = f'<span class="t1">{tier_html}</span>'
        cells = [
            _td(row["partNumber"]),
            _td(row["tier"], display=tier_html),
            _td(row["total_quantity"], numeric=True),
            _td(row["description"]),
        ]
        cells.extend(
            _td(row["file_quantities"].get(file_id, 0), numeric=True)
            for file_id in file_ids
        )
        body_rows.append(f"<tr>{''.join(cells)}</tr>")

    numeric_cols = [2] + [4 + i for i in range(len(file_ids))]
    summary = f"{len(rows)} unique parts across {len(file_ids)} files."

    return _HTML_TEMPLATE.format(
        title=html.escape(title),
        summary=html.escape(summary),
        header_cells=header_cells,
        body_rows="\n".join(body_rows),
        numeric_cols=json.dumps(numeric_cols),
    )
