from __future__ import annotations

import logging
import os
import tempfile
import webbrowser
from pathlib import Path

from .constants import REPORT_FILENAME, TSV_HEADER
from .errors import StorageFailure
from .parsing import fmt_clock
from .summary import DaySummary, MonthSummary

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """<html>
  <head>
    <title>Work Summary</title>
    <style>
      body {{
        font-family: Arial, sans-serif;
        background-color: #f8f8f8;
        margin: 0;
        padding: 0;
      }}
      h1 {{
        text-align: center;
        margin-top: 20px;
      }}
      table {{
        margin: 20px auto;
        border-collapse: collapse;
        width: 80%;
      }}
      th, td {{
        border: 1px solid #ccc;
        padding: 12px;
        text-align: center;
      }}
      .worked {{
        background-color: #dfffe0;
      }}
      .not-worked {{
        background-color: #ffd9d9;
      }}
      .total {{
        font-weight: bold;
      }}
      button {{
        display: inline-block;
        margin: 10px 10px 10px auto;
        padding: 10px 20px;
        background-color: #cddffa;
        border: none;
        cursor: pointer;
        font-size: 16px;
      }}
      .button-container {{
        text-align: center;
      }}
    </style>
  </head>
  <body>
    <h1>Work Summary {month}/{year}</h1>
    <div class="button-container">
      <button onclick="toggleEditMode()">Toggle Edit Mode</button>
      <button onclick="copyTableToClipboard()">Copy Table</button>
    </div>
    <table>
      <tr>
{header}
      </tr>
{rows}
    </table>
    <p style="text-align: center;"><strong>Total Hours: {total}</strong></p>
    <script>
      function toggleEditMode() {{
        document.querySelectorAll("table td").forEach(cell => {{
          cell.contentEditable = cell.contentEditable === "true" ? "false" : "true";
        }});
      }}

      function copyTableToClipboard() {{
        const rows = Array.from(document.querySelectorAll("table tr"));
        const text = rows
          .map(row => Array.from(row.querySelectorAll("th, td")).map(cell => cell.innerText).join("\\t"))
          .join("\\n");
        navigator.clipboard.writeText(text).then(() => alert("Table content copied to clipboard."));
      }}
    </script>
  </body>
</html>
"""


def day_cells(item: DaySummary) -> tuple[str, str, str, str]:
    if not item.worked:
        return str(item.day), "", "", ""
    return (
        str(item.day),
        fmt_clock(item.since) if item.since else "",
        fmt_clock(item.till) if item.till else "",
        f"{item.hours:.2f}",
    )


def total_cells(summary: MonthSummary) -> tuple[str, str, str, str]:
    return "Total", "", "", f"{summary.total:.2f}"


def render_tsv(summary: MonthSummary) -> str:
    lines = ["\t".join(TSV_HEADER)]
    lines.extend("\t".join(day_cells(item)) for item in summary.days)
    lines.append("\t".join(total_cells(summary)))
    return "\n".join(lines)


def render_html(summary: MonthSummary) -> str:
    header = "\n".join(f"        <th>{name}</th>" for name in TSV_HEADER)
    rows = []
    for item in summary.days:
        css_class = "worked" if item.worked else "not-worked"
        cells = "\n".join(f'        <td contenteditable="false">{value}</td>' for value in day_cells(item))
        rows.append(f'      <tr class="{css_class}">\n{cells}\n      </tr>')
    cells = "\n".join(f"        <td>{value}</td>" for value in total_cells(summary))
    rows.append(f'      <tr class="total">\n{cells}\n      </tr>')
    return HTML_TEMPLATE.format(
        month=summary.month,
        year=summary.year,
        header=header,
        rows="\n".join(rows),
        total=f"{summary.total:.2f}",
    )


def report_path(year: int, month: int, directory: Path | None = None) -> Path:
    if directory is None:
        directory = Path(os.getenv("WORKLOG_REPORT_DIR") or tempfile.gettempdir()).expanduser()
    return directory / REPORT_FILENAME.format(year=year, month=month)


def write_report(path: Path, content: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise StorageFailure(f"Failed to write report {path}: {exc}") from exc
    logger.debug("Wrote report to %s", path)
    return path


def open_in_browser(path: Path) -> bool:
    opened = webbrowser.open(path.resolve().as_uri())
    if not opened:
        logger.warning("No browser available to open %s", path)
    return opened
