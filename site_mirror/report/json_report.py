# site_mirror/report/json_report.py

"""
JSON report for SiteMirror: serializes a CrawlReport to a file.
"""
import json
from pathlib import Path

from site_mirror.crawler.models import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Save *report* as JSON at *output_path* and return the path.

    Example:
    ```python
    from site_mirror.report.json_report import render_json
    report_path = render_json(report, 'reports/mirror.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)

    return output
