# File: listing_scout/report/__init__.py
"""listing_scout.report: Dataset writers (CSV, JSON and HTML) used by the CLI."""

from __future__ import annotations

from listing_scout.report.csv_report import render_csv
from listing_scout.report.html_report import render_html
from listing_scout.report.json_report import render_json

__all__ = ["render_csv", "render_json", "render_html"]
