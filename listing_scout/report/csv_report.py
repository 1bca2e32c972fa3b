# listing_scout/report/csv_report.py
"""
CSV export of a harvested Dataset.
"""
from __future__ import annotations

import csv
from pathlib import Path

from listing_scout.aggregator import CSV_HEADER, Dataset


def render_csv(dataset: Dataset, output_path: Path | str) -> Path:
    """
    Write dataset as CSV with the header ``No.,Title,User,View,Link``.

    :param dataset: records sorted by sequence number
    :param output_path: path of the CSV file
    :return: Path of the written file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows(dataset.rows())

    return output
