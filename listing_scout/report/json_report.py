# listing_scout/report/json_report.py

"""
JSON export of a harvested Dataset.
"""
import json
from pathlib import Path

from listing_scout.aggregator import Dataset


def render_json(dataset: Dataset, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save dataset as JSON at the given path.

    :param dataset: harvested Dataset
    :param output_path: path of the JSON file
    :param pretty: indent the output by two spaces
    :return: Path of the saved file

    Example:
    ```python
    from listing_scout.report.json_report import render_json
    report_path = render_json(dataset, 'reports/pages.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(dataset.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
