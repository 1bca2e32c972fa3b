# File: listing_scout/report/html_report.py
"""listing_scout.report.html_report: HTML rendering of a Dataset with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from listing_scout.aggregator import CSV_HEADER, Dataset

TEMPLATE_NAME = "dataset.html.j2"


def render_html(
    dataset: Dataset,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Render the dataset table from a template and save it.

    Args:
        dataset: harvested Dataset.
        output_path: path of the resulting HTML file.
        template_dir: directory holding ``dataset.html.j2``; the packaged
            template is used when omitted.

    Returns:
        Path of the saved HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    loader: BaseLoader
    if template_dir is None:
        loader = PackageLoader("listing_scout", "templates")
    else:
        loader = FileSystemLoader(str(template_dir))
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "header": CSV_HEADER,
        "records": dataset.records,
        "last_page": dataset.last_page,
        "failed_pages": dataset.failed_pages,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
