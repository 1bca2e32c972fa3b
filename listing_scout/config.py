# === FILE: listing_scout/config.py ===
"""
Loading and validation of the ListingScout configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

__all__ = ["ListingSelectors", "ListingConfig", "load_config"]


class ListingSelectors(BaseModel):
    """CSS selectors describing the board markup."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    row: str = "div.board-list table tbody tr"
    no_result: str = "div.board-list table tbody tr td div.no-result"
    summary_number: str = "tbody tr.lgtm td.num span"
    title: str = "td.tit div div a"
    number: str = "td.num span"
    user: str = "td.user span"
    view: str = "td.view"


class ListingConfig(BaseModel):
    """Configuration for one harvesting run."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    base_url: HttpUrl = Field(
        "https://www.inven.co.kr/board/ff14/4337", description="Listing URL without the page parameter."
    )
    page_param: str = Field("p", min_length=1, description="Query parameter carrying the page index.")
    page_size: int = Field(30, ge=1, description="Records shown per page.")
    retry_times: int = Field(20, ge=0, description="Retries per request after the first attempt.")
    retry_delay: float = Field(0.0, ge=0, description="Pause between retries (seconds).")
    timeout: float = Field(30.0, gt=0, description="Timeout for a single request (seconds).")
    concurrency: Optional[int] = Field(None, ge=1, description="Cap on in-flight page fetches.")
    user_agent: str = Field("ListingScout/1.0", min_length=1, description="User-Agent header.")
    output: Path = Field(Path("pages.csv"), description="Path of the CSV dataset.")
    selectors: ListingSelectors = Field(default_factory=ListingSelectors)

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ListingConfig:
    """
    Read YAML or JSON and return a validated ListingConfig.

    Without a path, ``configs/default.yaml`` is used when present, otherwise
    the built-in defaults. An explicit path that does not exist raises
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return ListingConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ListingConfig(**data)
