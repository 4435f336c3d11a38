# helixcompare/inputs/settings.py
"""
Settings loader for a HelixCompare scrape run.

Supported JSON shape (every key optional)
-----------------------------------------
    {
      "run": {
        "out": "data/latest.csv",
        "max_pages_per_operator": 80,
        "operators": ["Yallo", "Salt"],
        "user_agent": "HelixCompareBot/1.0 (+noncommercial)",
        "render_wait_s": 0.25,
        "delay_s": 0.35,
        "push": false
      },
      "sink": {
        "token": "...",
        "base": "app...",
        "table": "Offres",
        "batch_size": 10
      }
    }

Environment overrides (optional)
--------------------------------
- HELIX_OUT        -> run.out
- HELIX_MAX_PAGES  -> run.max_pages_per_operator (int)
- HELIX_OPERATORS  -> run.operators (comma-separated)
- HELIX_PUSH       -> run.push (1/0, true/false)
- AIRTABLE_TOKEN   -> sink.token
- AIRTABLE_BASE    -> sink.base
- AIRTABLE_TABLE   -> sink.table

Secrets are normally provided through the environment only; the file form
exists for local runs.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from helixcompare.core.crawl.sitemap import DEFAULT_USER_AGENT

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class RunOptions(BaseModel):
    """Runtime options of one scrape run."""

    model_config = ConfigDict(extra="ignore")

    out: str = Field("data/latest.csv", description="CSV output path.")
    max_pages_per_operator: int = Field(80, ge=1, le=1000, description="Courtesy cap on pages per operator.")
    operators: list[str] = Field(default_factory=list, description="Operator names; empty means all.")
    user_agent: str = DEFAULT_USER_AGENT
    render_wait_s: float = Field(0.25, ge=0, description="Pause after expanding accordions.")
    delay_s: float = Field(0.35, ge=0, description="Pause between two page captures.")
    push: bool = Field(False, description="Upsert the rows into the record store after writing the CSV.")

    @field_validator("operators", mode="before")
    @classmethod
    def _split_operators(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


class SinkSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str | None = None
    base: str | None = None
    table: str | None = None
    batch_size: int = Field(10, ge=1, le=10)

    @property
    def configured(self) -> bool:
        return bool(self.token and self.base and self.table)


class AppSettings(BaseModel):
    run: RunOptions = Field(default_factory=RunOptions)
    sink: SinkSettings = Field(default_factory=SinkSettings)


@dataclass(frozen=True)
class SettingsLoader:
    """
    File-optional settings loader with environment overrides.

    Without a path, defaults are validated and only the environment applies.
    """

    env_prefix: str = "HELIX_"

    def load(self, path: str | Path | None = None) -> AppSettings:
        raw = self._read_json_file(Path(path)) if path is not None else {}
        cfg = self._parse_root(raw)
        return self._apply_env_overrides(cfg)

    def with_overrides(
        self,
        cfg: AppSettings,
        *,
        out: str | None = None,
        max_pages: int | None = None,
        operators: list[str] | None = None,
        push: bool | None = None,
    ) -> AppSettings:
        """Return a new AppSettings with the non-null CLI overrides applied."""
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if max_pages is not None:
            updates["max_pages_per_operator"] = max_pages
        if operators is not None:
            updates["operators"] = operators
        if push is not None:
            updates["push"] = push
        if not updates:
            return cfg
        return cfg.model_copy(update={"run": self._validated_run(cfg.run, updates)})

    # ---------- Internals ----------

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if not p.exists():
            raise FileNotFoundError(f"Settings file not found: {p}")
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported settings format for {p.name}; only .json is supported.")
        try:
            return cast(dict[str, Any], json.loads(p.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e

    def _parse_root(self, data: Any) -> AppSettings:
        try:
            return AppSettings.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Settings validation failed:\n{e}") from e

    def _validated_run(self, run: RunOptions, updates: dict[str, Any]) -> RunOptions:
        try:
            return RunOptions.model_validate({**run.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Settings validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppSettings) -> AppSettings:
        prefix = self.env_prefix
        run_updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            run_updates["out"] = out

        max_pages = os.getenv(f"{prefix}MAX_PAGES")
        if max_pages:
            try:
                n = int(max_pages)
            except ValueError:
                n = 0
            # Ignore bad value; keep validated cfg value
            if n >= 1:
                run_updates["max_pages_per_operator"] = n

        operators = os.getenv(f"{prefix}OPERATORS")
        if operators:
            run_updates["operators"] = [s.strip() for s in operators.split(",") if s.strip()]

        push = (os.getenv(f"{prefix}PUSH") or "").strip().lower()
        if push in _TRUTHY:
            run_updates["push"] = True
        elif push in _FALSY:
            run_updates["push"] = False

        sink_updates: dict[str, Any] = {}
        for env_key, field in (("AIRTABLE_TOKEN", "token"), ("AIRTABLE_BASE", "base"), ("AIRTABLE_TABLE", "table")):
            val = os.getenv(env_key)
            if val:
                sink_updates[field] = val

        if not run_updates and not sink_updates:
            return cfg
        return cfg.model_copy(
            update={
                "run": cfg.run.model_copy(update=run_updates),
                "sink": cfg.sink.model_copy(update=sink_updates),
            }
        )


def load_settings(path: str | Path | None = None) -> AppSettings:
    """Convenience wrapper for one-shot callers."""
    return SettingsLoader().load(path)
