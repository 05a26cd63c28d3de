"""Game configuration loaded from JSON with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import orjson

from .core.policies import CategoryPolicies

DEFAULT_CONFIG_PATH = Path("config/quizboard.json")
REPORTS_DIR_ENV = "QUIZBOARD_REPORTS_DIR"
POLICY_ENV = "QUIZBOARD_POLICY"


@dataclass(slots=True)
class GameConfig:
    """Where output goes and how answers are judged."""

    reports_dir: Path = Path("reports")
    event_log_name: str = "game_event_log.csv"
    report_basename: str = "game_report"
    report_format: str = "txt"
    policy: str = "default"
    point_multiplier: int = 1
    category_policies: Dict[str, str] = field(default_factory=dict)

    @property
    def event_log_path(self) -> Path:
        return self.reports_dir / self.event_log_name

    def build_policies(self) -> CategoryPolicies:
        return CategoryPolicies.from_names(
            self.category_policies,
            default=self.policy,
            multiplier=self.point_multiplier,
        )


def load_game_config(path: Path = DEFAULT_CONFIG_PATH, *, environ: Optional[Dict[str, str]] = None) -> GameConfig:
    """Load configuration from disk, falling back to defaults, then apply env overrides."""

    env = os.environ if environ is None else environ
    config = GameConfig()

    if path.exists():
        data = orjson.loads(path.read_bytes()) or {}
        if "reports_dir" in data:
            config.reports_dir = Path(str(data["reports_dir"]))
        config.event_log_name = str(data.get("event_log_name", config.event_log_name))
        config.report_basename = str(data.get("report_basename", config.report_basename))
        config.report_format = str(data.get("report_format", config.report_format))
        config.policy = str(data.get("policy", config.policy))
        config.point_multiplier = int(data.get("point_multiplier", config.point_multiplier))
        config.category_policies = {
            str(category): str(name)
            for category, name in (data.get("category_policies") or {}).items()
        }

    if env.get(REPORTS_DIR_ENV):
        config.reports_dir = Path(env[REPORTS_DIR_ENV])
    if env.get(POLICY_ENV):
        config.policy = env[POLICY_ENV]
    return config


__all__ = ["DEFAULT_CONFIG_PATH", "GameConfig", "load_game_config"]
