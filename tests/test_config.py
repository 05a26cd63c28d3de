"""Tests for configuration loading."""

from pathlib import Path

from quizboard.config import GameConfig, load_game_config
from quizboard.core.policies import ExactMatchPolicy, ScaledPointsPolicy


def test_defaults_when_file_missing(tmp_path):
    config = load_game_config(tmp_path / "missing.json", environ={})
    assert config == GameConfig()
    assert config.event_log_path == Path("reports") / "game_event_log.csv"


def test_values_from_file(tmp_path):
    path = tmp_path / "quizboard.json"
    path.write_text(
        '{"reports_dir": "out", "report_format": "md", "policy": "scaled",'
        ' "point_multiplier": 2, "category_policies": {"Loops": "exact"}}',
        encoding="utf-8",
    )
    config = load_game_config(path, environ={})
    assert config.reports_dir == Path("out")
    assert config.report_format == "md"
    policies = config.build_policies()
    assert isinstance(policies.for_category("Loops"), ExactMatchPolicy)
    assert isinstance(policies.default, ScaledPointsPolicy)
    assert policies.default.calculate_points(100) == 200


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "quizboard.json"
    path.write_text('{"reports_dir": "out", "policy": "exact"}', encoding="utf-8")
    config = load_game_config(
        path,
        environ={"QUIZBOARD_REPORTS_DIR": str(tmp_path / "env"), "QUIZBOARD_POLICY": "default"},
    )
    assert config.reports_dir == tmp_path / "env"
    assert config.policy == "default"
