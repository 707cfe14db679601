"""Tests for config discovery and MilaanSettings source precedence."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from milaan.config.discovery import CONFIG_FILENAME, find_config, search_dirs
from milaan.config.models import LatencyConfig
from milaan.config.settings import MilaanSettings


class TestDiscovery:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_nearest_wins(self, tmp_path: Path) -> None:
        inner = tmp_path / "inner"
        inner.mkdir()
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        (inner / CONFIG_FILENAME).write_text("", encoding="utf-8")
        assert find_config(inner) == (inner / CONFIG_FILENAME).resolve()

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        explicit = tmp_path / "elsewhere.toml"
        explicit.write_text("", encoding="utf-8")
        monkeypatch.setenv("MILAAN_CONFIG", str(explicit))
        assert find_config(tmp_path) == explicit

    def test_env_override_missing_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        monkeypatch.setenv("MILAAN_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None

    def test_search_dirs_ends_at_root(self, tmp_path: Path) -> None:
        dirs = list(search_dirs(tmp_path))
        assert dirs[0] == tmp_path.resolve()
        assert dirs[-1] == Path(tmp_path.resolve().anchor)


class TestDefaults:
    def test_code_defaults(self, tmp_path: Path) -> None:
        s = MilaanSettings(root=tmp_path)
        assert s.session.seed_demo_data is True
        assert s.latency.login == 800
        assert s.notifications.enabled is True
        assert s.state_dir == tmp_path / ".milaan"

    def test_latency_seconds(self) -> None:
        assert LatencyConfig().seconds("problem_detail") == 0.6
        assert LatencyConfig.none().seconds("login") == 0


class TestFromCli:
    def test_toml_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            "[latency]\nlogin = 5\n\n[session]\nstate_dir = 'state'\n", encoding="utf-8"
        )
        s = MilaanSettings.from_cli(root=tmp_path)
        assert s.latency.login == 5
        assert s.latency.comments == 500
        assert s.state_dir == tmp_path / "state"
        assert s.config_path == (tmp_path / CONFIG_FILENAME).resolve()

    def test_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        nested = tmp_path / "deep"
        nested.mkdir()
        monkeypatch.chdir(nested)
        s = MilaanSettings.from_cli()
        assert s.root == tmp_path.resolve()

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[latency]\nlogin = 5\n", encoding="utf-8")
        monkeypatch.setenv("MILAAN_LATENCY__LOGIN", "7")
        assert MilaanSettings.from_cli(root=tmp_path).latency.login == 7

    def test_flags_beat_everything(self, tmp_path: Path) -> None:
        s = MilaanSettings.from_cli(root=tmp_path, json_output=True, verbose=True)
        assert s.json_output
        assert s.verbose

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("[notifications]\nenabled = false\n", encoding="utf-8")
        s = MilaanSettings.from_cli(config_path=str(custom))
        assert s.notifications.enabled is False
        assert s.root == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[latency\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            MilaanSettings.from_cli(root=tmp_path)

    def test_no_config_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MILAAN_CONFIG", str(tmp_path / "missing.toml"))
        s = MilaanSettings.from_cli(root=tmp_path)
        assert s.config_path is None
        assert s.latency == LatencyConfig()
