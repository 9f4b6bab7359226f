"""Tests for RelicConfig and its JSON persistence."""
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tick_relic import Messages, Recipe, RelicConfig, load_config, save_config


class TestRelicConfig:
    def test_defaults(self) -> None:
        config = RelicConfig()
        assert config.item == "mace"
        assert config.scan_interval == 40
        assert config.announce is True
        assert config.allow_in_containers is False
        assert config.allow_locate_for_all is False
        assert config.permission_level == 2
        assert config.recipe.inputs == {"heavy_core": 1, "breeze_rod": 1}

    def test_frozen(self) -> None:
        config = RelicConfig()
        with pytest.raises(AttributeError):
            config.item = "sword"  # type: ignore[misc]

    def test_invalid_interval(self) -> None:
        with pytest.raises(ValueError, match="scan_interval"):
            RelicConfig(scan_interval=0)

    def test_empty_item(self) -> None:
        with pytest.raises(ValueError, match="item"):
            RelicConfig(item="")

    def test_message_substitution(self) -> None:
        config = RelicConfig(item="trident")
        assert "trident" in config.message("lost")
        assert "3" in RelicConfig(
            messages=Messages(duplicates="{count} x {name}")
        ).message("duplicates", count=3)


class TestLoadConfig:
    def test_missing_file_written_with_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "relic.json"
        config = load_config(path)
        assert config == RelicConfig()
        data = json.loads(path.read_text())
        assert data["item"] == "mace"
        assert data["recipe"]["inputs"] == {"heavy_core": 1, "breeze_rod": 1}

    def test_saved_values_are_read_back(self, tmp_path: Path) -> None:
        path = tmp_path / "relic.json"
        original = RelicConfig(
            item="trident",
            recipe=Recipe("trident", inputs={"prismarine": 8}),
            scan_interval=10,
            announce=False,
            messages=Messages(lost="gone"),
        )
        assert save_config(original, path)
        assert load_config(path) == original

    def test_partial_document(self, tmp_path: Path) -> None:
        path = tmp_path / "relic.json"
        path.write_text(json.dumps({"announce": False, "messages": {"lost": "gone"}, "extra": 1}))
        config = load_config(path)
        assert config.announce is False
        assert config.messages.lost == "gone"
        assert config.messages.crafted == Messages().crafted
        assert config.item == "mace"

    def test_malformed_file_yields_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "relic.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="tick_relic.config"):
            config = load_config(path)
        assert config == RelicConfig()
        assert path.read_text() == "{not json"
        assert "invalid config" in caplog.text

    def test_invalid_values_yield_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "relic.json"
        path.write_text(json.dumps({"scan_interval": -5}))
        assert load_config(path) == RelicConfig()

    def test_overlong_path_yields_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / ("x" * 300) / "relic.json"
        with caplog.at_level(logging.WARNING, logger="tick_relic.config"):
            assert load_config(path) == RelicConfig()
        assert "could not read config" in caplog.text

    def test_save_failure_returns_false(self, tmp_path: Path) -> None:
        assert not save_config(RelicConfig(), tmp_path / "missing" / "relic.json")
