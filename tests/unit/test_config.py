"""
Unit tests for config models and YAML I/O (x_influx.config).
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from x_influx.config import (
    DatabaseConfig,
    ImportConfig,
    LayoutConfig,
    SourceConfig,
    load_config,
    save_config,
)
from x_influx.exceptions import ConfigValidationError
from x_influx.layout import Layout


class TestDatabaseConfig:
    def test_defaults(self):
        cfg = DatabaseConfig()
        assert cfg.server == "http://localhost:8086"
        assert cfg.user == "test"
        assert cfg.password == ""
        assert cfg.database == "test"
        assert cfg.series == "series"


class TestLayoutConfig:
    def test_defaults_match_layout(self):
        assert LayoutConfig().to_layout() == Layout()

    def test_tags_from_string(self):
        cfg = LayoutConfig(tags="bereich, plz,,halle")
        assert cfg.tags == ["bereich", "plz", "halle"]

    def test_tags_from_list(self):
        cfg = LayoutConfig(tags=["a", "", "b"])
        assert cfg.tags == ["a", "b"]

    def test_to_layout(self):
        layout = LayoutConfig(measure="kw", tags="plz", time="datum", tformat="%F").to_layout()
        assert layout == Layout(measure="kw", tags=("plz",), time="datum", tformat="%F")


class TestSourceConfig:
    def test_file_mode_requires_files(self):
        with pytest.raises(ValidationError, match="at least one input file"):
            SourceConfig(mode="file")

    def test_interactive_needs_no_files(self):
        assert SourceConfig(mode="interactive").files == []

    @pytest.mark.parametrize("delimiter", ["", ";;"])
    def test_delimiter_single_char(self, delimiter):
        with pytest.raises(ValidationError, match="single character"):
            SourceConfig(files=["a.csv"], delimiter=delimiter)

    def test_negative_skip_rows(self):
        with pytest.raises(ValidationError):
            SourceConfig(files=["a.csv"], skip_rows=-1)

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            SourceConfig(mode="kafka", files=["a.csv"])


class TestImportConfig:
    def test_default_is_interactive(self):
        cfg = ImportConfig()
        assert cfg.source.mode == "interactive"
        assert cfg.verbose is False


class TestYamlIO:
    def test_roundtrip(self, tmp_path):
        cfg = ImportConfig(
            database=DatabaseConfig(server="http://db:8086", series="power"),
            layout=LayoutConfig(measure="kw", tags=["plz", "halle"], time="datum"),
            source=SourceConfig(files=["a.csv", "b.csv"], delimiter=";", skip_rows=2),
        )
        path = tmp_path / "cfg" / "x-influx.yaml"
        save_config(cfg, path)
        assert path.read_text(encoding="utf-8").startswith("# x-influx configuration")
        assert load_config(path) == cfg

    def test_partial_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "x.yaml"
        path.write_text(
            "layout:\n  measure: kw\n  tags: plz,halle\n"
            "source:\n  mode: file\n  files: [a.csv]\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.layout.tags == ["plz", "halle"]
        assert cfg.database.database == "test"
        assert cfg.source.delimiter == ","

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="empty"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="mapping"):
            load_config(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("database: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="not valid YAML"):
            load_config(path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"layout:\n  measure: \xe4\n")
        with pytest.raises(ConfigValidationError, match="not valid YAML"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("source:\n  mode: file\n  files: []\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)
