"""Tests for configuration file support."""

import sys
import warnings
from pathlib import Path

import pytest

from kicad_drill.config import (
    Config,
    ConfigError,
    DrillConfig,
    _find_project_config,
    _load_toml_file,
    generate_template,
    get_config_paths,
)
from kicad_drill.drill import DrillFormat, DrillPrecision, DrillUnits, MapFormat, ZerosFormat
from kicad_drill.exceptions import ConfigurationError


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project root with a .git marker and no user config."""
    (tmp_path / ".git").mkdir()
    monkeypatch.setattr("kicad_drill.config.USER_CONFIG_PATH", tmp_path / "no-exist.toml")
    return tmp_path


class TestDrillConfigDefaults:
    """Test configuration dataclass defaults."""

    def test_defaults(self):
        """DrillConfig has correct defaults."""
        config = DrillConfig()
        assert config.format == "excellon"
        assert config.units == "mm"
        assert config.zeros == "decimal"
        assert config.route_oval_holes is True
        assert config.map_format == "postscript"
        assert config.gerber_precision == 6

    def test_default_options(self):
        """Default config produces default options."""
        options = Config().to_options()
        assert options.drill_format == DrillFormat.EXCELLON
        assert options.precision == DrillPrecision(3, 3)
        assert options.output_dir == Path(".")


class TestConfigDiscovery:
    """Test config file discovery."""

    def test_find_in_current_dir(self, tmp_path):
        """Find config in current directory."""
        config_file = tmp_path / ".kicad-drill.toml"
        config_file.write_text("[drill]\nunits = 'inch'\n")
        assert _find_project_config(tmp_path) == config_file

    def test_prefers_hidden(self, tmp_path):
        """Hidden file name wins over the plain one."""
        (tmp_path / ".kicad-drill.toml").write_text("")
        (tmp_path / "kicad-drill.toml").write_text("")
        assert _find_project_config(tmp_path).name == ".kicad-drill.toml"

    def test_walks_up(self, tmp_path):
        """Find config in a parent directory."""
        config_file = tmp_path / "kicad-drill.toml"
        config_file.write_text("")
        board_dir = tmp_path / "hardware" / "main"
        board_dir.mkdir(parents=True)
        assert _find_project_config(board_dir) == config_file

    def test_stops_at_git(self, tmp_path):
        """Do not search above the repository root."""
        (tmp_path / "kicad-drill.toml").write_text("")
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        assert _find_project_config(repo) is None


class TestLoadToml:
    """Test TOML loading."""

    def test_invalid_toml(self, tmp_path):
        """Invalid TOML raises ConfigError."""
        path = tmp_path / "bad.toml"
        path.write_text("[drill\nunits = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            _load_toml_file(path)

    def test_missing_file(self, tmp_path):
        """Unreadable file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read"):
            _load_toml_file(tmp_path / "missing.toml")


class TestConfigLoad:
    """Test loading and merging."""

    def test_defaults_only(self, project):
        config = Config.load(project)
        assert config.drill.units == "mm"
        assert config.get_source("drill.units") == "default"

    def test_project_config(self, project):
        config_file = project / ".kicad-drill.toml"
        config_file.write_text('[drill]\nunits = "inch"\nzeros = "suppress-leading"\n')
        config = Config.load(project)
        assert config.drill.units == "inch"
        assert config.drill.zeros == "suppress-leading"
        assert config.get_source("drill.units") == str(config_file)

    def test_project_overrides_user(self, project, monkeypatch):
        """Project values win; user values fill the rest."""
        user_config = project / "user.toml"
        user_config.write_text('[drill]\nunits = "inch"\nmirror_y = true\n')
        monkeypatch.setattr("kicad_drill.config.USER_CONFIG_PATH", user_config)
        (project / ".kicad-drill.toml").write_text('[drill]\nunits = "mm"\n')

        config = Config.load(project)
        assert config.drill.units == "mm"
        assert config.drill.mirror_y is True
        assert config.get_source("drill.mirror_y") == str(user_config)


class TestConfigWarnings:
    """Test warnings for unknown config keys."""

    def test_warn_unknown_section(self, project):
        (project / ".kicad-drill.toml").write_text('[plot]\nkey = "value"\n')
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            Config.load(project)
            assert len(w) == 1
            assert "plot" in str(w[0].message)

    def test_warn_unknown_key_in_section(self, project):
        (project / ".kicad-drill.toml").write_text("[drill]\nmirror_x = true\n")
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            config = Config.load(project)
            assert len(w) == 1
            assert "drill.mirror_x" in str(w[0].message)
        assert config.drill.mirror_y is False


class TestToOptions:
    """Test conversion into job options."""

    def test_config_values(self):
        config = Config(
            drill=DrillConfig(units="inch", zeros="keep-zeros", map_format=4, output_dir="fab")
        )
        options = config.to_options()
        assert options.units == DrillUnits.INCH
        assert options.zeros == ZerosFormat.KEEP_ZEROS
        assert options.map_format == MapFormat.SVG
        assert options.output_dir == Path("fab")

    def test_overrides(self):
        config = Config(drill=DrillConfig(units="inch", mirror_y=True))
        options = config.to_options(units="mm", mirror_y=None)
        assert options.units == DrillUnits.MM
        assert options.mirror_y is True

    def test_gerber_precision(self):
        options = Config(drill=DrillConfig(format="gerber", gerber_precision=5)).to_options()
        assert options.precision == DrillPrecision(4, 5)

    def test_gerber_from_override(self):
        options = Config().to_options(drill_format="gerber")
        assert options.precision == DrillPrecision(4, 6)

    def test_invalid_value(self):
        config = Config(drill=DrillConfig(zeros="sometimes"))
        with pytest.raises(ConfigError) as exc_info:
            config.to_options()
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.context["option"] == "zeros"


class TestGenerateTemplate:
    """Test template generation."""

    def test_valid_toml(self):
        """Generated template is valid TOML with an empty drill section."""
        if sys.version_info >= (3, 11):
            import tomllib
        else:
            import tomli as tomllib

        assert tomllib.loads(generate_template()) == {"drill": {}}

    def test_documents_options(self):
        template = generate_template()
        for key in ("format", "units", "zeros", "merge_pth_npth", "map_format", "origin"):
            assert f"# {key} = " in template
        assert "hpgl, postscript, gerber, dxf, svg, pdf" in template


class TestGetConfigPaths:
    """Test config path reporting."""

    def test_none_for_missing_files(self, project, monkeypatch):
        monkeypatch.chdir(project)
        assert get_config_paths() == {"user": None, "project": None}

    def test_existing_files(self, project, monkeypatch):
        user_config = project / "user.toml"
        user_config.write_text("")
        monkeypatch.setattr("kicad_drill.config.USER_CONFIG_PATH", user_config)
        (project / "kicad-drill.toml").write_text("")
        monkeypatch.chdir(project)

        paths = get_config_paths()
        assert paths["user"] == user_config
        assert paths["project"] == project / "kicad-drill.toml"
