"""
Configuration file support for kicad-drill.

Drill options persist between runs in TOML files:

1. Project config: .kicad-drill.toml or kicad-drill.toml, found by walking up
   from the board directory to the repository root
2. User config: ~/.config/kicad-drill/config.toml

CLI arguments override config file values, and project config overrides user
config. All options live in the ``[drill]`` section.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from kicad_drill.drill.options import (
    DrillFormat,
    DrillJobOptions,
    DrillPrecision,
    MapFormat,
)
from kicad_drill.exceptions import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".kicad-drill.toml", "kicad-drill.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "kicad-drill" / "config.toml"


@dataclass
class DrillConfig:
    """Persisted drill generation options."""

    format: str = "excellon"
    units: str = "mm"
    zeros: str = "decimal"
    mirror_y: bool = False
    minimal_header: bool = False
    merge_pth_npth: bool = False
    route_oval_holes: bool = True
    map_format: str | int = "postscript"
    origin: str = "absolute"
    output_dir: str = "."
    gerber_precision: int = 6


# All known config keys for validation
KNOWN_KEYS = {
    "drill": {f.name for f in fields(DrillConfig)},
}


@dataclass
class Config:
    """Merged configuration from all sources."""

    drill: DrillConfig = field(default_factory=DrillConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def to_options(self, **overrides: Any) -> DrillJobOptions:
        """
        Build job options from the config, with command-line overrides.

        Args:
            **overrides: DrillJobOptions fields that take precedence; None
                values are ignored

        Raises:
            ConfigError: If a config value cannot be interpreted
        """
        drill = self.drill
        values: dict[str, Any] = {
            "drill_format": drill.format,
            "units": drill.units,
            "zeros": drill.zeros,
            "mirror_y": drill.mirror_y,
            "minimal_header": drill.minimal_header,
            "merge_pth_npth": drill.merge_pth_npth,
            "route_oval_holes": drill.route_oval_holes,
            "map_format": drill.map_format,
            "origin": drill.origin,
            "output_dir": Path(drill.output_dir),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        if "precision" not in values and _is_gerber(values["drill_format"]):
            values["precision"] = DrillPrecision(4, int(drill.gerber_precision))

        try:
            return DrillJobOptions(**values)
        except ConfigurationError as e:
            raise ConfigError(e.message, context=e.context, suggestions=e.suggestions) from e


class ConfigError(ConfigurationError):
    """Configuration-related errors."""

    pass


def _is_gerber(value: Any) -> bool:
    return value == DrillFormat.GERBER_X2 or str(value).lower() in ("gerber", "gerber_x2")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    # Warn about unknown top-level keys
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "drill" in data:
        drill_data = data["drill"]
        _warn_unknown_keys(drill_data, KNOWN_KEYS["drill"], "drill", source)

        for key in KNOWN_KEYS["drill"]:
            if key in drill_data:
                setattr(config.drill, key, drill_data[key])
                sources[f"drill.{key}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    map_names = ", ".join(fmt.name.lower() for fmt in MapFormat)
    return f"""# kicad-drill configuration file
# Place as .kicad-drill.toml in project root or ~/.config/kicad-drill/config.toml for user defaults

[drill]
# Drill file format: excellon, gerber
# format = "excellon"

# Excellon units: mm, inch (Gerber drill files are always mm)
# units = "mm"

# Excellon coordinate encoding: decimal, suppress-leading, suppress-trailing, keep-zeros
# zeros = "decimal"

# Mirror Y coordinates
# mirror_y = false

# Omit descriptive comments from Excellon headers
# minimal_header = false

# Write plated and non-plated holes into one file
# merge_pth_npth = false

# Route oval holes as slots (false: one hit at the slot centre)
# route_oval_holes = true

# Drill map format: {map_names}
# map_format = "postscript"

# Coordinate origin: absolute, aux
# origin = "absolute"

# Output directory, relative to the board file
# output_dir = "."

# Gerber drill file decimal digits: 5 or 6
# gerber_precision = 6
"""
