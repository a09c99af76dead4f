"""Configuration management for hedgehog using Pydantic models."""

import json
import sys
import tempfile
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".hedgehog.json"


class Engine(str, Enum):
    """Analysis engines understood by the backend."""
    SYN = "syn"
    SCIP = "scip"


class StoreKind(str, Enum):
    """Backend symbol store kinds."""
    MEM = "mem"
    DISK = "disk"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


def _default_search_paths() -> list[str]:
    return [
        str(Path(sys.executable).parent),
        str(Path("target") / "release"),
    ]


def _default_output() -> str:
    return str(Path(tempfile.gettempdir()) / "mr_hedgehog_output.dot")


class BackendConfig(BaseModel):
    """External analyzer configuration section."""
    executable: str | None = None
    binary_name: str = Field(alias="binaryName", default="mr_hedgehog")
    search_paths: list[str] = Field(alias="searchPaths", default_factory=_default_search_paths)
    output: str = Field(default_factory=_default_output)
    engine: Engine = Engine.SYN
    format: str = "dot"
    expand_paths: bool = Field(alias="expandPaths", default=False)
    debug: bool = False
    store: StoreKind | None = None

    @field_validator("binary_name")
    @classmethod
    def validate_binary_name(cls, v):
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"binaryName must be a bare file name, got: {v!r}")
        return v

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class LayoutConfig(BaseModel):
    """Grid layout and node geometry section."""
    columns: int = 5
    column_spacing: float = Field(alias="columnSpacing", default=200.0)
    row_spacing: float = Field(alias="rowSpacing", default=120.0)
    node_width: float = Field(alias="nodeWidth", default=150.0)
    node_height: float = Field(alias="nodeHeight", default=50.0)
    arrow_size: float = Field(alias="arrowSize", default=10.0)

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v):
        if v < 1:
            raise ValueError("columns must be >= 1")
        return v

    @field_validator("node_width", "node_height", "arrow_size")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("node and arrow dimensions must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True)


class ViewportConfig(BaseModel):
    """Viewport sizing and navigation section."""
    width: float = 1200.0
    height: float = 800.0
    padding: float = 50.0
    fit_margin: float = Field(alias="fitMargin", default=0.9)
    zoom_step: float = Field(alias="zoomStep", default=1.1)
    grid_size: float = Field(alias="gridSize", default=50.0)

    @field_validator("width", "height", "grid_size")
    @classmethod
    def validate_extent(cls, v):
        if v <= 0:
            raise ValueError("viewport extents must be > 0")
        return v

    @field_validator("fit_margin")
    @classmethod
    def validate_fit_margin(cls, v):
        if not (0 < v <= 1):
            raise ValueError(f"fitMargin must be in (0, 1], got: {v}")
        return v

    @field_validator("zoom_step")
    @classmethod
    def validate_zoom_step(cls, v):
        if v <= 1:
            raise ValueError(f"zoomStep must be > 1, got: {v}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class HedgehogConfig(BaseModel):
    """Complete hedgehog configuration model."""
    backend: BackendConfig = Field(default_factory=BackendConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> HedgehogConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .hedgehog.json

    Returns:
        HedgehogConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return HedgehogConfig.model_validate(config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except ValidationError as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
        except OSError as e:
            raise ValueError(f"Cannot read config file {config_path}: {e}")
    return HedgehogConfig()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .hedgehog.json by searching up the directory tree."""
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None
