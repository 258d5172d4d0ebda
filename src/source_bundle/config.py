"""Bundle configuration helpers."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

import yaml

from .constants import (
    CONFIG_FILE,
    DEFAULT_JSON_OUTPUT,
    DEFAULT_TS_OUTPUT,
    IMAGE_EXTENSIONS,
    INCLUDE_FILES,
    OUTPUT_FORMATS,
    PRIVATE_FILES,
    SNAPSHOT_FILE,
    TEXT_EXTENSIONS,
)
from .errors import ConfigError


@dataclass
class BundleSettings:
    """Settings controlling which files are bundled and where output goes."""

    output: Optional[str] = None
    format: str = "ts"  # "ts" or "json"
    snapshot_file: str = SNAPSHOT_FILE
    text_extensions: List[str] = field(default_factory=lambda: list(TEXT_EXTENSIONS))
    image_extensions: List[str] = field(default_factory=lambda: list(IMAGE_EXTENSIONS))
    include_files: List[str] = field(default_factory=lambda: list(INCLUDE_FILES))
    private_files: List[str] = field(default_factory=lambda: list(PRIVATE_FILES))
    exclude: List[str] = field(default_factory=list)
    max_workers: int = 4

    def __post_init__(self):
        if self.format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown output format '{self.format}'. "
                f"Choose one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        self.text_extensions = [_normalize_ext(e) for e in self.text_extensions]
        self.image_extensions = [_normalize_ext(e) for e in self.image_extensions]

    @property
    def output_path(self) -> str:
        """Configured output path, or the default for the format."""
        if self.output:
            return self.output
        return DEFAULT_TS_OUTPUT if self.format == "ts" else DEFAULT_JSON_OUTPUT

    def with_overrides(self, **overrides) -> "BundleSettings":
        """Copy with non-None overrides applied (CLI options win over the file)."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def load_bundle_config(root: Path) -> BundleSettings:
    """Load settings from .source-bundle.yaml if present.

    Raises:
        ConfigError: If the file exists but cannot be parsed or holds invalid values
    """
    cfg_path = root / CONFIG_FILE
    if not cfg_path.exists():
        return BundleSettings()

    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping, got {type(data).__name__}")

    known = set(BundleSettings.__dataclass_fields__)
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in {cfg_path}: {', '.join(unknown)}")

    try:
        return BundleSettings(**data)
    except TypeError as e:
        raise ConfigError(f"Invalid value in {cfg_path}: {e}") from e
