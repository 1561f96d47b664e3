"""Configuration schema for take averaging.

Defines Pydantic models for loading and validating configuration from YAML
files and environment variables.
"""

import os
from pathlib import Path
from typing import Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationInfo, field_validator


class AveragingConfig(BaseModel):
    """Averaging pipeline configuration."""

    normalize: bool = Field(default=True, description="Equalize loudness before averaging")
    target_length: int | None = Field(
        default=None,
        ge=1,
        description="Frames in the averaged output (overrides length_policy)",
    )
    length_policy: Literal["shortest", "longest"] = Field(
        default="shortest",
        description="Common length when target_length is unset",
    )

    def resolve_length(self, lengths: list[int]) -> int:
        """Pick the common frame count for takes of ``lengths`` frames."""
        if self.target_length is not None:
            return self.target_length
        if self.length_policy == "longest":
            return max(lengths)
        return min(lengths)


class DecodingConfig(BaseModel):
    """Input decoding configuration."""

    sample_rate: int | None = Field(
        default=None,
        ge=8000,
        description="Required sample rate of decoded takes (None: match the first take)",
    )


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """How the ``take-average`` command reports progress.

    ``level`` and ``format`` are matched case-insensitively so values such
    as ``TAKE_AVERAGE_LOG_LEVEL=debug`` work without shouting.
    """

    level: LogLevel = Field(default="INFO", description="Root logger threshold")
    format: Literal["json", "text"] = Field(
        default="text",
        description="text for terminals, json for one record per line",
    )

    @field_validator("level", "format", mode="before")
    @classmethod
    def fold_case(cls, v: object, info: ValidationInfo) -> object:
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == "level" else v.lower()

    @property
    def use_json(self) -> bool:
        return self.format == "json"


class TakeAverageConfig(BaseModel):
    """Root configuration.

    Example:
        >>> config = TakeAverageConfig.from_yaml(Path("configs/take_average.yaml"))
        >>> config.averaging.normalize
        True
    """

    averaging: AveragingConfig = Field(default_factory=AveragingConfig)
    decoding: DecodingConfig = Field(default_factory=DecodingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "TakeAverageConfig":
        """Load configuration from YAML file with environment variable overrides.

        Args:
            path: Path to YAML configuration file

        Returns:
            Loaded configuration

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration root must be a mapping, got {type(data).__name__}: {path}"
            )

        if normalize := os.getenv("TAKE_AVERAGE_NORMALIZE"):
            data.setdefault("averaging", {})["normalize"] = normalize.lower() in (
                "true",
                "1",
                "yes",
            )

        if target_length := os.getenv("TAKE_AVERAGE_TARGET_LENGTH"):
            data.setdefault("averaging", {})["target_length"] = target_length

        if log_level := os.getenv("TAKE_AVERAGE_LOG_LEVEL"):
            data.setdefault("logging", {})["level"] = log_level

        return cls.model_validate(data)

    @classmethod
    def from_yaml_with_defaults(cls, path: Path | None = None) -> "TakeAverageConfig":
        """Load configuration from YAML or use defaults if file doesn't exist.

        Args:
            path: Optional path to YAML configuration file

        Returns:
            Loaded configuration or defaults
        """
        if path is not None and path.exists():
            return cls.from_yaml(path)

        return cls()
