"""Configuration models and validation using Pydantic."""
from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Dict, List, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = "configs/tapguard.yaml"


class ViewportConfig(BaseModel):
    """Reference viewport for the off-screen check, in points."""
    width: int = Field(default=430, ge=1, le=10000)
    height: int = Field(default=932, ge=1, le=10000)


class SuggestionConfig(BaseModel):
    """Suggestion ranking configuration."""
    max_suggestions: int = Field(default=5, ge=0, le=100)
    min_similarity: int = Field(default=30, ge=0, le=100)
    element_type_bonus: int = Field(default=15, ge=0, le=100)


class HittabilityConfig(BaseModel):
    """Hittability and obscuring-overlay heuristics."""
    overlay_types: List[str] = Field(
        default_factory=lambda: ["alert", "sheet", "popover", "dialog", "overlay", "modal"]
    )
    input_types: List[str] = Field(
        default_factory=lambda: ["textField", "secureTextField", "searchField", "textEditor", "textArea"]
    )
    obscuring_depth_base: int = Field(default=1000, ge=0)

    @field_validator("overlay_types", "input_types")
    @classmethod
    def lowercase_type_names(cls, v: List[str]) -> List[str]:
        """Type names are matched case-insensitively."""
        return [t.lower() for t in v if t]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    json_output: bool = Field(default=False)


class TapguardConfig(BaseModel):
    """Main configuration model for tapguard."""
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)
    hittability: HittabilityConfig = Field(default_factory=HittabilityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> TapguardConfig:
        """
        Load a config file; anything unusable yields the defaults.

        A missing or empty file is silent. A file that cannot be read,
        parsed or validated falls back too, but with a UserWarning.
        """
        if not config_path.exists():
            return cls()
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
            return cls(**data) if data else cls()
        except (OSError, yaml.YAMLError) as e:
            problem = f"Failed to load config file {config_path}: {e}"
        except (TypeError, ValidationError) as e:
            problem = f"Config validation failed for {config_path}: {e}"
        warnings.warn(f"{problem}. Using defaults.", stacklevel=2)
        return cls()

    @classmethod
    def from_env(cls) -> TapguardConfig:
        return cls.from_yaml(Path(os.getenv("TAPGUARD_CONFIG", DEFAULT_CONFIG_PATH)))

    def to_dict(self) -> Dict:
        """Convert config to dictionary."""
        return self.model_dump(exclude_none=True)


DEFAULT_CONFIG = TapguardConfig()
