"""
Reader configuration.

Values come from dataclass defaults, an optional YAML file and the
environment (``.env`` in the project root is loaded first).

Example YAML::

    reader:
      target_segment_size: 25000
      window_size: 3
    translation:
      model: gpt-4o-mini
      target_language: German
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
load_dotenv(_env_path)


DEFAULT_TARGET_LANGUAGE = "Spanish"

ENV_OVERRIDES = {
    "MDREADER_LLM_API_URL": "api_url",
    "MDREADER_LLM_API_KEY": "api_key",
    "MDREADER_LLM_MODEL": "model",
    "MDREADER_TARGET_LANGUAGE": "target_language",
}


@dataclass(frozen=True)
class ReaderConfig:
    """Reading session configuration."""

    # Chunking
    target_segment_size: int = 25000
    heading_split_ratio: float = 0.8
    force_split_ratio: float = 1.5

    # Window
    window_size: int = 3
    debounce_interval_ms: int = 2000
    load_cooldown_ms: int = 500

    # Position tracking
    autosave_interval_ms: int = 3000
    viewport_heading_fraction: float = 0.3

    # Scroll triggers (fraction of the loaded window)
    near_top_threshold: float = 0.10
    near_bottom_threshold: float = 0.90

    # Where to land inside the new window after a jump
    jump_backward_fraction: float = 0.28
    jump_forward_fraction: float = 0.52

    def __post_init__(self) -> None:
        if self.target_segment_size <= 0:
            raise ValueError("target_segment_size must be positive")
        if self.window_size < 1:
            raise ValueError("window_size must be at least 1")
        if not 0 < self.heading_split_ratio <= self.force_split_ratio:
            raise ValueError("heading_split_ratio must be in (0, force_split_ratio]")
        if not 0 <= self.near_top_threshold < self.near_bottom_threshold <= 1:
            raise ValueError("scroll thresholds must satisfy 0 <= top < bottom <= 1")


@dataclass(frozen=True)
class TranslationConfig:
    """Settings for the translation endpoint (OpenAI-compatible)."""

    api_url: str = ""
    api_key: str = ""
    model: str = ""
    target_language: str = DEFAULT_TARGET_LANGUAGE
    enabled: bool = True
    timeout_s: float = 10.0
    temperature: float = 0.3

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url.strip() and self.api_key.strip() and self.model.strip())


def _build(cls: type, section: Optional[dict[str, Any]], name: str) -> Any:
    section = section or {}
    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown {name} config keys: {', '.join(sorted(unknown))}")
    return cls(**section)


def load_config(path: Optional[Path] = None) -> tuple[ReaderConfig, TranslationConfig]:
    """
    Load reader and translation configuration.

    Args:
        path: Optional YAML file with ``reader`` and ``translation`` sections

    Returns:
        Tuple of (ReaderConfig, TranslationConfig)
    """
    data: dict[str, Any] = {}
    if path is not None:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    reader = _build(ReaderConfig, data.get("reader"), "reader")
    translation = _build(TranslationConfig, data.get("translation"), "translation")

    overrides = {
        attr: os.environ[var]
        for var, attr in ENV_OVERRIDES.items()
        if os.environ.get(var)
    }
    if overrides:
        translation = replace(translation, **overrides)

    return reader, translation
