"""
Application settings schema and font-size rules.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..config import DEFAULT_TARGET_LANGUAGE, TranslationConfig

DEFAULT_FONT_SIZE = 16
MIN_FONT_SIZE = 10
MAX_FONT_SIZE = 32
FONT_SIZE_STEP = 2


def validate_font_size(size: int) -> int:
    """Clamp a font size to [MIN_FONT_SIZE, MAX_FONT_SIZE]."""
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


def increment_font_size(size: int) -> int:
    return validate_font_size(size + FONT_SIZE_STEP)


def decrement_font_size(size: int) -> int:
    return validate_font_size(size - FONT_SIZE_STEP)


def parse_font_size(text: str) -> Optional[int]:
    """
    Parse a font size typed by the user.

    Returns:
        Clamped size, or None if the text is not an integer
    """
    try:
        return validate_font_size(int(text.strip()))
    except ValueError:
        return None


def is_valid_font_size(size: int) -> bool:
    return MIN_FONT_SIZE <= size <= MAX_FONT_SIZE


def font_size_error_message(size: Optional[int]) -> str:
    """User-facing message for a rejected font size."""
    if size is None:
        return f"Please enter a valid number between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}"
    if size < MIN_FONT_SIZE:
        return f"Font size must be at least {MIN_FONT_SIZE}"
    if size > MAX_FONT_SIZE:
        return f"Font size must be at most {MAX_FONT_SIZE}"
    return f"Font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}"


class AppSettings(BaseModel):
    """
    User settings persisted across sessions.

    Stored as camelCase JSON (``fontSize``, ``isDarkMode``, ...), the layout
    earlier versions wrote; snake_case names are accepted too. Unknown fields
    from older or newer versions are ignored on load.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    font_size: int = DEFAULT_FONT_SIZE
    is_dark_mode: bool = False
    docs_path: str = ""
    llm_api_url: str = ""
    llm_api_key: str = ""
    llm_model: str = ""
    target_language: str = ""
    translation_enabled: bool = True

    @field_validator("font_size")
    @classmethod
    def _clamp_font_size(cls, v: int) -> int:
        return validate_font_size(v)

    def translation_config(self, base: Optional[TranslationConfig] = None) -> TranslationConfig:
        """
        Build the translation config, letting user settings override ``base``.

        Empty settings fields keep the base value.
        """
        base = base or TranslationConfig()
        return TranslationConfig(
            api_url=self.llm_api_url or base.api_url,
            api_key=self.llm_api_key or base.api_key,
            model=self.llm_model or base.model,
            target_language=self.target_language or base.target_language or DEFAULT_TARGET_LANGUAGE,
            enabled=self.translation_enabled and base.enabled,
            timeout_s=base.timeout_s,
            temperature=base.temperature,
        )
