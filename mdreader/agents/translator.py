"""
Translation of selected text through an LLM.

Supports any OpenAI-compatible chat completions endpoint through LiteLLM.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm

from ..config import DEFAULT_TARGET_LANGUAGE, TranslationConfig
from ..errors import TranslationConfigError

logger = logging.getLogger(__name__)

COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass
class TranslationResult:
    """Result of a translation request."""

    success: bool
    translation: str = ""
    explanation: str = ""
    errors: list[str] = field(default_factory=list)
    metrics: dict = field(default_factory=dict)


class Translator:
    """
    Translate words and passages the reader selects.

    The model is asked for a JSON object with ``translation`` and
    ``explanation``; prose around the object is tolerated.
    """

    def __init__(self, config: TranslationConfig, **kwargs: Any) -> None:
        """
        Initialize translator.

        Args:
            config: Endpoint, credentials, model and target language
            **kwargs: Additional arguments for litellm.completion
        """
        self.config = config
        self.extra_params = kwargs

    def get_system_prompt(self) -> str:
        return (
            "You are a translation assistant for a document reader. "
            "Reply with a single JSON object with keys \"translation\" and "
            "\"explanation\" and nothing else."
        )

    def format_input(self, text: str, context: Optional[str] = None) -> str:
        language = self.config.target_language.strip() or DEFAULT_TARGET_LANGUAGE
        prompt = (
            f'Translate "{text}" to {language} and give a brief explanation '
            f"in {language}."
        )
        if context:
            prompt += f' Context: "{context}".'
        return prompt

    def parse_output(self, response: str) -> tuple[str, str]:
        """
        Extract translation and explanation from the model reply.

        A reply without a JSON object is taken as the translation itself.
        """
        start = response.find("{")
        end = response.rfind("}") + 1
        if start != -1 and end > start:
            try:
                data = json.loads(response[start:end])
            except json.JSONDecodeError:
                data = None
            if isinstance(data, dict):
                return (
                    str(data.get("translation") or "Translation not available"),
                    str(data.get("explanation") or "Explanation not available"),
                )
        return response.strip() or "Translation not available", ""

    def translate(self, text: str, context: Optional[str] = None) -> TranslationResult:
        """
        Translate ``text``.

        Never raises: configuration and API failures come back as a failed
        result with the error message (credentials are never included).

        Args:
            text: Selected text
            context: Optional surrounding text

        Returns:
            TranslationResult
        """
        try:
            self._check_config()

            messages = [
                {"role": "system", "content": self.get_system_prompt()},
                {"role": "user", "content": self.format_input(text, context)},
            ]

            response = litellm.completion(
                model=self.config.model.strip(),
                messages=messages,
                api_base=_api_base(self.config.api_url),
                api_key=self.config.api_key.strip(),
                custom_llm_provider="openai",
                temperature=self.config.temperature,
                timeout=self.config.timeout_s,
                **self.extra_params,
            )

            translation, explanation = self.parse_output(
                response.choices[0].message.content or ""
            )

            return TranslationResult(
                success=True,
                translation=translation,
                explanation=explanation,
                metrics={
                    "input_tokens": response.usage.prompt_tokens,
                    "output_tokens": response.usage.completion_tokens,
                    "model": response.model,
                },
            )

        except Exception as e:
            logger.error(f"Translation failed: {e}")
            return TranslationResult(
                success=False,
                translation="Error",
                explanation=f"Translation failed: {e}. Please check your API settings.",
                errors=[str(e)],
            )

    def _check_config(self) -> None:
        if not self.config.enabled:
            raise TranslationConfigError("Translation is disabled in settings")
        if not self.config.is_configured:
            raise TranslationConfigError(
                "LLM API URL, Key, and Model must be configured in settings"
            )


def _api_base(url: str) -> str:
    """Accept either a base URL or a full chat completions URL."""
    base = url.strip().rstrip("/")
    if base.endswith(COMPLETIONS_SUFFIX):
        base = base[: -len(COMPLETIONS_SUFFIX)]
    return base
