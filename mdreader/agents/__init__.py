"""
LLM-backed agents.

Uses LiteLLM for multi-provider support.
"""

from .translator import TranslationResult, Translator

__all__ = ["TranslationResult", "Translator"]
