"""Anthropic-to-OpenAI format bridge for OpenRouter."""

__version__ = "0.1.0"
