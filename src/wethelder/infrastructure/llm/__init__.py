"""LLM client infrastructure."""

from .client import LLMClient

__all__ = ["LLMClient"]
