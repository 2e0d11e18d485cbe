"""Model adapter layer - one client per generative AI provider."""

from resume_scan.adapters.llm.base import AbstractLLMClient, classify_status
from resume_scan.adapters.llm.factory import create_llm_client
from resume_scan.adapters.llm.gemini_client import GeminiClient
from resume_scan.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "GeminiClient",
    "OpenAIClient",
    "classify_status",
    "create_llm_client",
]
