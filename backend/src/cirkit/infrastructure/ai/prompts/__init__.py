"""Versioned AI prompts.

Prompts are versioned as code so the answer format the chat client parses
can be tracked alongside the parser.
"""

from cirkit.infrastructure.ai.prompts.recommendation_v1 import RecommendationPromptV1

__all__ = ["RecommendationPromptV1"]
