"""
Brain module for the AAC board.
Local LLM integration via Ollama: the delete/update arbiter and the
conversational fallback.
"""
from aacboard.brain.llm_engine import LLMEngine
from aacboard.brain.arbiter import Arbiter, ArbiterFailure, ArbiterMatch
from aacboard.brain.conversation import ConversationResponder

__all__ = [
    "LLMEngine",
    "Arbiter",
    "ArbiterFailure",
    "ArbiterMatch",
    "ConversationResponder",
]
