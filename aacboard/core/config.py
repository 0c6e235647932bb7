"""
Configuration module for the AAC board command engine.
Centralizes all settings with environment variable overrides.
"""
import os


class Config:
    """Central configuration for the command engine"""

    # LLM backend settings (arbiter + conversation fallback)
    LLM_MODE: str = os.environ.get("AAC_LLM_MODE", "ollama")  # "ollama" or "off"
    OLLAMA_BASE_URL: str = os.environ.get("AAC_OLLAMA_URL", "http://127.0.0.1:11434")
    OLLAMA_MODEL: str = os.environ.get("AAC_OLLAMA_MODEL", "llama3.1:latest")
    # Wall-clock bound for a single completion request (seconds)
    LLM_TIMEOUT: int = int(os.environ.get("AAC_LLM_TIMEOUT", "20"))

    # Arbiter: small output cap, near-deterministic sampling
    ARBITER_MAX_TOKENS: int = int(os.environ.get("AAC_ARBITER_MAX_TOKENS", "300"))
    ARBITER_TEMPERATURE: float = float(os.environ.get("AAC_ARBITER_TEMPERATURE", "0.1"))

    # Open-ended conversation fallback
    CHAT_MAX_TOKENS: int = int(os.environ.get("AAC_CHAT_MAX_TOKENS", "150"))
    CHAT_TEMPERATURE: float = float(os.environ.get("AAC_CHAT_TEMPERATURE", "0.7"))

    # Only the most recent turns are scanned for coreference
    HISTORY_TURNS: int = int(os.environ.get("AAC_HISTORY_TURNS", "10"))

    # Logging
    LOG_LEVEL: str = os.environ.get("AAC_LOG_LEVEL", "INFO")

    # Quiet Mode - hides per-request routing chatter
    QUIET_MODE: bool = os.environ.get("AAC_QUIET_MODE", "false").lower() in ("true", "1", "yes")

    @classmethod
    def llm_enabled(cls) -> bool:
        """True when a completion backend should be constructed"""
        return cls.LLM_MODE.lower() != "off"
