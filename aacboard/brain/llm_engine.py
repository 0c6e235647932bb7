"""
LLM Engine for the AAC board.
Bounded, single-shot completions over the Ollama HTTP API.

Every call carries an explicit output cap (num_predict) and temperature; the
client enforces the wall-clock timeout. There are no retries: callers decide
what a failure means (the arbiter reports ArbiterFailure, the conversation
fallback apologizes).
"""
import time
from typing import Any, Dict, Optional
from aacboard.core.logger import get_logger
from aacboard.core.config import Config
from aacboard.brain.ollama_client import OllamaClient


class LLMEngine:
    """Local LLM engine using Ollama"""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        model: str = "llama3.1:latest",
        timeout: int = 20,
        enabled: bool = True,
        llm_mode: str = "ollama",
        client: Optional[OllamaClient] = None
    ):
        """
        Initialize LLM engine

        Args:
            base_url: Ollama API base URL
            model: Model name to use
            timeout: Request timeout in seconds
            enabled: Whether LLM is enabled
            llm_mode: LLM backend mode ("ollama" or "off")
            client: Pre-built client (tests inject one)
        """
        self.logger = get_logger()
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.enabled = enabled
        self.llm_mode = llm_mode
        self.client: Optional[OllamaClient] = None

        if llm_mode == "off" or not enabled:
            self.enabled = False
            self.llm_mode = "off"
            self.logger.info("LLM disabled (grammar-only mode)")
            return

        self.client = client or OllamaClient(base_url=self.base_url, timeout=self.timeout)
        self.logger.info(f"LLM backend (Ollama): {self.model} @ {self.base_url}")

        # Verify connection; an unreachable server is not fatal, requests degrade per call
        try:
            ping_start = time.time()
            if self.client.ping():
                ping_ms = int((time.time() - ping_start) * 1000)
                self.logger.info(f"LLM backend reachable ({ping_ms}ms)")
            else:
                self.logger.warning(f"Ollama not reachable at {self.base_url}")
                self.logger.warning("Will attempt to connect on first request")
        except Exception as e:
            self.logger.warning(f"LLM connection check failed: {e}")
            self.logger.warning("Will attempt to connect on first request")

    @classmethod
    def from_config(cls, **overrides: Any) -> "LLMEngine":
        """
        Build an engine from Config / environment.

        Args:
            **overrides: base_url, model, timeout or llm_mode; None values
                         keep the configured setting
        """
        settings: Dict[str, Any] = {
            "base_url": Config.OLLAMA_BASE_URL,
            "model": Config.OLLAMA_MODEL,
            "timeout": Config.LLM_TIMEOUT,
            "llm_mode": Config.LLM_MODE,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        settings["llm_mode"] = str(settings["llm_mode"]).lower()
        settings["enabled"] = settings["llm_mode"] != "off"
        return cls(**settings)

    def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.7
    ) -> str:
        """
        Run one bounded completion.

        Args:
            prompt: Prompt text
            system: Optional system prompt
            max_tokens: Output cap (num_predict)
            temperature: Sampling temperature

        Returns:
            Completion text (stripped)

        Raises:
            ConnectionError: Backend disabled or unreachable
            ValueError: Model missing or reply unreadable
        """
        if not self.enabled or self.client is None:
            raise ConnectionError("LLM backend is disabled")

        options: Dict[str, Any] = {
            "temperature": self._safe_float(temperature, 0.7),
            "num_predict": self._safe_int(max_tokens, 150),
        }

        start_time = time.time()
        reply = self.client.generate(
            prompt=prompt,
            model=self.model,
            system=system,
            options=options
        ).strip()
        latency_ms = int((time.time() - start_time) * 1000)
        self.logger.debug(f"LLM response received in {latency_ms}ms ({len(reply)} chars)")
        return reply

    @staticmethod
    def _safe_float(value: Any, default: float) -> float:
        """Safely convert to float with fallback."""
        try:
            return float(value)
        except (ValueError, TypeError):
            return default

    @staticmethod
    def _safe_int(value: Any, default: int) -> int:
        """Safely convert to int with fallback."""
        try:
            return int(value)
        except (ValueError, TypeError):
            return default
