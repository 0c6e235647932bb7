"""
HTTP client for the Ollama API.
Handles all communication with the local Ollama instance used by the
arbiter and the conversational fallback.
"""
import json
import time
import urllib.request
import urllib.error
from typing import Dict, Any, Optional
from aacboard.core.logger import get_logger


class OllamaClient:
    """Client for Ollama /api/generate with connection reuse."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        timeout: int = 20
    ):
        """
        Initialize Ollama HTTP client.

        Args:
            base_url: Ollama API base URL (e.g., http://127.0.0.1:11434)
            timeout: Wall-clock bound for a single request in seconds
        """
        self.logger = get_logger()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.opener = urllib.request.build_opener(
            urllib.request.HTTPHandler(debuglevel=0),
            urllib.request.HTTPSHandler(debuglevel=0)
        )

    def ping(self) -> bool:
        """
        Check if Ollama server is running and accessible.

        Returns:
            True if Ollama is reachable, False otherwise
        """
        try:
            start_time = time.time()
            req = urllib.request.Request(f"{self.base_url}/api/tags", method="GET")
            with self.opener.open(req, timeout=5) as response:
                data = json.loads(response.read().decode('utf-8'))
                models = [m.get("name", "") for m in data.get("models", [])]
                elapsed_ms = int((time.time() - start_time) * 1000)
                self.logger.debug(f"Ollama ping successful ({elapsed_ms}ms). Available models: {models}")
                return True
        except (urllib.error.URLError, OSError, ValueError) as e:
            self.logger.debug(f"Ollama ping failed: {e}")
            return False

    def generate(
        self,
        prompt: str,
        model: str,
        system: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Generate text from Ollama (non-streaming).

        Args:
            prompt: Input prompt text
            model: Model name to use
            system: Optional system prompt
            options: Generation options (temperature, num_predict, ...)

        Returns:
            Generated text response

        Raises:
            ConnectionError: If cannot reach Ollama
            ValueError: If response is invalid or model not found
        """
        if options is None:
            options = {}

        start_time = time.time()

        payload: Dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": options
        }
        if system:
            payload["system"] = system

        req = urllib.request.Request(
            f"{self.base_url}/api/generate",
            data=json.dumps(payload).encode('utf-8'),
            headers={
                'Content-Type': 'application/json',
                'Connection': 'keep-alive'
            },
            method="POST"
        )

        self.logger.debug(f"Generating ({model}, num_predict={options.get('num_predict')})")

        try:
            with self.opener.open(req, timeout=self.timeout) as response:
                raw = response.read().decode('utf-8')

        except urllib.error.HTTPError as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            error_body = ""
            try:
                error_body = e.read().decode('utf-8')
            except Exception:
                error_body = ""

            self.logger.error(f"HTTP {e.code} from Ollama after {elapsed_ms}ms: {error_body}")

            if e.code == 404 or "model" in error_body.lower():
                raise ValueError(f"Model '{model}' not found. Try: ollama pull {model}") from e

            raise ConnectionError(f"Ollama HTTP error: {e.code}") from e

        except urllib.error.URLError as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            self.logger.error(f"Connection error after {elapsed_ms}ms: {e}")

            if "Connection refused" in str(e):
                raise ConnectionError(f"Cannot reach Ollama at {self.base_url}. Try: ollama serve") from e
            raise ConnectionError(f"Network error: {e}") from e

        except (TimeoutError, OSError) as e:
            raise ConnectionError(f"Ollama request failed: {e}") from e

        try:
            response_data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON from Ollama: {e}") from e

        if not isinstance(response_data, dict):
            raise ValueError("Unexpected response shape from Ollama")

        elapsed_ms = int((time.time() - start_time) * 1000)
        prompt_tokens = response_data.get("prompt_eval_count", 0)
        eval_tokens = response_data.get("eval_count", 0)
        self.logger.debug(f"Generation completed in {elapsed_ms}ms (prompt_tokens={prompt_tokens}, eval_tokens={eval_tokens})")

        return str(response_data.get("response", "")).strip()
