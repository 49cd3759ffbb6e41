import logging
import os
import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Summarizer generation options (from .env) ──
OLLAMA_TEMPERATURE = float(os.getenv("OLLAMA_TEMPERATURE", "0.2"))
OLLAMA_TOP_P = float(os.getenv("OLLAMA_TOP_P", "0.9"))
OLLAMA_NUM_PREDICT = int(os.getenv("OLLAMA_NUM_PREDICT", "2048"))
OLLAMA_SEED = int(os.getenv("OLLAMA_SEED", "42"))


class OllamaClient:
    """Chat client for the optional benchmark summary; one blocking request per call."""

    def __init__(self, model: str, base_url: str = None, timeout: int = None):
        self.model = model
        self.base_url = (base_url or os.getenv("OLLAMA_BASE_URL", "http://127.0.0.1:11434")).rstrip("/")
        self.timeout = timeout or int(os.getenv("OLLAMA_TIMEOUT", "120"))

    def _chat_payload(self, system: str, user: str) -> dict:
        # format:"json" is not requested: reasoning models wrap their answer
        # in <think> blocks, which the analyzer strips before parsing.
        return {
            "model": self.model,
            "stream": False,
            "options": {
                "temperature": OLLAMA_TEMPERATURE,
                "top_p": OLLAMA_TOP_P,
                "num_predict": OLLAMA_NUM_PREDICT,
                "seed": OLLAMA_SEED,
            },
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }

    def complete_json(self, system: str, user: str) -> str:
        """
        Send the summary prompt and return the raw reply text.
        Raises requests errors on transport/HTTP failure and ValueError on an
        empty reply; the analyzer turns either into its fallback summary.
        """
        logger.debug("Requesting summary from %s (%s, %d prompt chars)", self.base_url, self.model, len(user))
        r = requests.post(f"{self.base_url}/api/chat", json=self._chat_payload(system, user), timeout=self.timeout)
        r.raise_for_status()
        body = r.json()
        if body.get("done_reason") == "length":
            logger.warning("Summary from %s was cut off at %d tokens", self.model, OLLAMA_NUM_PREDICT)
        content = (body.get("message") or {}).get("content") or ""
        if not content.strip():
            raise ValueError(f"{self.model} returned an empty reply")
        return content
