import re
from typing import Dict, List, Optional

import requests

from patternhub.config import LLM_BASE_URL, LLM_MODEL, LLM_TIMEOUT, OPENAI_API_KEY
from patternhub.errors import LLMServiceError
from patternhub.llm.base import LLMClient


class ChatCompletionsClient(LLMClient):
    """Client for an OpenAI-compatible /chat/completions endpoint"""

    def __init__(
        self,
        base_url: str = LLM_BASE_URL,
        model: str = LLM_MODEL,
        api_key: str = OPENAI_API_KEY,
        temperature: float = 0.2,
        timeout: int = LLM_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(
        self,
        messages: List[Dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        url = f"{self.base_url}/chat/completions"

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            print(f"[LLM] Request to {url} failed: {e}")
            raise LLMServiceError(f"LLM request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            print(f"[LLM] Unexpected response shape from {url}: {e}")
            raise LLMServiceError("LLM returned an unexpected response") from e

        if not isinstance(content, str):
            return ""

        #  STRIP MARKDOWN FENCES
        content = re.sub(r"^```(?:json)?\s*", "", content.strip())
        content = re.sub(r"\s*```$", "", content.strip())

        return content


def get_llm_client() -> ChatCompletionsClient:
    return ChatCompletionsClient()
