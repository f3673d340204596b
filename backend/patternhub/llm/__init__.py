from patternhub.llm.base import LLMClient
from patternhub.llm.client import ChatCompletionsClient, get_llm_client
from patternhub.llm.parser import parse_generated_code, parse_recommendations, safe_load_json

__all__ = [
    "LLMClient",
    "ChatCompletionsClient",
    "get_llm_client",
    "parse_generated_code",
    "parse_recommendations",
    "safe_load_json",
]
