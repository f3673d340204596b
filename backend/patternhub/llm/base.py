from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class LLMClient(ABC):
    @abstractmethod
    def generate(
        self,
        messages: List[Dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Generate assistant text from chat messages"""
        pass
