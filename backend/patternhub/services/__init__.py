from patternhub.services.code_generator import generate_code_snippet
from patternhub.services.recommendations import explain_pattern_choice, get_pattern_recommendations

__all__ = [
    "explain_pattern_choice",
    "generate_code_snippet",
    "get_pattern_recommendations",
]
