from patternhub.catalog.records import PatternRecord
from patternhub.llm.base import LLMClient
from patternhub.llm.parser import parse_generated_code
from patternhub.llm.prompts import CODE_SYSTEM_PROMPT, CODE_USER_PROMPT
from patternhub.schemas import GeneratedCode


CODE_TEMPERATURE = 0.7
CODE_MAX_TOKENS = 2000


def generate_code_snippet(
    pattern: PatternRecord,
    language: str,
    context: str,
    client: LLMClient,
) -> GeneratedCode:
    """Generate a context-specific example of a pattern in the given language"""
    messages = [
        {"role": "system", "content": CODE_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": CODE_USER_PROMPT.format(
                name=pattern.name,
                language=language,
                context=context,
                description=pattern.description,
            ),
        },
    ]

    raw = client.generate(
        messages,
        temperature=CODE_TEMPERATURE,
        max_tokens=CODE_MAX_TOKENS,
        json_mode=True,
    )
    print(f"[CODEGEN] Generated {language} snippet for '{pattern.slug}'")
    return parse_generated_code(raw)
