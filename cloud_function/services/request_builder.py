"""
Request Builder - Turns a SummaryRequest into chat-completion parameters.

Pure and deterministic: the same request and model always produce the
same messages and generation settings.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from models.summary import SummaryRequest
from services.language_tables import MANDATORY_VOCABULARY, language_name

SHORT_BUDGET = (250, 300)
DETAILED_BUDGET = (800, 1000)

MAX_TOKENS_SAME_LANGUAGE = 400
MAX_TOKENS_CROSS_LANGUAGE = 500
TEMPERATURE = 0.3

# Description excerpt included in the prompt
PROMPT_DESCRIPTION_CHARS = 150


@dataclass(frozen=True)
class InvocationParams:
    target_language_name: str
    needs_translation: bool
    budget_instruction: str
    vocabulary_hints: Tuple[Tuple[str, str], ...]
    model: str
    messages: Tuple[Dict[str, str], ...]
    max_tokens: int
    temperature: float

    def to_completion_kwargs(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [dict(m) for m in self.messages],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }


def budget_instruction() -> str:
    return (
        f"shortSummary must be {SHORT_BUDGET[0]}-{SHORT_BUDGET[1]} characters; "
        f"detailedSummary must be {DETAILED_BUDGET[0]}-{DETAILED_BUDGET[1]} characters."
    )


def _vocabulary_block(language: str, hints) -> str:
    if not hints:
        return ""
    lines = [f'- Use "{use}" NOT "{avoid}"' for use, avoid in hints]
    return (
        f"MANDATORY {language.upper()} WORDS:\n"
        + "\n".join(lines)
        + f"\n\nTRANSLATE EVERYTHING TO {language.upper()}.\n"
    )


def _build_prompt(request: SummaryRequest, language: str, needs_translation: bool,
                  hints) -> str:
    authors = ", ".join(request.authors)
    description = (request.description or "")[:PROMPT_DESCRIPTION_CHARS]
    response_shape = f"""{{
  "shortSummary": "{SHORT_BUDGET[0]}-{SHORT_BUDGET[1]} characters in {language}",
  "detailedSummary": "{DETAILED_BUDGET[0]}-{DETAILED_BUDGET[1]} characters in {language}",
  "confidenceScore": 85,
  "reasoningFactors": ["factor1", "factor2"],
  "sourcesUsed": ["source1", "source2"]
}}"""

    if needs_translation:
        return f"""TRANSLATE AND SUMMARIZE: Create a book summary in pure {language} from a book originally in {request.source_language}.

CRITICAL: Write EVERYTHING in {language}. This is a TRANSLATION task.

Book: "{request.title}" by {authors}
Original Language: {request.source_language}
Target Language: {language}
Description: "{description}"

{_vocabulary_block(language, hints)}
{budget_instruction()}
Keep the book title and author names as in the original.

Return JSON in pure {language}:
{response_shape}"""

    return f"""Create a book summary in {language}.

Book: "{request.title}" by {authors}
Description: "{description}"

{budget_instruction()}

Return JSON in {language}:
{response_shape}"""


def build_invocation(request: SummaryRequest, model: str) -> InvocationParams:
    """Resolves language, budget and vocabulary hints into call parameters."""
    language = language_name(request.target_language)
    needs_translation = request.translation_applied
    hints = MANDATORY_VOCABULARY.get(request.target_language, ()) if needs_translation else ()

    messages: List[Dict[str, str]] = [
        {
            "role": "system",
            "content": (
                f"You are a professional book summarizer. Your response must be "
                f"entirely in {language} and must be a single JSON object."
            ),
        },
        {"role": "user", "content": _build_prompt(request, language, needs_translation, hints)},
    ]

    return InvocationParams(
        target_language_name=language,
        needs_translation=needs_translation,
        budget_instruction=budget_instruction(),
        vocabulary_hints=tuple(hints),
        model=model,
        messages=tuple(messages),
        max_tokens=MAX_TOKENS_CROSS_LANGUAGE if needs_translation else MAX_TOKENS_SAME_LANGUAGE,
        temperature=TEMPERATURE,
    )
