"""
Language Guard - Replaces source-language words that leak into summaries.

A best-effort net over a fixed vocabulary, not a translator. Rules are
compiled once per language and applied in two ordered passes: phrase
patterns first, then single words. Each rule runs a single substitution
over the text, so replacements are never re-scanned by the same rule.
Literal names passed as `preserve` (titles, authors, publishers) are left
as written.
"""
import re
from typing import Dict, Iterable, List, Pattern, Tuple

from services.language_tables import GUARD_PHRASE_RULES, GUARD_WORD_RULES
from services.logging_service import get_logger

Rule = Tuple[Pattern, str]


def _compile_phrases(rules) -> List[Rule]:
    return [(re.compile(pattern, re.IGNORECASE), replacement) for pattern, replacement in rules]


def _compile_words(rules) -> List[Rule]:
    return [
        (re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE), replacement)
        for word, replacement in rules
    ]


class LanguageGuard:
    """Applies per-language substitution tables to generated text."""

    def __init__(self, phrase_rules=GUARD_PHRASE_RULES, word_rules=GUARD_WORD_RULES):
        self._phrases: Dict[str, List[Rule]] = {
            code: _compile_phrases(rules) for code, rules in phrase_rules.items()
        }
        self._words: Dict[str, List[Rule]] = {
            code: _compile_words(rules) for code, rules in word_rules.items()
        }

    def supports(self, target_language: str) -> bool:
        return target_language in self._phrases or target_language in self._words

    def clean(self, text: str, target_language: str, preserve: Iterable[str] = ()) -> str:
        """Returns `text` with the language's phrase and word rules applied."""
        if not text or not self.supports(target_language):
            return text or ""

        names = sorted({name for name in preserve if name and name.strip()}, key=lambda name: (-len(name), name))
        if not names:
            return self._apply(text, target_language)

        # Odd parts of the split are the preserved names themselves
        parts = re.split("(" + "|".join(re.escape(name) for name in names) + ")", text)
        return "".join(
            part if i % 2 else self._apply(part, target_language)
            for i, part in enumerate(parts)
        )

    def _apply(self, text: str, target_language: str) -> str:
        for pattern, replacement in self._phrases.get(target_language, []):
            text = pattern.sub(lambda _m, r=replacement: r, text)
        for pattern, replacement in self._words.get(target_language, []):
            text = pattern.sub(lambda _m, r=replacement: r, text)
        return text

    def clean_summary_fields(self, short_summary: str, detailed_summary: str,
                             target_language: str, preserve: Iterable[str] = ()) -> Tuple[str, str, bool]:
        """Cleans both summary texts and reports whether anything changed."""
        preserve = tuple(preserve)
        cleaned_short = self.clean(short_summary, target_language, preserve)
        cleaned_detailed = self.clean(detailed_summary, target_language, preserve)
        changed = cleaned_short != short_summary or cleaned_detailed != detailed_summary
        if changed:
            get_logger().warning("Language mixing detected and corrected",
                                 target_language=target_language)
        return cleaned_short, cleaned_detailed, changed
