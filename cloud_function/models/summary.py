from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from services.errors import InvalidRequestError

PROCESSING_OPENAI = "openai_api"
PROCESSING_FALLBACK = "fallback_template"


def _as_tuple(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _as_int(value, name: str) -> int:
    if value in (None, ""):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"Invalid request. {name} must be a number.")
    if number < 0:
        raise InvalidRequestError(f"Invalid request. {name} must not be negative.")
    return number


@dataclass(frozen=True)
class SummaryRequest:
    """Book metadata plus the language the summary should be written in."""
    title: str
    authors: Tuple[str, ...]
    isbn: str
    description: str = ""
    categories: Tuple[str, ...] = ()
    publisher: str = ""
    published_date: str = ""
    page_count: int = 0
    source_language: str = "en"
    target_language: str = "en"
    average_rating: float = 0.0
    ratings_count: int = 0

    @property
    def translation_applied(self) -> bool:
        return self.source_language != self.target_language

    @property
    def proper_names(self) -> Tuple[str, ...]:
        """Names that must appear in a summary exactly as given."""
        return (self.title, *self.authors, self.publisher)

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "SummaryRequest":
        """
        Builds a request from the camelCase JSON body.

        The book's own language travels as `language` on the wire;
        `sourceLanguage` is accepted as well.
        """
        if not isinstance(payload, dict):
            raise InvalidRequestError("Invalid request. Title and ISBN are required.")
        title = str(payload.get("title") or "").strip()
        isbn = str(payload.get("isbn") or "").strip()
        if not title or not isbn:
            raise InvalidRequestError("Invalid request. Title and ISBN are required.")

        source_language = payload.get("language") or payload.get("sourceLanguage") or "en"
        try:
            average_rating = float(payload.get("averageRating") or 0)
        except (TypeError, ValueError):
            average_rating = 0.0

        return cls(
            title=title,
            authors=_as_tuple(payload.get("authors")),
            isbn=isbn,
            description=payload.get("description") or "",
            categories=_as_tuple(payload.get("categories")),
            publisher=payload.get("publisher") or "",
            published_date=payload.get("publishedDate") or "",
            page_count=_as_int(payload.get("pageCount"), "pageCount"),
            source_language=source_language,
            target_language=payload.get("targetLanguage") or "en",
            average_rating=average_rating,
            ratings_count=_as_int(payload.get("ratingsCount"), "ratingsCount"),
        )


@dataclass(frozen=True)
class SourceAttribution:
    type: str
    content: str
    reliability: int
    relevance: int
    length: int
    source: str
    weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "content": self.content,
            "reliability": self.reliability,
            "relevance": self.relevance,
            "length": self.length,
            "source": self.source,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class ConfidenceGroup:
    score: int
    factors: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "factors", MappingProxyType(dict(self.factors)))

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "factors": dict(self.factors)}


@dataclass(frozen=True)
class DetailedConfidenceFactors:
    data_quality: ConfidenceGroup
    source_reliability: ConfidenceGroup
    content_coverage: ConfidenceGroup
    ai_processing: ConfidenceGroup
    cross_validation: ConfidenceGroup

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataQuality": self.data_quality.to_dict(),
            "sourceReliability": self.source_reliability.to_dict(),
            "contentCoverage": self.content_coverage.to_dict(),
            "aiProcessing": self.ai_processing.to_dict(),
            "crossValidation": self.cross_validation.to_dict(),
        }


@dataclass(frozen=True)
class SummaryDraft:
    """Generated or templated text before cleanup and scoring."""
    short_summary: str
    detailed_summary: str
    reasoning_factors: Tuple[str, ...]
    sources_used: Tuple[str, ...]
    provisional_confidence: int
    processing_method: str


@dataclass(frozen=True)
class AIBookSummary:
    short_summary: str
    detailed_summary: str
    confidence_score: int
    reasoning_factors: Tuple[str, ...]
    sources_used: Tuple[str, ...]
    source_attribution: Tuple[SourceAttribution, ...]
    detailed_confidence_factors: DetailedConfidenceFactors
    language: str
    generated_at: datetime
    processing_method: str
    translation_applied: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shortSummary": self.short_summary,
            "detailedSummary": self.detailed_summary,
            "confidenceScore": self.confidence_score,
            "reasoningFactors": list(self.reasoning_factors),
            "sourcesUsed": list(self.sources_used),
            "sourceAttribution": [s.to_dict() for s in self.source_attribution],
            "detailedConfidenceFactors": self.detailed_confidence_factors.to_dict(),
            "language": self.language,
            "generatedAt": self.generated_at.isoformat(),
            "processingMethod": self.processing_method,
            "translationApplied": self.translation_applied,
        }
