"""
Confidence Scorer - Deterministic, auditable confidence for a summary.

The overall score is a fixed weighted sum of five group scores, each of
which is derived from the request metadata and two processing flags:
whether the fallback templates were used and whether the summary
language differs from the book's language. Nothing here is learned.

Source attribution weights are informational and do not feed the score.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from models.summary import (
    ConfidenceGroup,
    DetailedConfidenceFactors,
    SourceAttribution,
    SummaryRequest,
)
from services.truncation import truncate

UNKNOWN_PUBLISHER = "Unknown Publisher"
UNKNOWN_AUTHOR = "Unknown Author"

TRANSLATION_PENALTY = 10

GROUP_WEIGHTS = {
    "data_quality": 0.25,
    "source_reliability": 0.25,
    "content_coverage": 0.2,
    "ai_processing": 0.15,
    "cross_validation": 0.15,
}

# (uses_fallback, translation_applied) ->
# (languageConsistency, translationQuality, summarizationAccuracy, responseCoherence)
AI_PROCESSING_CONSTANTS: Dict[Tuple[bool, bool], Tuple[int, int, int, int]] = {
    (False, False): (95, 100, 90, 95),
    (False, True): (75, 80, 85, 90),
    (True, False): (95, 100, 80, 85),
    (True, True): (80, 75, 80, 85),
}

ATTRIBUTION_WEIGHTS = (0.4, 0.25, 0.15, 0.2)
ATTRIBUTION_EXCERPT_CHARS = 200
METADATA_SOURCE = "Google Books API"


@dataclass(frozen=True)
class ConfidenceReport:
    overall: int
    factors: DetailedConfidenceFactors
    attribution: Tuple[SourceAttribution, ...]


def _has_complete_metadata(request: SummaryRequest) -> bool:
    return bool(request.title and request.authors and request.publisher and request.published_date)


def _publisher_reliability(request: SummaryRequest) -> int:
    if not request.publisher or request.publisher == UNKNOWN_PUBLISHER:
        return 40
    return 80


def _author_credibility(request: SummaryRequest) -> int:
    if not request.authors or request.authors[0] == UNKNOWN_AUTHOR:
        return 30
    return 70


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def build_source_attribution(request: SummaryRequest, uses_fallback: bool) -> Tuple[SourceAttribution, ...]:
    """Always four entries: description, metadata, categories, generator."""
    description_length = len(request.description or "")
    authors = ", ".join(request.authors)
    categories = ", ".join(request.categories)

    if request.description:
        excerpt = truncate(request.description, ATTRIBUTION_EXCERPT_CHARS)
    else:
        excerpt = "No description available"

    generator = SourceAttribution(
        type="fallback_template" if uses_fallback else "ai_knowledge",
        content="Language-specific summary template" if uses_fallback else "OpenAI chat model knowledge base",
        reliability=85 if uses_fallback else 90,
        relevance=75,
        length=0,
        source="Summary templates" if uses_fallback else "OpenAI",
        weight=ATTRIBUTION_WEIGHTS[3],
    )

    return (
        SourceAttribution(
            type="book_description",
            content=excerpt,
            reliability=90 if description_length > 100 else 60,
            relevance=95,
            length=description_length,
            source=METADATA_SOURCE,
            weight=ATTRIBUTION_WEIGHTS[0],
        ),
        SourceAttribution(
            type="metadata",
            content=f"{request.title} by {authors} ({request.publisher}, {request.published_date})",
            reliability=95 if _has_complete_metadata(request) else 70,
            relevance=85,
            length=len(request.title) + len(authors),
            source=METADATA_SOURCE,
            weight=ATTRIBUTION_WEIGHTS[1],
        ),
        SourceAttribution(
            type="category_data",
            content=categories or "Uncategorized",
            reliability=85 if request.categories else 40,
            relevance=80,
            length=len(categories),
            source=METADATA_SOURCE,
            weight=ATTRIBUTION_WEIGHTS[2],
        ),
        generator,
    )


def score_confidence(request: SummaryRequest, uses_fallback: bool,
                     translation_applied: bool) -> ConfidenceReport:
    """
    Computes the overall score, the five group breakdowns and the source
    attribution for one summary.

    Args:
        request: The book metadata the summary was built from
        uses_fallback: True when the text came from the fallback templates
        translation_applied: True when summary and book languages differ

    Returns:
        ConfidenceReport with integer scores in 0..100
    """
    description_length = len(request.description or "")
    complete_metadata = _has_complete_metadata(request)
    has_page_count = request.page_count > 0
    has_categories = len(request.categories) > 0
    has_rating = request.average_rating > 0
    has_ratings_count = request.ratings_count > 0

    # Data quality
    data_quality = min(100, (
        30 * min(1, description_length / 100)
        + (25 if complete_metadata else 0)
        + (15 if has_page_count else 0)
        + (15 if has_categories else 0)
        + (10 if has_rating else 0)
        + (5 if has_ratings_count else 0)
    ))
    publisher_reliability = _publisher_reliability(request)
    author_credibility = _author_credibility(request)
    metadata_completeness = 90 if complete_metadata else 50

    # Source reliability
    source_reliability = (
        0.3 * publisher_reliability
        + 0.3 * author_credibility
        + 0.4 * metadata_completeness
    )
    attribution = build_source_attribution(request, uses_fallback)
    average_source_reliability = sum(s.reliability for s in attribution) / len(attribution)

    # Content coverage
    topic_coverage = min(100, description_length / 10)
    thematic_depth = 80 if has_categories else 40
    conceptual_clarity = 90 if description_length > 200 else 60
    content_coverage = 0.4 * topic_coverage + 0.3 * thematic_depth + 0.3 * conceptual_clarity

    # AI processing
    consistency, translation_quality, accuracy, coherence = \
        AI_PROCESSING_CONSTANTS[(bool(uses_fallback), bool(translation_applied))]
    ai_processing = 0.3 * consistency + 0.3 * translation_quality + 0.2 * accuracy + 0.2 * coherence

    # Cross validation
    multi_source = 80 if complete_metadata else 50
    factual_consistency = 85
    contextual_relevance = 90 if has_categories else 70
    logical_coherence = 90
    cross_validation = (
        0.3 * multi_source
        + 0.2 * factual_consistency
        + 0.3 * contextual_relevance
        + 0.2 * logical_coherence
    )

    penalty = TRANSLATION_PENALTY if translation_applied else 0
    overall = _clamp(
        GROUP_WEIGHTS["data_quality"] * data_quality
        + GROUP_WEIGHTS["source_reliability"] * source_reliability
        + GROUP_WEIGHTS["content_coverage"] * content_coverage
        + GROUP_WEIGHTS["ai_processing"] * ai_processing
        + GROUP_WEIGHTS["cross_validation"] * cross_validation
        - penalty
    )

    factors = DetailedConfidenceFactors(
        data_quality=ConfidenceGroup(round(data_quality), {
            "descriptionLength": description_length,
            "metadataCompleteness": metadata_completeness,
            "publisherReliability": publisher_reliability,
            "authorCredibility": author_credibility,
        }),
        source_reliability=ConfidenceGroup(round(source_reliability), {
            "primarySourcesCount": sum(1 for s in attribution if s.weight > 0),
            "averageSourceReliability": round(average_source_reliability),
            "sourceConsistency": 95 if uses_fallback else 90,
            "verifiableInformation": 85 if request.isbn else 60,
        }),
        content_coverage=ConfidenceGroup(round(content_coverage), {
            "topicCoverage": round(topic_coverage),
            "thematicDepth": thematic_depth,
            "conceptualClarity": conceptual_clarity,
            "structuralCompleteness": 80 if has_page_count else 60,
        }),
        ai_processing=ConfidenceGroup(round(ai_processing), {
            "languageConsistency": consistency,
            "translationQuality": translation_quality,
            "summarizationAccuracy": accuracy,
            "responseCoherence": coherence,
        }),
        cross_validation=ConfidenceGroup(round(cross_validation), {
            "multiSourceVerification": multi_source,
            "factualConsistency": factual_consistency,
            "contextualRelevance": contextual_relevance,
            "logicalCoherence": logical_coherence,
        }),
    )

    return ConfidenceReport(overall=int(round(overall)), factors=factors, attribution=attribution)
