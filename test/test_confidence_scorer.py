from dataclasses import replace

import pytest

from models.summary import SummaryRequest
from services.confidence_scorer import build_source_attribution, score_confidence


@pytest.fixture
def sparse_request():
    return SummaryRequest(
        title="Untitled",
        authors=("Unknown Author",),
        isbn="0000000000",
        publisher="Unknown Publisher",
        source_language="en",
        target_language="es",
    )


def test_rich_metadata_scores_high(rich_request):
    report = score_confidence(rich_request, uses_fallback=False, translation_applied=False)

    assert report.overall == 85
    assert report.factors.data_quality.score == 100
    assert report.factors.source_reliability.score == 81
    assert report.factors.content_coverage.score == 61
    assert report.factors.cross_validation.score == 86
    assert report.factors.ai_processing.factors == {
        "languageConsistency": 95,
        "translationQuality": 100,
        "summarizationAccuracy": 90,
        "responseCoherence": 95,
    }


def test_sparse_translated_fallback_scores_low(sparse_request):
    report = score_confidence(sparse_request, uses_fallback=True, translation_applied=True)

    assert report.overall == 29
    assert report.factors.data_quality.score == 0
    assert report.factors.source_reliability.factors["sourceConsistency"] == 95
    assert report.factors.content_coverage.factors["structuralCompleteness"] == 60


@pytest.mark.parametrize("uses_fallback", [False, True])
def test_translation_lowers_score(rich_request, sparse_request, uses_fallback):
    for request in (rich_request, sparse_request):
        same = score_confidence(request, uses_fallback, translation_applied=False)
        translated = score_confidence(request, uses_fallback, translation_applied=True)
        assert translated.overall < same.overall


@pytest.mark.parametrize("uses_fallback", [False, True])
@pytest.mark.parametrize("translation_applied", [False, True])
def test_scores_stay_in_range(rich_request, sparse_request, uses_fallback, translation_applied):
    for request in (rich_request, sparse_request, replace(rich_request, description="y" * 5000)):
        report = score_confidence(request, uses_fallback, translation_applied)
        assert 0 <= report.overall <= 100
        for group in report.factors.to_dict().values():
            assert 0 <= group["score"] <= 100


def test_attribution_has_four_entries(rich_request):
    attribution = build_source_attribution(rich_request, uses_fallback=False)

    assert [s.type for s in attribution] == [
        "book_description", "metadata", "category_data", "ai_knowledge",
    ]
    assert sum(s.weight for s in attribution) == pytest.approx(1.0)


def test_fallback_attribution_names_templates(sparse_request):
    attribution = build_source_attribution(sparse_request, uses_fallback=True)

    assert len(attribution) == 4
    assert attribution[0].content == "No description available"
    assert attribution[3].type == "fallback_template"
