"""
Summary Invoker - Orchestrates one summary request end to end.

Flow:
1. RateCheck: per-client hourly cap, then global monthly cap.
2. Invoke: one chat-completion call built by the request builder, spaced
   by the throttle policy. Rate-limit answers are retried with backoff.
3. Fallback: when every attempt was rate-limited, the deterministic
   templates take over.
4. Every text goes through the language guard and the truncator, then the
   confidence scorer produces the final score and attribution.

Quota, authentication and malformed-response failures are not retried
and never fall back; they reach the caller as classified errors.
"""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from models.summary import (
    AIBookSummary,
    SummaryDraft,
    SummaryRequest,
    PROCESSING_FALLBACK,
    PROCESSING_OPENAI,
)
from services.confidence_scorer import score_confidence
from services.errors import MalformedResponseError, UpstreamRateLimitedError
from services.fallback_generator import FallbackGenerator
from services.language_guard import LanguageGuard
from services.logging_service import get_logger
from services.policies import RetryPolicy, ThrottlePolicy
from services.rate_limiter import RateLimiter
from services.request_builder import InvocationParams, build_invocation
from services.truncation import SHORT_SUMMARY_LIMIT, DETAILED_SUMMARY_LIMIT, truncate

DEFAULT_MODEL_CONFIDENCE = 75
DEFAULT_SOURCES = ("Google Books API", "Book Description")


@dataclass(frozen=True)
class SummaryOutcome:
    summary: AIBookSummary
    fallback: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clamp_confidence(value: Any) -> int:
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MODEL_CONFIDENCE
    return max(0, min(100, number))


def _string_list(value: Any, default=()) -> tuple:
    if not isinstance(value, list):
        return tuple(default)
    return tuple(str(v) for v in value if v)


class SummaryInvoker:
    def __init__(
        self,
        ai_service,
        rate_limiter: RateLimiter,
        model: str,
        retry_policy: Optional[RetryPolicy] = None,
        throttle: Optional[ThrottlePolicy] = None,
        guard: Optional[LanguageGuard] = None,
        fallback_generator: Optional[FallbackGenerator] = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.ai_service = ai_service
        self.rate_limiter = rate_limiter
        self.model = model
        self.retry_policy = retry_policy or RetryPolicy()
        self.throttle = throttle or ThrottlePolicy(sleep=sleep)
        self.guard = guard or LanguageGuard()
        self.fallback_generator = fallback_generator or FallbackGenerator(self.guard)
        self.clock = clock
        self.sleep = sleep

    def generate(self, request: SummaryRequest, client_id: str, logger=None) -> SummaryOutcome:
        """
        Produces the finished summary for `request`.

        Args:
            request: Validated summary request
            client_id: Identifier the hourly allowance is charged to
            logger: Optional RequestLogger; defaults to the global logger

        Raises:
            SummaryError subclasses for every terminal classification
        """
        logger = logger or get_logger()

        self.rate_limiter.check(client_id)
        logger.info("Rate check passed", client_id=client_id)

        params = build_invocation(request, self.model)
        logger.info("Generating summary",
                    title=request.title,
                    isbn=request.isbn,
                    source_language=request.source_language,
                    target_language=request.target_language,
                    target_language_name=params.target_language_name,
                    needs_translation=params.needs_translation)

        try:
            draft = self._invoke_with_retry(params, logger)
        except UpstreamRateLimitedError:
            logger.warning("AI service rate limited on every attempt, using fallback templates",
                           attempts=self.retry_policy.max_attempts)
            draft = self.fallback_generator.generate_draft(request)

        summary = self._assemble(request, draft)
        logger.info("Summary generated",
                    processing_method=summary.processing_method,
                    provisional_confidence=draft.provisional_confidence,
                    confidence_score=summary.confidence_score,
                    translation_applied=summary.translation_applied)
        return SummaryOutcome(summary=summary, fallback=draft.processing_method == PROCESSING_FALLBACK)

    def _invoke_with_retry(self, params: InvocationParams, logger) -> SummaryDraft:
        kwargs = params.to_completion_kwargs()
        attempt = 0
        while True:
            self.throttle.wait()
            try:
                response = self.ai_service.complete(kwargs)
                return self._draft_from_response(response)
            except UpstreamRateLimitedError:
                if not self.retry_policy.should_retry(attempt):
                    raise
                delay = self.retry_policy.delay_after(attempt)
                logger.info(f"Rate limit hit, retrying in {delay}s (attempt {attempt + 1})",
                            attempt=attempt + 1, delay=delay)
                self.sleep(delay)
                attempt += 1

    def _draft_from_response(self, response: Dict[str, Any]) -> SummaryDraft:
        short = response.get("shortSummary")
        detailed = response.get("detailedSummary")
        if not isinstance(short, str) or not short.strip():
            raise MalformedResponseError("AI response is missing shortSummary")
        if not isinstance(detailed, str) or not detailed.strip():
            raise MalformedResponseError("AI response is missing detailedSummary")

        return SummaryDraft(
            short_summary=short.strip(),
            detailed_summary=detailed.strip(),
            reasoning_factors=_string_list(response.get("reasoningFactors")),
            sources_used=_string_list(response.get("sourcesUsed"), DEFAULT_SOURCES) or DEFAULT_SOURCES,
            provisional_confidence=_clamp_confidence(response.get("confidenceScore", DEFAULT_MODEL_CONFIDENCE)),
            processing_method=PROCESSING_OPENAI,
        )

    def _assemble(self, request: SummaryRequest, draft: SummaryDraft) -> AIBookSummary:
        short, detailed, _ = self.guard.clean_summary_fields(
            draft.short_summary, draft.detailed_summary, request.target_language,
            preserve=request.proper_names,
        )
        uses_fallback = draft.processing_method == PROCESSING_FALLBACK
        report = score_confidence(request, uses_fallback, request.translation_applied)

        return AIBookSummary(
            short_summary=truncate(short, SHORT_SUMMARY_LIMIT),
            detailed_summary=truncate(detailed, DETAILED_SUMMARY_LIMIT),
            confidence_score=report.overall,
            reasoning_factors=draft.reasoning_factors,
            sources_used=draft.sources_used,
            source_attribution=report.attribution,
            detailed_confidence_factors=report.factors,
            language=request.target_language,
            generated_at=self.clock(),
            processing_method=draft.processing_method,
            translation_applied=request.translation_applied,
        )
