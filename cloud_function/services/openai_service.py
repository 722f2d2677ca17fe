import json
import re
from typing import Any, Dict, Optional

import openai
from openai import OpenAI

from config import OPENAI_API_KEY, OPENAI_TIMEOUT_SECONDS
from services.errors import (
    AuthFailedError,
    MalformedResponseError,
    QuotaExceededError,
    ServiceNotConfiguredError,
    UpstreamError,
    UpstreamRateLimitedError,
)
from services.logging_service import get_logger

QUOTA_SUGGESTION = "Your OpenAI account may need billing setup or has exceeded monthly limits."


def _is_quota_error(error: Exception) -> bool:
    code = getattr(error, "code", None) or ""
    return code == "insufficient_quota" or "quota" in str(error).lower()


class OpenAIService:
    """Single chat-completion call returning the parsed JSON object."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None, client=None):
        api_key = api_key if api_key is not None else OPENAI_API_KEY
        if client is None:
            if not api_key:
                get_logger().error("OpenAI API key not configured")
                raise ServiceNotConfiguredError("AI service not configured")
            # Retries are owned by SummaryInvoker
            client = OpenAI(
                api_key=api_key,
                timeout=timeout if timeout is not None else OPENAI_TIMEOUT_SECONDS,
                max_retries=0,
            )
        self.client = client

    def complete(self, completion_kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Issues one call and parses the JSON object it returns.

        Raises:
            UpstreamRateLimitedError: the service asked us to slow down
            QuotaExceededError: billing quota exhausted
            AuthFailedError: key rejected
            MalformedResponseError: empty or non-JSON content
            UpstreamError: any other API failure
        """
        try:
            completion = self.client.chat.completions.create(**completion_kwargs)
        except openai.RateLimitError as e:
            if _is_quota_error(e):
                raise QuotaExceededError("OpenAI quota exceeded. Please check your billing.",
                                         suggestion=QUOTA_SUGGESTION) from e
            raise UpstreamRateLimitedError(str(e)) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthFailedError("Authentication failed with AI service") from e
        except openai.APIError as e:
            if _is_quota_error(e):
                raise QuotaExceededError("OpenAI quota exceeded. Please check your billing.",
                                         suggestion=QUOTA_SUGGESTION) from e
            raise UpstreamError(f"AI service error: {e}") from e

        usage = getattr(completion, "usage", None)
        if usage is not None:
            get_logger().debug("OpenAI usage",
                               prompt_tokens=getattr(usage, "prompt_tokens", None),
                               completion_tokens=getattr(usage, "completion_tokens", None))

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        return self.parse_content(content)

    @staticmethod
    def parse_content(content: Optional[str]) -> Dict[str, Any]:
        if not content or not content.strip():
            raise MalformedResponseError("No response from AI service")

        cleaned_text = content.strip()
        if cleaned_text.startswith("```"):
            cleaned_text = re.sub(r"^```json\s*", "", cleaned_text)
            cleaned_text = re.sub(r"^```\s*", "", cleaned_text)
            cleaned_text = re.sub(r"\s*```$", "", cleaned_text)

        try:
            parsed = json.loads(cleaned_text)
        except json.JSONDecodeError as e:
            raise MalformedResponseError("AI service returned non-JSON content") from e
        if not isinstance(parsed, dict):
            raise MalformedResponseError("AI service returned a non-object JSON value")
        return parsed
