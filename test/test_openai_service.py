from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from services.errors import (
    AuthFailedError,
    MalformedResponseError,
    QuotaExceededError,
    ServiceNotConfiguredError,
    UpstreamRateLimitedError,
)
from services.openai_service import OpenAIService

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=80),
    )


def _service_raising(error):
    client = MagicMock()
    client.chat.completions.create.side_effect = error
    return OpenAIService(client=client)


def test_missing_key_is_not_configured():
    with pytest.raises(ServiceNotConfiguredError):
        OpenAIService(api_key="")


def test_complete_parses_json_object():
    client = MagicMock()
    client.chat.completions.create.return_value = _completion('{"shortSummary": "S", "detailedSummary": "D"}')
    service = OpenAIService(client=client)

    result = service.complete({"model": "gpt-3.5-turbo", "messages": []})

    assert result == {"shortSummary": "S", "detailedSummary": "D"}
    client.chat.completions.create.assert_called_once_with(model="gpt-3.5-turbo", messages=[])


def test_parse_content_strips_code_fences():
    content = '```json\n{"shortSummary": "S"}\n```'
    assert OpenAIService.parse_content(content) == {"shortSummary": "S"}


@pytest.mark.parametrize("content", [None, "", "   ", "not json", "[1, 2]"])
def test_parse_content_rejects_bad_content(content):
    with pytest.raises(MalformedResponseError):
        OpenAIService.parse_content(content)


def test_rate_limit_maps_to_retryable_error():
    response = httpx.Response(429, request=REQUEST)
    error = openai.RateLimitError("Rate limit reached", response=response,
                                  body={"code": "rate_limit_exceeded"})
    with pytest.raises(UpstreamRateLimitedError):
        _service_raising(error).complete({})


def test_insufficient_quota_maps_to_quota_exceeded():
    response = httpx.Response(429, request=REQUEST)
    error = openai.RateLimitError("You exceeded your current quota", response=response,
                                  body={"code": "insufficient_quota"})
    with pytest.raises(QuotaExceededError) as exc_info:
        _service_raising(error).complete({})
    assert exc_info.value.suggestion


def test_authentication_failure_maps_to_auth_failed():
    response = httpx.Response(401, request=REQUEST)
    error = openai.AuthenticationError("Incorrect API key", response=response, body=None)
    with pytest.raises(AuthFailedError) as exc_info:
        _service_raising(error).complete({})
    assert exc_info.value.http_status == 401
