from dataclasses import replace

from services.request_builder import (
    MAX_TOKENS_CROSS_LANGUAGE,
    MAX_TOKENS_SAME_LANGUAGE,
    PROMPT_DESCRIPTION_CHARS,
    TEMPERATURE,
    build_invocation,
)


def test_cross_language_request_carries_vocabulary_hints(nexus_request):
    params = build_invocation(nexus_request, "gpt-3.5-turbo")

    assert params.target_language_name == "Spanish"
    assert params.needs_translation is True
    assert params.max_tokens == MAX_TOKENS_CROSS_LANGUAGE
    assert ("ofrece", "offers") in params.vocabulary_hints
    assert "MANDATORY SPANISH WORDS" in params.messages[1]["content"]


def test_same_language_request_has_no_hints(rich_request):
    params = build_invocation(rich_request, "gpt-3.5-turbo")

    assert params.needs_translation is False
    assert params.vocabulary_hints == ()
    assert params.max_tokens == MAX_TOKENS_SAME_LANGUAGE
    assert "MANDATORY" not in params.messages[1]["content"]


def test_unknown_target_language_resolves_to_english(rich_request):
    params = build_invocation(replace(rich_request, target_language="xx"), "gpt-3.5-turbo")
    assert params.target_language_name == "English"


def test_budget_instruction_names_both_ranges(rich_request):
    params = build_invocation(rich_request, "gpt-3.5-turbo")
    assert "250-300" in params.budget_instruction
    assert "800-1000" in params.budget_instruction
    assert params.budget_instruction in params.messages[1]["content"]


def test_description_is_clipped_in_prompt(rich_request):
    request = replace(rich_request, description="a" * PROMPT_DESCRIPTION_CHARS + "b" * 50)
    prompt = build_invocation(request, "gpt-3.5-turbo").messages[1]["content"]
    assert "a" * PROMPT_DESCRIPTION_CHARS in prompt
    assert "b" not in prompt.split("Description:")[1].split("\n")[0]


def test_completion_kwargs_request_json_object(rich_request):
    kwargs = build_invocation(rich_request, "gpt-4o-mini").to_completion_kwargs()

    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["temperature"] == TEMPERATURE
    assert kwargs["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]


def test_build_is_deterministic(nexus_request):
    assert build_invocation(nexus_request, "m") == build_invocation(nexus_request, "m")
