"""Tests for the contract analysis prompt."""
from contractshield.prompts.contract_analysis import (
    MAX_PROMPT_CHARS,
    SEVERITIES,
    build_analysis_prompt,
    build_messages,
    resolve_language,
)


def test_text_is_truncated_to_budget():
    text = "A" * (MAX_PROMPT_CHARS - 5) + "BBBBBBBBBB"

    prompt = build_analysis_prompt(text)

    assert "A" * (MAX_PROMPT_CHARS - 5) + "BBBBB" in prompt
    assert "BBBBBB" not in prompt


def test_custom_budget():
    prompt = build_analysis_prompt("0123456789", max_chars=4)

    assert "0123\nCONTRACT>>>" in prompt
    assert "01234" not in prompt


def test_prompt_demands_json_only_and_lists_schema():
    prompt = build_analysis_prompt("Clause 1: rent is due monthly.")

    assert "return ONLY valid JSON" in prompt
    assert "no markdown" in prompt
    assert "Populate every top-level field" in prompt
    for field in ("score", "overview", "analysis", "contract_metadata", "category_assessments",
                  "red_flags", "loopholes", "negotiation_advice"):
        assert f'"{field}"' in prompt
    for severity in SEVERITIES:
        assert f'"{severity}"' in prompt
    assert "Clause 1: rent is due monthly." in prompt


def test_language_selection():
    assert "Write all narrative text in Afrikaans" in build_analysis_prompt("text", "af")
    assert "Write all narrative text in English" in build_analysis_prompt("text", "fr")
    assert resolve_language(" ZU ") == "zu"
    assert resolve_language(None) == "en"


def test_build_messages_is_single_user_turn():
    assert build_messages("  hello  ") == [{"role": "user", "content": "hello"}]
