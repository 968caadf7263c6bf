"""Prompt construction for contract analysis.

The JSON schema embedded here is the contract the normalizer accepts; keep
``SEVERITIES``, ``SEVERITY_ICONS`` and the schema text in lockstep with
``contractshield.services.normalizer``.
"""
from typing import Dict, List

MAX_PROMPT_CHARS = 40000

SEVERITIES = ("high", "medium", "low", "info")

SEVERITY_ICONS = {
    "high": "alert-triangle",
    "medium": "zap",
    "low": "check-circle",
    "info": "message-square",
}

LANGUAGES = {
    "en": "English",
    "zu": "isiZulu",
    "af": "Afrikaans",
    "xh": "isiXhosa",
}

DEFAULT_LANGUAGE = "en"

_SCHEMA = """{
  "score": 72,
  "overview": "Two to four sentences on how fair the contract is overall and the most important issues.",
  "analysis": [
    {
      "icon": "alert-triangle",
      "title": "Short clause-level finding",
      "description": "One line naming the clause and the problem",
      "severity": "high",
      "details": "A longer explanation of the risk and what the signer can do about it."
    }
  ],
  "contract_metadata": {
    "contract_type": "Employment contract",
    "parties": "Employer and employee names",
    "governing_law": "Applicable law or jurisdiction",
    "effective_date": "Start date if stated"
  },
  "category_assessments": {
    "termination": {"score": 40, "summary": "Assessment of termination terms"},
    "compensation": {"score": 80, "summary": "Assessment of pay and benefits"},
    "restrictions": {"score": 55, "summary": "Assessment of non-compete and confidentiality terms"}
  },
  "red_flags": ["Short statement of a serious problem"],
  "loopholes": [
    {"title": "Ambiguous wording", "description": "What is ambiguous and how it could be exploited"}
  ],
  "negotiation_advice": {
    "priorities": ["Most important change to ask for"],
    "suggested_wording": "Replacement wording for the weakest clause",
    "talking_points": ["Point to raise with the other party"]
  }
}"""


def resolve_language(language: str) -> str:
    """Return a supported language code, falling back to English."""
    code = (language or "").strip().lower()
    return code if code in LANGUAGES else DEFAULT_LANGUAGE


def build_analysis_prompt(
    text: str, language: str = DEFAULT_LANGUAGE, max_chars: int = MAX_PROMPT_CHARS
) -> str:
    """
    Render the contract analysis instruction for the reasoning service.

    Args:
        text: Extracted contract text; anything past max_chars is dropped
        language: Target language code for the narrative fields
        max_chars: Character budget for the embedded text

    Returns:
        Prompt string asking for a single JSON object in the schema above
    """
    contract_text = (text or "")[:max_chars]
    language_name = LANGUAGES[resolve_language(language)]
    severities = ", ".join(f'"{s}"' for s in SEVERITIES)

    return (
        "You are a South African contract law expert. Analyze the contract below and "
        "return ONLY valid JSON in this exact structure:\n\n"
        f"{_SCHEMA}\n\n"
        "Rules:\n"
        "- Return a single JSON object and nothing else: no prose, no markdown, no code fences, no commentary.\n"
        "- \"score\" is an integer from 0 to 100 for overall fairness to the signer (higher is safer).\n"
        f"- Every \"severity\" must be one of {severities}.\n"
        "- Every finding needs a non-empty \"title\" and \"description\".\n"
        "- Populate every top-level field. If the contract says nothing relevant, use an empty list, "
        "an empty object, or a short placeholder sentence.\n"
        f"- Write all narrative text in {language_name}; keep JSON keys and severity values in English.\n\n"
        "Contract text to analyze:\n"
        "<<<CONTRACT\n"
        f"{contract_text}\n"
        "CONTRACT>>>\n\n"
        "Return ONLY the JSON, no other text."
    )


def build_messages(prompt: str) -> List[Dict[str, str]]:
    """Wrap a prompt as a single-turn chat request."""
    return [{"role": "user", "content": prompt.strip()}]
