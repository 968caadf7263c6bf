"""
Response normalization for reasoning-service replies.

``parse_reply`` turns raw reply text into a JSON object (or raises
``MalformedReasoningOutput``); ``normalize_result`` projects any object onto
the analysis schema, substituting defaults for anything missing or
wrong-typed. The projection is idempotent and never raises, so every caller
receives a result where ``score`` is an int in [0, 100] and every list field
is a list.
"""
from __future__ import annotations

import copy
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

from contractshield.errors import MalformedReasoningOutput
from contractshield.prompts.contract_analysis import SEVERITIES, SEVERITY_ICONS

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 50
DEFAULT_OVERVIEW = "Contract analysis completed."
DEFAULT_SEVERITY = "info"

CONFIDENCE_FULL = "full"
CONFIDENCE_DEGRADED = "degraded"
CONFIDENCE_LEVELS = (CONFIDENCE_FULL, CONFIDENCE_DEGRADED)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")

_FALLBACK_RESULT: Dict[str, Any] = {
    "score": DEFAULT_SCORE,
    "overview": (
        "Automated analysis could not be completed, so this is a reduced-confidence result. "
        "Some clauses may need review; a professional legal review is recommended."
    ),
    "analysis": [
        {
            "icon": SEVERITY_ICONS["medium"],
            "title": "Professional Review Recommended",
            "description": "Contract needs professional legal review",
            "severity": "medium",
            "details": "Please consult with a legal professional for detailed analysis of this contract.",
        }
    ],
    "confidence": CONFIDENCE_DEGRADED,
    "contract_metadata": {},
    "category_assessments": {},
    "red_flags": [],
    "loopholes": [],
    "negotiation_advice": {},
}


def fallback_result() -> Dict[str, Any]:
    """Canned low-confidence result used when reasoning or parsing fails."""
    return copy.deepcopy(_FALLBACK_RESULT)


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    stripped = (text or "").strip()
    stripped = _FENCE_OPEN.sub("", stripped)
    stripped = _FENCE_CLOSE.sub("", stripped)
    return stripped.strip()


def parse_reply(raw: str) -> Dict[str, Any]:
    """
    Parse a raw reply as a JSON object.

    Raises:
        MalformedReasoningOutput: the reply is empty, not JSON, or not an object
    """
    stripped = strip_code_fence(raw)
    if not stripped:
        raise MalformedReasoningOutput("empty reply")
    try:
        parsed = json.loads(stripped)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Reply JSON parse failed: {e}, preview: {repr(stripped[:200])}")
        raise MalformedReasoningOutput(f"reply is not valid JSON: {e.__class__.__name__}") from e
    if not isinstance(parsed, dict):
        raise MalformedReasoningOutput(f"reply is a JSON {type(parsed).__name__}, expected an object")
    return parsed


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    # Arbitrarily large ints overflow math.isfinite
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _coerce_score(value: Any) -> Optional[int]:
    if _is_number(value) and 0 <= value <= 100:
        return int(round(value))
    return None


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _normalize_finding(item: Any) -> Optional[Dict[str, str]]:
    if not isinstance(item, dict):
        return None
    title = item.get("title")
    description = item.get("description")
    if not (_non_empty_str(title) and _non_empty_str(description)):
        return None

    severity = item.get("severity")
    severity = severity.strip().lower() if isinstance(severity, str) else ""
    if severity not in SEVERITIES:
        severity = DEFAULT_SEVERITY

    details = item.get("details")
    icon = item.get("icon")
    return {
        "icon": icon if _non_empty_str(icon) else SEVERITY_ICONS[severity],
        "title": title,
        "description": description,
        "severity": severity,
        "details": details if isinstance(details, str) else "",
    }


def _normalize_findings(value: Any) -> List[Dict[str, str]]:
    if not isinstance(value, list):
        return []
    findings = []
    for item in value:
        finding = _normalize_finding(item)
        if finding is None:
            logger.debug(f"Dropping malformed finding: {repr(item)[:200]}")
            continue
        findings.append(finding)
    return findings


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if _non_empty_str(v)]


def _normalize_metadata(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    metadata: Dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(item, str) or _is_number(item):
            metadata[key] = item
        elif isinstance(item, list):
            metadata[key] = _string_list(item)
    return metadata


def _normalize_categories(value: Any) -> Dict[str, Dict[str, Any]]:
    if not isinstance(value, dict):
        return {}
    categories: Dict[str, Dict[str, Any]] = {}
    for name, entry in value.items():
        if not isinstance(entry, dict):
            continue
        assessment: Dict[str, Any] = {}
        for key, item in entry.items():
            if key == "score":
                score = _coerce_score(item)
                if score is not None:
                    assessment["score"] = score
            elif isinstance(item, str):
                assessment[key] = item
        categories[name] = assessment
    return categories


def _normalize_loopholes(value: Any) -> List[Dict[str, str]]:
    if not isinstance(value, list):
        return []
    loopholes = []
    for item in value:
        if not isinstance(item, dict):
            continue
        if not (_non_empty_str(item.get("title")) and _non_empty_str(item.get("description"))):
            continue
        loopholes.append({k: v for k, v in item.items() if isinstance(v, str)})
    return loopholes


def _normalize_advice(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    advice: Dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(item, str):
            advice[key] = item
        elif isinstance(item, list):
            advice[key] = _string_list(item)
    return advice


def normalize_result(data: Any, confidence: Optional[str] = None) -> Dict[str, Any]:
    """
    Project ``data`` onto the analysis schema.

    Args:
        data: Parsed reply (anything; non-objects yield the fallback result)
        confidence: Force a confidence level; by default an existing valid
            level is kept, otherwise ``"full"``

    Returns:
        A normalized result dict
    """
    if not isinstance(data, dict):
        logger.warning(f"Cannot normalize {type(data).__name__}, using fallback result")
        return fallback_result()

    score = _coerce_score(data.get("score"))
    if score is None:
        logger.info(f"Invalid or missing score {repr(data.get('score'))}, defaulting to {DEFAULT_SCORE}")
        score = DEFAULT_SCORE

    overview = data.get("overview")
    if not _non_empty_str(overview):
        overview = DEFAULT_OVERVIEW

    if confidence not in CONFIDENCE_LEVELS:
        confidence = data.get("confidence")
        if confidence not in CONFIDENCE_LEVELS:
            confidence = CONFIDENCE_FULL

    return {
        "score": score,
        "overview": overview,
        "analysis": _normalize_findings(data.get("analysis")),
        "confidence": confidence,
        "contract_metadata": _normalize_metadata(data.get("contract_metadata")),
        "category_assessments": _normalize_categories(data.get("category_assessments")),
        "red_flags": _string_list(data.get("red_flags")),
        "loopholes": _normalize_loopholes(data.get("loopholes")),
        "negotiation_advice": _normalize_advice(data.get("negotiation_advice")),
    }


def normalize_reply(raw: str) -> Dict[str, Any]:
    """Parse and normalize a raw reply. Raises ``MalformedReasoningOutput`` on bad JSON."""
    return normalize_result(parse_reply(raw), confidence=CONFIDENCE_FULL)
