"""
Correct-answer extraction for each question type.

Reduces a question's raw content to the minimal structure describing its
correct answer. Malformed content raises ValueError; callers that must not
fail (the answer key builder) catch it per question.
"""

import json
from typing import Any, Callable, Dict, List

from quizexport.models import QuestionType


def _as_dict(content) -> Dict[str, Any]:
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except (json.JSONDecodeError, ValueError):
            raise ValueError("content is not valid JSON") from None
    if not isinstance(content, dict):
        raise ValueError("content must be an object")
    return content


def _require_list(content: Dict[str, Any], key: str) -> List[Any]:
    value = content.get(key)
    if not isinstance(value, list):
        raise ValueError(f"content is missing '{key}' array")
    return value


def _require_entries(content: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = _require_list(content, key)
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"'{key}' must contain objects")
    return entries


def _mcq_single(content):
    options = _require_entries(content, "options")
    for opt in options:
        if opt.get("correct") is True:
            return {"correctOptionId": opt.get("id")}
    raise ValueError("no option is marked correct")


def _mcq_multi(content):
    options = _require_entries(content, "options")
    ids = [opt.get("id") for opt in options if opt.get("correct") is True]
    if not ids:
        raise ValueError("no option is marked correct")
    return {"correctOptionIds": ids}


def _true_false(content):
    answer = content.get("answer")
    if not isinstance(answer, bool):
        raise ValueError("'answer' must be a boolean")
    return {"answer": answer}


def _open(content):
    answer = content.get("answer")
    if answer is not None and not isinstance(answer, str):
        answer = str(answer)
    return {"answer": answer if answer else None}


def _fill_gap(content):
    gaps = _require_entries(content, "gaps")
    return {"answers": [{"id": gap.get("id"), "text": gap.get("answer")} for gap in gaps]}


def _ordering(content):
    order = content.get("correctOrder")
    if isinstance(order, list) and order:
        return {"order": list(order)}
    items = _require_entries(content, "items")
    return {"order": [item.get("id") for item in items]}


def _matching(content):
    left = _require_entries(content, "left")
    return {
        "pairs": [{"leftId": item.get("id"), "rightId": item.get("matchId")} for item in left]
    }


def _hotspot(content):
    regions = _require_entries(content, "regions")
    for region in regions:
        if region.get("correct") is True:
            return {"regionId": region.get("id")}
    raise ValueError("no region is marked correct")


def _compliance(content):
    statements = _require_entries(content, "statements")
    return {"compliantIds": [s.get("id") for s in statements if s.get("compliant") is True]}


EXTRACTORS: Dict[QuestionType, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    QuestionType.MCQ_SINGLE: _mcq_single,
    QuestionType.MCQ_MULTI: _mcq_multi,
    QuestionType.TRUE_FALSE: _true_false,
    QuestionType.OPEN: _open,
    QuestionType.FILL_GAP: _fill_gap,
    QuestionType.ORDERING: _ordering,
    QuestionType.MATCHING: _matching,
    QuestionType.HOTSPOT: _hotspot,
    QuestionType.COMPLIANCE: _compliance,
}


def extract_correct_answer(question_type, content) -> Dict[str, Any]:
    """Return the normalized correct answer for one question.

    Args:
        question_type: A QuestionType (or its string value).
        content: The question's content tree (dict or JSON string).

    Returns:
        Dict holding only the correct-answer fields for the type.

    Raises:
        ValueError: If the type is unknown or the content is malformed.
    """
    q_type = QuestionType(question_type)
    return EXTRACTORS[q_type](_as_dict(content))
