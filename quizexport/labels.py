"""
Positional labels and answer-key line formatting.

Options, items and right-hand matching targets are lettered (A, B, C...);
matching sources, gaps and compliance statements are numbered (1, 2, 3...).
Position maps are rebuilt from each question's own content right before its
answer is formatted, so labels always agree with what the body printed.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional

from quizexport.answer_key import ERROR_KEY, AnswerKeyEntry
from quizexport.models import QuestionExportDto, QuestionType

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ARROW = "→"
ASCII_ARROW = "->"
NOT_AVAILABLE = "N/A"
NO_ANSWER = "No answer"
MANUAL_GRADING = "Open answer (manual grading)"

TYPE_LABELS = {
    QuestionType.MCQ_SINGLE: "Multiple Choice (Single Answer)",
    QuestionType.MCQ_MULTI: "Multiple Choice (Multiple Answers)",
    QuestionType.TRUE_FALSE: "True/False",
    QuestionType.FILL_GAP: "Fill in the Gap",
    QuestionType.ORDERING: "Ordering",
    QuestionType.MATCHING: "Matching",
    QuestionType.HOTSPOT: "Hotspot",
    QuestionType.COMPLIANCE: "Compliance",
    QuestionType.OPEN: "Open-Ended",
}

_GAP_PLACEHOLDER = re.compile(r"\{\d+\}")


def letter_for(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, spreadsheet style."""
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = LETTERS[rem] + label
    return label


def number_for(index: int) -> str:
    return str(index + 1)


def content_of(question: QuestionExportDto) -> Dict[str, Any]:
    """Question content as a dict, or {} when it is absent or unparsable."""
    content = question.content
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except (json.JSONDecodeError, ValueError):
            return {}
    return content if isinstance(content, dict) else {}


def entries_of(content: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = content.get(key)
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def text_of(entry: Dict[str, Any]) -> str:
    text = entry.get("text")
    return "" if text is None else str(text)


def position_map(entries: List[Dict[str, Any]], labeler: Callable[[int], str] = letter_for) -> Dict[str, str]:
    """Map each entry's id (as a string) to its positional label.

    A repeated id keeps the label of its first occurrence.
    """
    labels = {}
    for i, entry in enumerate(entries):
        if entry.get("id") is not None:
            labels.setdefault(str(entry["id"]), labeler(i))
    return labels


def resolve(labels: Dict[str, str], item_id) -> str:
    """Positional label for an id, or the raw id when it is not in the map."""
    return labels.get(str(item_id), str(item_id))


def type_label(question_type) -> str:
    return TYPE_LABELS.get(QuestionType(question_type), str(question_type))


def display_text(question: QuestionExportDto) -> str:
    """Question line as printed; fill-gap prompts show blanks for {N}."""
    if question.type == QuestionType.FILL_GAP:
        text = content_of(question).get("text")
        if isinstance(text, str) and text.strip():
            return _GAP_PLACEHOLDER.sub("____", text)
    return question.question_text or ""


# ---------------------------------------------------------------------------
# Answer formatting
# ---------------------------------------------------------------------------


def _fmt_mcq_single(normalized, content, arrow):
    if normalized.get("correctOptionId") is None:
        return [NOT_AVAILABLE]
    labels = position_map(entries_of(content, "options"))
    return [resolve(labels, normalized["correctOptionId"])]


def _fmt_mcq_multi(normalized, content, arrow):
    ids = normalized.get("correctOptionIds")
    if not isinstance(ids, list):
        return [NOT_AVAILABLE]
    labels = position_map(entries_of(content, "options"))
    return [", ".join(resolve(labels, i) for i in ids)]


def _fmt_true_false(normalized, content, arrow):
    answer = normalized.get("answer")
    if not isinstance(answer, bool):
        return [NOT_AVAILABLE]
    return ["True" if answer else "False"]


def _fmt_open(normalized, content, arrow):
    answer = normalized.get("answer")
    if answer is None or not str(answer).strip():
        return [MANUAL_GRADING]
    return [str(answer)]


def _fmt_fill_gap(normalized, content, arrow):
    answers = normalized.get("answers")
    if not isinstance(answers, list):
        return [NOT_AVAILABLE]
    parts = []
    for i, answer in enumerate(answers):
        text = answer.get("text") if isinstance(answer, dict) else None
        parts.append(f"{number_for(i)}. {'' if text is None else text}")
    return [", ".join(parts)]


def _fmt_ordering(normalized, content, arrow):
    order = normalized.get("order")
    if not isinstance(order, list):
        return [NOT_AVAILABLE]
    labels = position_map(entries_of(content, "items"))
    return [f" {arrow} ".join(resolve(labels, i) for i in order)]


def _fmt_matching(normalized, content, arrow):
    pairs = normalized.get("pairs")
    if not isinstance(pairs, list):
        return [NOT_AVAILABLE]
    left = position_map(entries_of(content, "left"), number_for)
    right = position_map(entries_of(content, "right"))
    lines = []
    for pair in pairs:
        if not isinstance(pair, dict):
            continue
        lines.append(f"{resolve(left, pair.get('leftId'))} {arrow} {resolve(right, pair.get('rightId'))}")
    return lines or [NOT_AVAILABLE]


def _fmt_hotspot(normalized, content, arrow):
    if normalized.get("regionId") is None:
        return [NOT_AVAILABLE]
    labels = position_map(entries_of(content, "regions"), number_for)
    return [f"Region: {resolve(labels, normalized['regionId'])}"]


def _fmt_compliance(normalized, content, arrow):
    ids = normalized.get("compliantIds")
    if not isinstance(ids, list):
        return [NOT_AVAILABLE]
    labels = position_map(entries_of(content, "statements"), number_for)
    return [f"Compliant: {', '.join(resolve(labels, i) for i in ids)}"]


ANSWER_FORMATTERS = {
    QuestionType.MCQ_SINGLE: _fmt_mcq_single,
    QuestionType.MCQ_MULTI: _fmt_mcq_multi,
    QuestionType.TRUE_FALSE: _fmt_true_false,
    QuestionType.OPEN: _fmt_open,
    QuestionType.FILL_GAP: _fmt_fill_gap,
    QuestionType.ORDERING: _fmt_ordering,
    QuestionType.MATCHING: _fmt_matching,
    QuestionType.HOTSPOT: _fmt_hotspot,
    QuestionType.COMPLIANCE: _fmt_compliance,
}


def format_answer(
    entry: AnswerKeyEntry, question: Optional[QuestionExportDto], arrow: str = ARROW
) -> List[str]:
    """Format one answer key entry as display lines.

    Args:
        entry: The answer key entry.
        question: The question the entry was built from; its content
            supplies the position maps.
        arrow: Separator glyph for ordering and matching answers.

    Returns:
        One or more lines. Matching answers produce one line per pair.
    """
    normalized = entry.normalized_answer
    if normalized is None:
        return [NO_ANSWER]
    if ERROR_KEY in normalized:
        return [NOT_AVAILABLE]
    content = content_of(question) if question is not None else {}
    return ANSWER_FORMATTERS[entry.question_type](normalized, content, arrow)


def quiz_meta_line(quiz) -> str:
    """'Difficulty: X | Category: Y | Time: N min' for a quiz header."""
    difficulty = quiz.difficulty.value if quiz.difficulty is not None else NOT_AVAILABLE
    parts = [f"Difficulty: {difficulty}"]
    if quiz.category:
        parts.append(f"Category: {quiz.category}")
    if quiz.estimated_time is not None:
        parts.append(f"Time: {quiz.estimated_time} min")
    return " | ".join(parts)
