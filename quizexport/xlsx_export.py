"""
Editable spreadsheet export.

Two sheets: "Quizzes" (one row per quiz) and "Questions" (one row per
question). Question rows carry the common fields, a fixed number of
type-specific choice slots, and a "Content JSON" column holding the full
raw content. Choice slots are a convenience view and silently drop extras;
the JSON column is always complete.
"""

import io
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from quizexport.answer_key import build_answer_key
from quizexport.errors import ExportRenderError
from quizexport.export_utils import sanitize_cell, strip_control_chars
from quizexport.labels import content_of, entries_of, format_answer, text_of
from quizexport.models import ExportFile, ExportPayload, QuestionExportDto, QuestionType, QuizExportDto

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

DEFAULT_CHOICE_COLUMNS = 5
MAX_COLUMN_WIDTH = 60

QUIZ_COLUMNS = [
    "Quiz ID",
    "Title",
    "Description",
    "Visibility",
    "Difficulty",
    "Estimated Time (min)",
    "Tags",
    "Category",
    "Creator ID",
    "Question Count",
    "Created At",
    "Updated At",
]

QUESTION_COLUMNS = [
    "Quiz ID",
    "Question ID",
    "Position",
    "Type",
    "Difficulty",
    "Question Text",
    "Hint",
    "Explanation",
    "Attachment URL",
    "Correct Answer",
]

CONTENT_JSON_COLUMN = "Content JSON"

Choice = Tuple[str, str]


def question_columns(slots: int = DEFAULT_CHOICE_COLUMNS) -> List[str]:
    columns = list(QUESTION_COLUMNS)
    for n in range(1, slots + 1):
        columns.extend([f"Choice {n}", f"Choice {n} Key"])
    columns.append(CONTENT_JSON_COLUMN)
    return columns


def _clean(value):
    """Cell value safe for openpyxl and spreadsheet apps."""
    if value is None:
        return ""
    if isinstance(value, str):
        return sanitize_cell(strip_control_chars(value))
    return value


def _enum_value(value) -> str:
    return value.value if value is not None else ""


def _timestamp(value) -> str:
    return value.isoformat() if value is not None else ""


def _text(value) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Choice slots, one extractor per type
# ---------------------------------------------------------------------------


def _choices_options(content) -> List[Choice]:
    return [(text_of(o), "correct" if o.get("correct") is True else "") for o in entries_of(content, "options")]


def _choices_none(content) -> List[Choice]:
    return []


def _choices_fill_gap(content) -> List[Choice]:
    return [(_text(g.get("answer")), _text(g.get("id"))) for g in entries_of(content, "gaps")]


def _choices_ordering(content) -> List[Choice]:
    items = entries_of(content, "items")
    order = content.get("correctOrder")
    if isinstance(order, list) and order:
        positions = {str(item_id): i + 1 for i, item_id in enumerate(order)}
    else:
        positions = {str(item.get("id")): i + 1 for i, item in enumerate(items)}
    return [(text_of(item), str(positions.get(str(item.get("id")), ""))) for item in items]


def _choices_matching(content) -> List[Choice]:
    right = {str(r.get("id")): text_of(r) for r in entries_of(content, "right")}
    return [
        (text_of(item), right.get(str(item.get("matchId")), str(item.get("matchId") or "")))
        for item in entries_of(content, "left")
    ]


def _choices_hotspot(content) -> List[Choice]:
    choices = []
    for region in entries_of(content, "regions"):
        box = ",".join(str(region.get(k, "")) for k in ("x", "y", "width", "height"))
        choices.append((box, "correct" if region.get("correct") is True else ""))
    return choices


def _choices_compliance(content) -> List[Choice]:
    return [
        (text_of(s), "compliant" if s.get("compliant") is True else "non-compliant")
        for s in entries_of(content, "statements")
    ]


CHOICE_EXTRACTORS = {
    QuestionType.MCQ_SINGLE: _choices_options,
    QuestionType.MCQ_MULTI: _choices_options,
    QuestionType.TRUE_FALSE: _choices_none,
    QuestionType.OPEN: _choices_none,
    QuestionType.FILL_GAP: _choices_fill_gap,
    QuestionType.ORDERING: _choices_ordering,
    QuestionType.MATCHING: _choices_matching,
    QuestionType.HOTSPOT: _choices_hotspot,
    QuestionType.COMPLIANCE: _choices_compliance,
}


def content_json(question: QuestionExportDto) -> str:
    """The question's raw content as JSON text, key order preserved."""
    content = question.content
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def quiz_row(quiz: QuizExportDto) -> List[Any]:
    return [
        quiz.id,
        quiz.title,
        quiz.description,
        quiz.visibility,
        _enum_value(quiz.difficulty),
        quiz.estimated_time,
        ", ".join(quiz.tags),
        quiz.category,
        quiz.creator_id,
        len(quiz.questions),
        _timestamp(quiz.created_at),
        _timestamp(quiz.updated_at),
    ]


def question_row(
    quiz: QuizExportDto, question: QuestionExportDto, position: int, answer: str, slots: int
) -> List[Any]:
    row = [
        quiz.id,
        question.id,
        position,
        question.type.value,
        _enum_value(question.difficulty),
        question.question_text,
        question.hint,
        question.explanation,
        question.attachment_url,
        answer,
    ]
    choices = CHOICE_EXTRACTORS[question.type](content_of(question))
    if len(choices) > slots:
        logger.debug(
            "question_row: question %s has %d choices, keeping first %d",
            question.id, len(choices), slots,
        )
        choices = choices[:slots]
    for text, key in choices:
        row.extend([text, key])
    row.extend([""] * (2 * (slots - len(choices))))
    return row


def _append(ws, values: List[Any], raw_last: bool = False):
    cells = [_clean(v) for v in values]
    if raw_last:
        cells[-1] = strip_control_chars(values[-1])
    ws.append(cells)


def _style_sheet(ws, column_count: int):
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.freeze_panes = "A2"
    for idx in range(1, column_count + 1):
        letter = get_column_letter(idx)
        longest = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = min(max(longest + 2, 10), MAX_COLUMN_WIDTH)


def build_workbook(payload: ExportPayload, slots: int = DEFAULT_CHOICE_COLUMNS) -> Workbook:
    wb = Workbook()
    quizzes_ws = wb.active
    quizzes_ws.title = "Quizzes"
    quizzes_ws.append(QUIZ_COLUMNS)
    for quiz in payload.quizzes:
        _append(quizzes_ws, quiz_row(quiz))

    columns = question_columns(slots)
    questions_ws = wb.create_sheet("Questions")
    questions_ws.append(columns)
    for quiz in payload.quizzes:
        entries = build_answer_key(quiz.questions)
        for position, (entry, question) in enumerate(zip(entries, quiz.questions), start=1):
            answer = "; ".join(format_answer(entry, question))
            row = question_row(quiz, question, position, answer, slots)
            row.append(content_json(question))
            _append(questions_ws, row, raw_last=True)

    _style_sheet(quizzes_ws, len(QUIZ_COLUMNS))
    _style_sheet(questions_ws, len(columns))
    return wb


def export_xlsx(payload: ExportPayload, config: Optional[Dict[str, Any]] = None) -> ExportFile:
    """Export quizzes to an editable .xlsx workbook.

    Args:
        payload: The export payload.
        config: Loaded configuration; ``tabular.max_choice_columns`` sets
            the number of choice slots.

    Returns:
        ExportFile named ``{prefix}.xlsx``.

    Raises:
        ExportRenderError: If openpyxl fails to build or save the workbook.
    """
    slots = ((config or {}).get("tabular") or {}).get("max_choice_columns", DEFAULT_CHOICE_COLUMNS)
    buf = io.BytesIO()
    try:
        wb = build_workbook(payload, slots)
        wb.save(buf)
    except (ValueError, TypeError, OSError) as e:
        logger.error("export_xlsx: workbook failed for export %s: %s", payload.export_id, e)
        raise ExportRenderError("Failed to render XLSX export") from e
    return ExportFile.from_bytes(f"{payload.filename_prefix}.xlsx", XLSX_MIME_TYPE, buf.getvalue())
