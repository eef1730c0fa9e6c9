"""
Printable Word (.docx) export.

Follows the same pipeline as the HTML and PDF exports: fix the render order,
write the body in that order, then build the answer key from it.
"""

import io
import logging
from typing import List, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from quizexport.answer_key import build_answer_key
from quizexport.errors import ExportRenderError
from quizexport.export_utils import strip_control_chars
from quizexport.labels import (
    content_of,
    display_text,
    entries_of,
    format_answer,
    letter_for,
    quiz_meta_line,
    text_of,
    type_label,
)
from quizexport.models import ExportFile, ExportPayload, PrintOptions, QuestionExportDto, QuestionType
from quizexport.ordering import question_groups

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def export_docx(payload: ExportPayload, config: Optional[dict] = None) -> ExportFile:
    """Export quizzes to a Word document.

    Args:
        payload: The export payload.
        config: Unused; accepted so all renderers share one signature.

    Returns:
        ExportFile named ``{prefix}.docx``.

    Raises:
        ExportRenderError: If python-docx fails to build or save the document.
    """
    buf = io.BytesIO()
    try:
        doc = Document()
        build_document(doc, payload)
        doc.save(buf)
    except (ValueError, KeyError, OSError) as e:
        logger.error("export_docx: document failed for export %s: %s", payload.export_id, e)
        raise ExportRenderError("Failed to render DOCX export") from e
    return ExportFile.from_bytes(f"{payload.filename_prefix}.docx", DOCX_MIME_TYPE, buf.getvalue())


def build_document(doc, payload: ExportPayload) -> List[QuestionExportDto]:
    """Fill ``doc`` and return the questions in render order."""
    options = payload.print_options

    if options.include_cover:
        _add_cover(doc, payload)
        doc.add_page_break()

    for quiz in payload.quizzes:
        if len(payload.quizzes) > 1 or not options.include_cover:
            doc.add_heading(_safe(quiz.title) or "Quiz", level=1)
            if options.include_metadata:
                _add_meta(doc, quiz)
            if quiz.description and quiz.description.strip():
                doc.add_paragraph(_safe(quiz.description))

    render_order = []
    number = 1
    for i, (q_type, questions) in enumerate(question_groups(payload)):
        if q_type is not None:
            if i > 0:
                doc.add_page_break()
            doc.add_heading(f"{type_label(q_type)} Questions", level=2)
        for question in questions:
            _add_question(doc, question, number, options)
            render_order.append(question)
            number += 1

    if options.answers_on_separate_pages:
        doc.add_page_break()
    doc.add_heading("Answer Key", level=2)
    _add_answer_key(doc, render_order)
    return render_order


def _safe(text):
    """Drop control characters that Word XML cannot hold."""
    return strip_control_chars(text)


def _add_cover(doc, payload: ExportPayload):
    if len(payload.quizzes) == 1:
        quiz = payload.quizzes[0]
        title = doc.add_heading(_safe(quiz.title) or "Quiz", level=0)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        if payload.print_options.include_metadata:
            _add_meta(doc, quiz)
        if quiz.description and quiz.description.strip():
            doc.add_paragraph(_safe(quiz.description))
    else:
        title = doc.add_heading("Multiple Quiz Export", level=0)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        doc.add_paragraph(f"Total Quizzes: {len(payload.quizzes)}")
        doc.add_paragraph(f"Total Questions: {payload.question_count}")
    p = doc.add_paragraph()
    run = p.add_run(f"Version: {payload.version_code}")
    run.font.size = Pt(9)


def _add_meta(doc, quiz):
    lines = [quiz_meta_line(quiz)]
    if quiz.tags:
        lines.append(f"Tags: {', '.join(quiz.tags)}")
    for line in lines:
        p = doc.add_paragraph()
        run = p.add_run(_safe(line))
        run.font.size = Pt(10)


def _add_labeled(doc, rows):
    for label, value in rows:
        doc.add_paragraph(_safe(f"    {label}. {value}"))


def _add_question(doc, question: QuestionExportDto, number: int, options: PrintOptions):
    p = doc.add_paragraph()
    run = p.add_run(_safe(f"{number}. {display_text(question)}"))
    run.bold = True
    run.font.size = Pt(11)

    content = content_of(question)
    if question.type in (QuestionType.MCQ_SINGLE, QuestionType.MCQ_MULTI):
        _add_labeled(doc, [(letter_for(i), text_of(o)) for i, o in enumerate(entries_of(content, "options"))])
    elif question.type == QuestionType.TRUE_FALSE:
        _add_labeled(doc, [("A", "True"), ("B", "False")])
    elif question.type == QuestionType.FILL_GAP:
        _add_labeled(doc, [(i + 1, "_" * 17) for i in range(len(entries_of(content, "gaps")))])
    elif question.type == QuestionType.ORDERING:
        _add_labeled(doc, [(letter_for(i), text_of(o)) for i, o in enumerate(entries_of(content, "items"))])
    elif question.type == QuestionType.MATCHING:
        _add_matching(doc, content)
    elif question.type == QuestionType.HOTSPOT:
        if content.get("imageUrl"):
            doc.add_paragraph(_safe(f"Image: {content['imageUrl']}"))
    elif question.type == QuestionType.COMPLIANCE:
        _add_labeled(doc, [(i + 1, text_of(s)) for i, s in enumerate(entries_of(content, "statements"))])
    elif question.type == QuestionType.OPEN:
        doc.add_paragraph("Answer:")
        doc.add_paragraph("_" * 60)

    if options.include_hints and question.hint and question.hint.strip():
        _add_note(doc, f"Hint: {question.hint}")
    if options.include_explanations and question.explanation and question.explanation.strip():
        _add_note(doc, f"Explanation: {question.explanation}")

    # Spacer
    doc.add_paragraph("")


def _add_note(doc, text: str):
    p = doc.add_paragraph()
    run = p.add_run(_safe(text))
    run.italic = True
    run.font.size = Pt(9)


def _add_matching(doc, content):
    """Matching columns as a two-column table: numbered left, lettered right."""
    left = entries_of(content, "left")
    right = entries_of(content, "right")
    if not left and not right:
        return
    table = doc.add_table(rows=1, cols=2)
    table.style = "Table Grid"
    hdr = table.rows[0].cells
    hdr[0].text = "Column 1"
    hdr[1].text = "Column 2"
    for i in range(max(len(left), len(right))):
        row = table.add_row().cells
        row[0].text = _safe(f"{i + 1}. {text_of(left[i])}") if i < len(left) else ""
        row[1].text = _safe(f"{letter_for(i)}. {text_of(right[i])}") if i < len(right) else ""


def _add_answer_key(doc, render_order: List[QuestionExportDto]):
    for entry, question in zip(build_answer_key(render_order), render_order):
        lines = format_answer(entry, question)
        p = doc.add_paragraph()
        run = p.add_run(f"{entry.index}. ")
        run.bold = True
        p.add_run(_safe(lines[0]))
        for line in lines[1:]:
            p.add_run().add_break()
            p.add_run(_safe(line))
