"""
Printable HTML export.

Writes a single self-contained HTML document: optional cover, quiz headers,
questions (sequential or grouped by type) and the answer key. Output goes
through HtmlWriter, an append-only wrapper around any text sink.
"""

import io
import logging
from html import escape
from typing import List, Optional

from quizexport.answer_key import build_answer_key
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
from quizexport.models import ExportFile, ExportPayload, QuestionExportDto, QuestionType
from quizexport.ordering import question_groups

logger = logging.getLogger(__name__)

HTML_MIME_TYPE = "text/html; charset=utf-8"

BLANK_LINE = "_________________"
ANSWER_LINE = "_" * 69

STYLE = (
    "body{font-family:sans-serif;margin:24px;line-height:1.6;padding-bottom:40px;} "
    "h1{margin-bottom:0;} "
    "h2{margin-top:32px;border-bottom:2px solid #333;padding-bottom:8px;} "
    "h3{margin-top:24px;color:#555;} "
    ".meta{color:#555;font-size:14px;} "
    ".page-break{page-break-before:always;} "
    ".question{margin:20px 0;padding:12px;background:#f9f9f9;border-left:3px solid #333;"
    "page-break-inside:avoid;} "
    ".question-header{font-weight:bold;font-size:16px;margin-bottom:8px;} "
    ".question-content{margin:8px 0;} "
    ".question-content ul{list-style:none;padding-left:0;} "
    ".hint{margin-top:12px;padding:12px;background:#fffbea;border-left:4px solid #fbbf24;"
    "color:#92400e;font-size:14px;} "
    ".explanation{margin-top:12px;padding:12px;background:#dbeafe;border-left:4px solid #3b82f6;"
    "color:#1e3a8a;font-size:14px;} "
    ".answer-key{margin-top:32px;} "
    ".answer-key h2{margin-top:0;} "
    ".answer-entry{margin:8px 0;padding:8px;background:#f9f9f9;} "
    ".cover{margin-bottom:24px;border-bottom:1px solid #ddd;padding-bottom:12px;} "
    ".type-section{margin-top:32px;} "
    ".matching-columns{display:grid;grid-template-columns:1fr 1fr;gap:40px;margin-top:8px;} "
    ".matching-col h4{margin:0 0 8px 0;color:#374151;font-size:14px;} "
)


class HtmlWriter:
    """Append-only HTML writer. Text passed to ``text`` is escaped."""

    def __init__(self, sink=None):
        self.sink = sink if sink is not None else io.StringIO()

    def raw(self, markup: str) -> "HtmlWriter":
        self.sink.write(markup)
        return self

    def text(self, value) -> "HtmlWriter":
        self.sink.write(escape("" if value is None else str(value)))
        return self

    def element(self, tag: str, value, css_class: Optional[str] = None) -> "HtmlWriter":
        """Write ``<tag class=...>escaped value</tag>``."""
        self.open(tag, css_class)
        self.text(value)
        return self.close(tag)

    def open(self, tag: str, css_class: Optional[str] = None, **attrs) -> "HtmlWriter":
        parts = [tag]
        if css_class:
            parts.append(f'class="{css_class}"')
        for name, value in attrs.items():
            parts.append(f'{name}="{escape(str(value))}"')
        self.sink.write(f"<{' '.join(parts)}>")
        return self

    def close(self, tag: str) -> "HtmlWriter":
        self.sink.write(f"</{tag}>")
        return self

    def page_break(self) -> "HtmlWriter":
        return self.raw('<div class="page-break"></div>')

    def labeled_list(self, rows) -> "HtmlWriter":
        """Write a bare list of (label, text) rows."""
        self.open("ul")
        for label, value in rows:
            self.open("li").open("strong").text(f"{label}.").close("strong")
            self.text(f" {value}").close("li")
        return self.close("ul")


def export_html(payload: ExportPayload, config: Optional[dict] = None) -> ExportFile:
    """Export quizzes to a printable HTML document.

    Args:
        payload: The export payload.
        config: Unused; accepted so all renderers share one signature.

    Returns:
        ExportFile named ``{prefix}.html``.
    """
    writer = HtmlWriter()
    write_document(writer, payload)
    data = writer.sink.getvalue().encode("utf-8")
    return ExportFile.from_bytes(f"{payload.filename_prefix}.html", HTML_MIME_TYPE, data)


def write_document(writer: HtmlWriter, payload: ExportPayload) -> List[QuestionExportDto]:
    """Write the whole document and return the questions in render order."""
    options = payload.print_options
    if len(payload.quizzes) == 1:
        page_title = payload.quizzes[0].title
    else:
        page_title = "Multiple Quiz Export"

    writer.raw('<!DOCTYPE html><html><head><meta charset="utf-8"/>')
    writer.element("title", page_title)
    writer.raw("<style>").raw(STYLE)
    writer.raw("@media print{@page{margin:0.5in;@bottom-center{content:'Version: ")
    writer.text(payload.version_code)
    writer.raw("';font-size:10px;color:#666;}}} </style></head><body>")

    if options.include_cover:
        _write_cover(writer, payload)
        writer.page_break()

    for quiz in payload.quizzes:
        if len(payload.quizzes) > 1 or not options.include_cover:
            _write_quiz_header(writer, quiz, payload)

    render_order = _write_questions(writer, payload)

    if options.answers_on_separate_pages:
        writer.page_break()
    _write_answer_key(writer, render_order)
    writer.raw("</body></html>")
    return render_order


def _write_cover(writer: HtmlWriter, payload: ExportPayload):
    writer.open("div", "cover")
    if len(payload.quizzes) == 1:
        quiz = payload.quizzes[0]
        writer.element("h1", quiz.title)
        if payload.print_options.include_metadata:
            _write_quiz_meta(writer, quiz)
        if quiz.description and quiz.description.strip():
            writer.element("p", quiz.description)
    else:
        writer.element("h1", "Multiple Quiz Export")
        writer.element("p", f"Total Quizzes: {len(payload.quizzes)}", "meta")
        writer.element("p", f"Total Questions: {payload.question_count}", "meta")
    writer.raw('<p><strong>Content:</strong> <a href="#answer-key">Jump to Answer Key</a></p>')
    writer.close("div")


def _write_quiz_meta(writer: HtmlWriter, quiz):
    writer.element("p", quiz_meta_line(quiz), "meta")
    if quiz.tags:
        writer.element("p", f"Tags: {', '.join(quiz.tags)}", "meta")


def _write_quiz_header(writer: HtmlWriter, quiz, payload: ExportPayload):
    writer.open("section", "quiz")
    writer.element("h2", quiz.title)
    if payload.print_options.include_metadata:
        _write_quiz_meta(writer, quiz)
    if quiz.description and quiz.description.strip():
        writer.element("p", quiz.description)
    writer.close("section")


def _write_questions(writer: HtmlWriter, payload: ExportPayload) -> List[QuestionExportDto]:
    render_order = []
    number = 1
    for i, (q_type, questions) in enumerate(question_groups(payload)):
        if q_type is not None:
            if i > 0:
                writer.page_break()
            writer.open("div", "type-section")
            writer.element("h3", f"{type_label(q_type)} Questions")
        for question in questions:
            _write_question(writer, question, number, payload)
            render_order.append(question)
            number += 1
        if q_type is not None:
            writer.close("div")
    return render_order


def _write_question(writer: HtmlWriter, question: QuestionExportDto, number: int, payload: ExportPayload):
    options = payload.print_options
    writer.open("div", "question")
    writer.element("div", f"{number}. {display_text(question)}", "question-header")
    writer.open("div", "question-content")
    CONTENT_WRITERS[question.type](writer, content_of(question))
    writer.close("div")

    if options.include_hints and question.hint and question.hint.strip():
        writer.open("div", "hint").raw("<strong>Hint:</strong> ").text(question.hint).close("div")
    if options.include_explanations and question.explanation and question.explanation.strip():
        writer.open("div", "explanation").raw("<strong>Explanation:</strong> ")
        writer.text(question.explanation).close("div")
    writer.close("div")


# ---------------------------------------------------------------------------
# Question content, one writer per type
# ---------------------------------------------------------------------------


def _lettered(entries):
    return [(letter_for(i), text_of(e)) for i, e in enumerate(entries)]


def _numbered(entries):
    return [(str(i + 1), text_of(e)) for i, e in enumerate(entries)]


def _content_choices(writer, content):
    options = entries_of(content, "options")
    if options:
        writer.labeled_list(_lettered(options))


def _content_true_false(writer, content):
    writer.labeled_list([("A", "True"), ("B", "False")])


def _content_fill_gap(writer, content):
    gaps = entries_of(content, "gaps")
    if gaps:
        writer.labeled_list([(str(i + 1), BLANK_LINE) for i in range(len(gaps))])


def _content_ordering(writer, content):
    items = entries_of(content, "items")
    if items:
        writer.labeled_list(_lettered(items))


def _content_matching(writer, content):
    left = entries_of(content, "left")
    right = entries_of(content, "right")
    if not left and not right:
        return
    writer.open("div", "matching-columns")
    writer.open("div", "matching-col").element("h4", "Column 1")
    writer.labeled_list(_numbered(left)).close("div")
    writer.open("div", "matching-col").element("h4", "Column 2")
    writer.labeled_list(_lettered(right)).close("div")
    writer.close("div")


def _content_hotspot(writer, content):
    if content.get("imageUrl"):
        writer.element("p", f"Image: {content['imageUrl']}")


def _content_compliance(writer, content):
    statements = entries_of(content, "statements")
    if statements:
        writer.labeled_list(_numbered(statements))


def _content_open(writer, content):
    writer.raw("<p><em>Answer:</em></p>").element("p", ANSWER_LINE)


CONTENT_WRITERS = {
    QuestionType.MCQ_SINGLE: _content_choices,
    QuestionType.MCQ_MULTI: _content_choices,
    QuestionType.TRUE_FALSE: _content_true_false,
    QuestionType.FILL_GAP: _content_fill_gap,
    QuestionType.ORDERING: _content_ordering,
    QuestionType.MATCHING: _content_matching,
    QuestionType.HOTSPOT: _content_hotspot,
    QuestionType.COMPLIANCE: _content_compliance,
    QuestionType.OPEN: _content_open,
}


def _write_answer_key(writer: HtmlWriter, render_order: List[QuestionExportDto]):
    writer.open("section", "answer-key", id="answer-key")
    writer.element("h2", "Answer Key")
    for entry, question in zip(build_answer_key(render_order), render_order):
        writer.open("div", "answer-entry")
        writer.open("strong").text(f"{entry.index}.").close("strong").raw(" ")
        for i, line in enumerate(format_answer(entry, question)):
            if i > 0:
                writer.raw("<br/>")
            writer.text(line)
        writer.close("div")
    writer.close("section")
    logger.debug("_write_answer_key: wrote %d entries", len(render_order))
