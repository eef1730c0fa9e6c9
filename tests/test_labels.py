"""Tests for positional labels and answer formatting (quizexport/labels.py)."""

from quizexport.answer_key import AnswerKeyEntry, build_answer_key
from quizexport.labels import (
    ANSWER_FORMATTERS,
    ASCII_ARROW,
    MANUAL_GRADING,
    NO_ANSWER,
    NOT_AVAILABLE,
    TYPE_LABELS,
    display_text,
    format_answer,
    letter_for,
    position_map,
    quiz_meta_line,
    resolve,
    type_label,
)
from quizexport.models import QuestionType


def _answer(question):
    entry = build_answer_key([question])[0]
    return format_answer(entry, question)


def _entry(q_type, normalized):
    return AnswerKeyEntry(index=1, question_id="q", question_type=q_type, normalized_answer=normalized)


# ---------------------------------------------------------------------------
# TestPositions
# ---------------------------------------------------------------------------


class TestPositions:
    def test_letters(self):
        assert [letter_for(i) for i in range(3)] == ["A", "B", "C"]
        assert letter_for(25) == "Z"
        assert letter_for(26) == "AA"

    def test_position_map_uses_string_ids(self):
        labels = position_map([{"id": 7}, {"id": "x"}, {"text": "no id"}])
        assert labels == {"7": "A", "x": "B"}

    def test_position_map_repeated_id_keeps_first(self):
        assert position_map([{"id": "x"}, {"id": "y"}, {"id": "x"}]) == {"x": "A", "y": "B"}

    def test_repeated_option_id_labels_first_option(self, make_question):
        question = make_question(content={"options": [{"id": "x", "correct": True}, {"id": "x"}]})
        assert _answer(question) == ["A"]

    def test_unknown_id_resolves_raw(self):
        assert resolve({"a": "A"}, "zzz") == "zzz"


class TestTypeLabels:
    def test_every_type_has_label_and_formatter(self):
        assert set(TYPE_LABELS) == set(QuestionType)
        assert set(ANSWER_FORMATTERS) == set(QuestionType)

    def test_label_text(self):
        assert type_label(QuestionType.MCQ_SINGLE) == "Multiple Choice (Single Answer)"
        assert type_label("OPEN") == "Open-Ended"


# ---------------------------------------------------------------------------
# TestFormatAnswer
# ---------------------------------------------------------------------------


class TestFormatAnswer:
    def test_single_choice_letter(self, make_question):
        assert _answer(make_question(type=QuestionType.MCQ_SINGLE)) == ["B"]

    def test_multi_choice_letters(self, make_question):
        assert _answer(make_question(type=QuestionType.MCQ_MULTI)) == ["A, C"]

    def test_true_false(self, make_question):
        assert _answer(make_question(type=QuestionType.TRUE_FALSE)) == ["True"]
        assert _answer(make_question(type=QuestionType.TRUE_FALSE, content={"answer": False})) == ["False"]

    def test_matching_one_line_per_pair(self, make_question):
        assert _answer(make_question(type=QuestionType.MATCHING)) == ["1 → B", "2 → C", "3 → A"]

    def test_matching_ascii_arrow(self, make_question):
        question = make_question(type=QuestionType.MATCHING)
        entry = build_answer_key([question])[0]
        assert format_answer(entry, question, arrow=ASCII_ARROW)[0] == "1 -> B"

    def test_ordering_arrow_joined(self, make_question):
        assert _answer(make_question(type=QuestionType.ORDERING)) == ["A → C → B"]

    def test_compliance_numbers(self, make_question):
        assert _answer(make_question(type=QuestionType.COMPLIANCE)) == ["Compliant: 1, 3"]

    def test_fill_gap(self, make_question):
        assert _answer(make_question(type=QuestionType.FILL_GAP)) == ["1. Paris, 2. Eiffel Tower"]

    def test_hotspot_region_position(self, make_question):
        assert _answer(make_question(type=QuestionType.HOTSPOT)) == ["Region: 2"]

    def test_open_reference_answer(self, make_question):
        assert _answer(make_question(type=QuestionType.OPEN)) == [
            "Photosynthesis converts light to energy."
        ]

    def test_open_manual_grading(self, make_question):
        assert _answer(make_question(type=QuestionType.OPEN, content={})) == [MANUAL_GRADING]

    def test_error_entry_is_not_available(self, make_question):
        question = make_question(type=QuestionType.MCQ_SINGLE, content={"options": []})
        assert _answer(question) == [NOT_AVAILABLE]

    def test_missing_field_is_not_available(self):
        assert format_answer(_entry(QuestionType.MCQ_SINGLE, {}), None) == [NOT_AVAILABLE]
        assert format_answer(_entry(QuestionType.TRUE_FALSE, {}), None) == [NOT_AVAILABLE]

    def test_null_normalized_answer(self):
        assert format_answer(_entry(QuestionType.OPEN, None), None) == [NO_ANSWER]

    def test_id_not_in_content_printed_raw(self, make_question):
        question = make_question(type=QuestionType.MCQ_SINGLE)
        entry = _entry(QuestionType.MCQ_SINGLE, {"correctOptionId": "ghost"})
        assert format_answer(entry, question) == ["ghost"]

    def test_matching_unknown_ids_printed_raw(self, make_question):
        question = make_question(type=QuestionType.MATCHING)
        entry = _entry(QuestionType.MATCHING, {"pairs": [{"leftId": "lx", "rightId": "r1"}]})
        assert format_answer(entry, question) == ["lx → A"]

    def test_labels_follow_each_question_content(self, make_question):
        """Same option id maps to different letters in different questions."""
        first = make_question(
            type=QuestionType.MCQ_SINGLE,
            content={"options": [{"id": "x", "correct": True}, {"id": "y"}]},
        )
        second = make_question(
            type=QuestionType.MCQ_SINGLE,
            content={"options": [{"id": "y"}, {"id": "x", "correct": True}]},
        )
        entries = build_answer_key([first, second])
        assert format_answer(entries[0], first) == ["A"]
        assert format_answer(entries[1], second) == ["B"]

    def test_deterministic(self, make_question):
        question = make_question(type=QuestionType.MATCHING)
        assert _answer(question) == _answer(question)


class TestDisplayText:
    def test_fill_gap_placeholders_replaced(self, make_question):
        question = make_question(type=QuestionType.FILL_GAP)
        assert display_text(question) == "The capital of France is ____ and its tower is the ____."

    def test_fill_gap_without_text_uses_question_text(self, make_question):
        question = make_question(type=QuestionType.FILL_GAP, content={"gaps": []}, question_text="Fill me")
        assert display_text(question) == "Fill me"

    def test_other_types_use_question_text(self, make_question):
        assert display_text(make_question(question_text="Why?")) == "Why?"


class TestQuizMetaLine:
    def test_full(self, make_quiz):
        assert quiz_meta_line(make_quiz()) == "Difficulty: EASY | Category: General | Time: 10 min"

    def test_sparse(self, make_quiz):
        quiz = make_quiz(difficulty=None, category=None, estimated_time=None)
        assert quiz_meta_line(quiz) == "Difficulty: N/A"
