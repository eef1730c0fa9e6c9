"""Tests for answer key construction (quizexport/answer_key.py)."""

import logging

from quizexport.answer_key import ERROR_KEY, build_answer_key
from quizexport.models import QuestionType


class TestBuildAnswerKey:
    def test_preserves_input_order_and_numbers_from_one(self, make_question):
        questions = [
            make_question(id="q3", type=QuestionType.TRUE_FALSE),
            make_question(id="q1", type=QuestionType.MCQ_SINGLE),
            make_question(id="q2", type=QuestionType.OPEN),
        ]
        entries = build_answer_key(questions)
        assert [e.index for e in entries] == [1, 2, 3]
        assert [e.question_id for e in entries] == ["q3", "q1", "q2"]
        assert [e.question_type for e in entries] == [
            QuestionType.TRUE_FALSE,
            QuestionType.MCQ_SINGLE,
            QuestionType.OPEN,
        ]

    def test_normalized_answers(self, make_question):
        entries = build_answer_key([make_question(type=QuestionType.MCQ_SINGLE)])
        assert entries[0].normalized_answer == {"correctOptionId": "opt1"}
        assert not entries[0].failed

    def test_bad_content_yields_error_marker(self, make_question, caplog):
        questions = [
            make_question(id="bad", type=QuestionType.MCQ_SINGLE, content={"options": []}),
            make_question(id="good", type=QuestionType.TRUE_FALSE),
        ]
        with caplog.at_level(logging.WARNING, logger="quizexport.answer_key"):
            entries = build_answer_key(questions)
        assert len(entries) == 2
        assert entries[0].failed
        assert ERROR_KEY in entries[0].normalized_answer
        assert entries[1].normalized_answer == {"answer": True}
        assert "bad" in caplog.text

    def test_null_content_does_not_raise(self, make_question):
        entries = build_answer_key([make_question(type=QuestionType.MATCHING, content=None)])
        assert entries[0].failed

    def test_empty_input(self):
        assert build_answer_key([]) == []

    def test_accepts_generator(self, make_question):
        questions = (make_question(type=QuestionType.OPEN) for _ in range(2))
        assert [e.index for e in build_answer_key(questions)] == [1, 2]
