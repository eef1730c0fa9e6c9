"""
Render-order helpers shared by the print renderers.

Every print renderer fixes one question order before writing the body and
then builds the answer key from that same order.
"""

from typing import List, Optional, Tuple

from quizexport.models import ExportPayload, QuestionExportDto, QuestionType

QuestionGroup = Tuple[Optional[QuestionType], List[QuestionExportDto]]


def all_questions(payload: ExportPayload) -> List[QuestionExportDto]:
    """Questions of every quiz, concatenated in quiz order."""
    questions = []
    for quiz in payload.quizzes:
        questions.extend(quiz.questions)
    return questions


def group_questions_by_type(questions: List[QuestionExportDto]) -> List[QuestionGroup]:
    """Bucket questions by type, buckets in first-occurrence order.

    Questions keep their relative order inside a bucket.
    """
    groups = {}
    for question in questions:
        groups.setdefault(question.type, []).append(question)
    return list(groups.items())


def question_groups(payload: ExportPayload) -> List[QuestionGroup]:
    """Groups to render for a payload.

    Without type grouping there is a single group whose type is None.
    """
    questions = all_questions(payload)
    if payload.print_options.group_questions_by_type:
        return group_questions_by_type(questions)
    return [(None, questions)] if questions else []


def flatten(groups: List[QuestionGroup]) -> List[QuestionExportDto]:
    """The render order implied by a list of groups."""
    return [question for _, questions in groups for question in questions]
