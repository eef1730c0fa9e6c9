"""
Answer key construction.

The answer key is always built from the questions in the order the body
rendered them, so entry N matches the question numbered N on the page.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from quizexport.models import QuestionExportDto, QuestionType
from quizexport.normalizer import extract_correct_answer

logger = logging.getLogger(__name__)

ERROR_KEY = "error"


class AnswerKeyEntry(BaseModel):
    """One line of the answer key, numbered as the body numbered it."""

    model_config = ConfigDict(frozen=True)

    index: int
    question_id: str
    question_type: QuestionType
    normalized_answer: Optional[Dict[str, Any]]

    @property
    def failed(self) -> bool:
        return self.normalized_answer is not None and ERROR_KEY in self.normalized_answer


def build_answer_key(questions: Iterable[QuestionExportDto]) -> List[AnswerKeyEntry]:
    """Build 1-based answer key entries for questions in render order.

    Content that cannot be normalized yields an entry carrying an error
    marker instead of raising.
    """
    entries = []
    for index, question in enumerate(questions, start=1):
        try:
            normalized = extract_correct_answer(question.type, question.content)
        except ValueError as e:
            logger.warning(
                "build_answer_key: question %s (%s) has unusable content: %s",
                question.id, question.type.value, e,
            )
            normalized = {ERROR_KEY: str(e)}
        entries.append(
            AnswerKeyEntry(
                index=index,
                question_id=question.id,
                question_type=question.type,
                normalized_answer=normalized,
            )
        )
    return entries
