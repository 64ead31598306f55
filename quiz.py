"""
Multiple-choice quiz generation and scoring.

Questions come from a content pool in pool order. The correct answer of each
question depends only on that order; the choice order is the only random part,
so a quiz rebuilt from the same pool grades the same way.
"""
import logging
import random
from typing import List, Optional, Sequence

from schemas import AnswerResult, ContentItem, QuizQuestion, QuizResult

logger = logging.getLogger(__name__)

DEFAULT_QUIZ_SIZE = 10
DISTRACTOR_COUNT = 3


class QuizFinished(Exception):
    """An answer was given after the last question."""


def generate_quiz(
    content_pool: Sequence[ContentItem],
    size: int = DEFAULT_QUIZ_SIZE,
    rng: Optional[random.Random] = None,
) -> List[QuizQuestion]:
    """
    Build up to `size` questions from the head of `content_pool`.

    Distractors for item i are the translations of the first three other
    items of the pool whose translation differs from item i's, so the
    correct answer appears exactly once. Pools smaller than four items give
    fewer choices.
    """
    if size < 0:
        raise ValueError("quiz size must be non-negative")
    rng = rng or random.Random()
    translations = [item.translation for item in content_pool]

    questions: List[QuizQuestion] = []
    for i, item in enumerate(content_pool[:size]):
        distractors = [
            t for j, t in enumerate(translations) if j != i and t != item.translation
        ][:DISTRACTOR_COUNT]
        choices = [item.translation, *distractors]
        rng.shuffle(choices)
        questions.append(QuizQuestion(
            id=i,
            prompt_text=item.text,
            correct_answer=item.translation,
            answer_choices=tuple(choices),
            category="vocabulary" if item.word else "phrase",
        ))
    logger.debug("Generated %d questions from a pool of %d items", len(questions), len(translations))
    return questions


def result_message(percentage: float) -> str:
    if percentage >= 80:
        return "Excellent!"
    if percentage >= 60:
        return "Good job!"
    return "Keep practicing!"


class QuizSession:
    """Walks through a quiz one answer at a time, keeping a running score."""

    def __init__(self, questions: Sequence[QuizQuestion]):
        self.questions = list(questions)
        self.index = 0
        self.score = 0
        self.breakdown: List[AnswerResult] = []

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.index >= self.total

    @property
    def current(self) -> Optional[QuizQuestion]:
        return None if self.finished else self.questions[self.index]

    def answer(self, choice: Optional[str]) -> bool:
        question = self.current
        if question is None:
            raise QuizFinished("every question has already been answered")
        is_correct = choice == question.correct_answer
        if is_correct:
            self.score += 1
        self.breakdown.append(AnswerResult(
            question_id=question.id,
            chosen=choice,
            correct=question.correct_answer,
            is_correct=is_correct,
        ))
        self.index += 1
        return is_correct

    def result(self) -> QuizResult:
        percentage = (self.score / self.total) * 100 if self.total else 0.0
        return QuizResult(
            score=self.score,
            total=self.total,
            percentage=round(percentage, 1),
            message=result_message(percentage),
            breakdown=list(self.breakdown),
        )


def score_quiz(questions: Sequence[QuizQuestion], answers: Sequence[Optional[str]]) -> QuizResult:
    if len(answers) != len(questions):
        raise ValueError(f"expected {len(questions)} answers, got {len(answers)}")
    session = QuizSession(questions)
    for choice in answers:
        session.answer(choice)
    return session.result()
