"""
Schemas for Lingo

Content models describe the lesson catalog. UserProgress is the per-user
record stored in the `users` collection under the `progress` field; it is
serialized with camelCase keys and is immutable once built.
"""
from datetime import datetime
from typing import Optional, List, Tuple, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Content ----------

class Language(BaseModel):
    id: str
    name: str
    flag: str


class ContentItem(BaseModel):
    """A single word or phrase inside a lesson"""
    word: Optional[str] = None
    phrase: Optional[str] = None
    translation: str
    pronunciation: Optional[str] = None

    @model_validator(mode="after")
    def _needs_text(self):
        if not (self.word or self.phrase):
            raise ValueError("content item needs a word or a phrase")
        return self

    @property
    def text(self) -> str:
        return self.word or self.phrase


class Lesson(BaseModel):
    id: str
    title: str
    category: str
    difficulty: str = Field("Beginner", description="Beginner|Intermediate|Advanced")
    content: List[ContentItem] = []


class Flashcard(ContentItem):
    """Content item tagged with the category of its lesson"""
    category: str


# ---------- Progress ----------

class QuizScore(CamelModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    date: datetime
    language: str


class UserProgress(CamelModel):
    """Per-user learning progress"""
    model_config = ConfigDict(frozen=True)

    completed_lessons: Tuple[str, ...] = ()
    quiz_scores: Tuple[QuizScore, ...] = ()
    streak: int = Field(0, ge=0)
    last_active: Optional[datetime] = None
    total_study_time: int = Field(0, ge=0, description="Minutes")

    @classmethod
    def initial(cls, now: datetime) -> "UserProgress":
        return cls(last_active=now)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProgressSummary(CamelModel):
    streak: int
    lessons_completed: int
    study_hours: int
    quizzes_taken: int
    average_quiz_percentage: float
    level: str
    completion_percentage: float


# ---------- Quiz ----------

class QuizQuestion(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: int
    prompt_text: str
    correct_answer: str
    answer_choices: Tuple[str, ...]
    category: str = Field(..., description="vocabulary|phrase")


class AnswerResult(CamelModel):
    question_id: int
    chosen: Optional[str]
    correct: str
    is_correct: bool


class QuizResult(CamelModel):
    score: int
    total: int
    percentage: float
    message: str
    breakdown: List[AnswerResult] = []


# ---------- Requests ----------

class QuizSubmit(CamelModel):
    user_id: Optional[str] = None
    answers: List[Optional[str]]


class StudyTimeAdd(CamelModel):
    minutes: int = Field(..., gt=0)
