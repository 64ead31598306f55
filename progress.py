"""
Per-user progress: streaks, completed lessons, quiz history and study time.

Every read returns a fresh immutable UserProgress and every mutation replaces
the stored record wholesale (read-modify-write, last write wins).
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from errors import StorageUnavailable
from schemas import ProgressSummary, QuizScore, UserProgress
from storage import TieredStorage

logger = logging.getLogger(__name__)

# Lessons counted as "everything" on the progress chart
DEFAULT_TOTAL_LESSONS = 20
INTERMEDIATE_AT = 10
ADVANCED_AT = 20


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressStore:
    def __init__(self, storage: TieredStorage, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.clock = clock or utc_now

    def get_progress(self, user_id: str) -> UserProgress:
        """Read a user's progress. Falls back to the cache, then to a fresh record; never raises."""
        try:
            record, source = self.storage.get(user_id)
        except StorageUnavailable as exc:
            logger.error("Progress for %s unavailable, starting fresh: %s", user_id, exc)
            return UserProgress.initial(self.clock())

        if record is None:
            progress = UserProgress.initial(self.clock())
            if source == self.storage.primary.name:
                logger.info("Creating progress record for %s", user_id)
                self.save_progress(user_id, progress)
            return progress

        try:
            return UserProgress.model_validate(record)
        except ValidationError as exc:
            logger.error("Stored progress for %s is invalid, starting fresh: %s", user_id, exc)
            return UserProgress.initial(self.clock())

    def save_progress(self, user_id: str, progress: UserProgress) -> bool:
        stored = self.storage.set(user_id, progress.to_document())
        if not stored:
            logger.error("Progress for %s was not persisted anywhere", user_id)
        return stored

    def update_progress(self, user_id: str, **changes) -> UserProgress:
        """Merge `changes` (snake_case field names) into the stored progress."""
        return self._merge(user_id, self.get_progress(user_id), changes)

    def _merge(self, user_id: str, current: UserProgress, changes) -> UserProgress:
        updated = UserProgress.model_validate({**current.model_dump(), **changes})
        self.save_progress(user_id, updated)
        return updated

    def complete_lesson(self, user_id: str, lesson_id: str) -> UserProgress:
        progress = self.get_progress(user_id)
        if lesson_id in progress.completed_lessons:
            return progress

        now = self.clock()
        streak = progress.streak
        # no reset after missed days: any new calendar day extends the streak
        if progress.last_active is None or progress.last_active.date() != now.date():
            streak += 1
        updated = progress.model_copy(update={
            "completed_lessons": progress.completed_lessons + (lesson_id,),
            "streak": streak,
            "last_active": now,
        })
        self.save_progress(user_id, updated)
        logger.info("User %s completed lesson %s (streak %d)", user_id, lesson_id, streak)
        return updated

    def add_study_time(self, user_id: str, minutes: int) -> UserProgress:
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            raise ValueError("minutes must be a positive integer")
        progress = self.get_progress(user_id)
        updated = progress.model_copy(update={"total_study_time": progress.total_study_time + minutes})
        self.save_progress(user_id, updated)
        return updated

    def record_quiz_score(self, user_id: str, score: int, total: int, language: str) -> UserProgress:
        if not 0 <= score <= total:
            raise ValueError("score must be between 0 and total")
        entry = QuizScore(score=score, total=total, date=self.clock(), language=language)
        current = self.get_progress(user_id)
        updated = self._merge(user_id, current, {"quiz_scores": current.quiz_scores + (entry,)})
        logger.info("User %s scored %d/%d in %s", user_id, score, total, language)
        return updated


def level_for(lessons_completed: int) -> str:
    if lessons_completed >= ADVANCED_AT:
        return "Advanced"
    if lessons_completed >= INTERMEDIATE_AT:
        return "Intermediate"
    return "Beginner"


def summarize(progress: UserProgress, total_lessons: int = DEFAULT_TOTAL_LESSONS) -> ProgressSummary:
    completed = len(progress.completed_lessons)
    percentages = [s.score / s.total * 100 for s in progress.quiz_scores if s.total]
    average = sum(percentages) / len(percentages) if percentages else 0.0
    completion = min(100.0, completed / total_lessons * 100) if total_lessons else 0.0
    return ProgressSummary(
        streak=progress.streak,
        lessons_completed=completed,
        study_hours=round(progress.total_study_time / 60),
        quizzes_taken=len(progress.quiz_scores),
        average_quiz_percentage=round(average, 1),
        level=level_for(completed),
        completion_percentage=round(completion, 1),
    )
