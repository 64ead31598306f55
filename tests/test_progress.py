import json
import threading
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from progress import level_for, summarize
from schemas import QuizScore, UserProgress
from tests.conftest import DownCache, DownCollection


def test_new_user_gets_zeroed_record(store, users, clock):
    progress = store.get_progress("u1")
    assert progress.completed_lessons == ()
    assert progress.quiz_scores == ()
    assert progress.streak == 0
    assert progress.total_study_time == 0
    assert progress.last_active == clock.now

    stored = users.find_one({"_id": "u1"})["progress"]
    assert stored["completedLessons"] == []
    assert stored["totalStudyTime"] == 0


def test_new_user_record_is_cached(store, local_cache):
    store.get_progress("u1")
    assert json.loads(local_cache.get_item("progress_u1"))["streak"] == 0


def test_complete_lesson_is_idempotent(store):
    store.complete_lesson("u1", "1")
    progress = store.complete_lesson("u1", "1")
    assert progress.completed_lessons.count("1") == 1
    assert store.get_progress("u1").completed_lessons == ("1",)


def test_streak_at_most_once_per_day(store, clock):
    store.get_progress("u1")
    clock.advance(days=1)
    store.complete_lesson("u1", "1")
    clock.advance(hours=2)
    progress = store.complete_lesson("u1", "2")
    assert progress.streak == 1
    assert progress.completed_lessons == ("1", "2")


def test_streak_grows_on_each_new_day(store, clock):
    store.get_progress("u1")
    clock.advance(days=1)
    store.complete_lesson("u1", "1")
    clock.advance(days=1)
    progress = store.complete_lesson("u1", "2")
    assert progress.streak == 2
    assert progress.last_active == clock.now


def test_streak_not_reset_after_missed_days(store, clock):
    store.get_progress("u1")
    clock.advance(days=1)
    store.complete_lesson("u1", "1")
    clock.advance(days=5)
    assert store.complete_lesson("u1", "2").streak == 2


def test_first_lesson_on_signup_day_keeps_streak(store):
    store.get_progress("u1")
    assert store.complete_lesson("u1", "1").streak == 0


def test_repeat_lesson_does_not_touch_streak(store, clock):
    store.get_progress("u1")
    clock.advance(days=1)
    store.complete_lesson("u1", "1")
    clock.advance(days=1)
    progress = store.complete_lesson("u1", "1")
    assert progress.streak == 1
    assert progress.last_active.date() != clock.now.date()


def test_add_study_time_accumulates(store):
    before = store.get_progress("u1").total_study_time
    store.add_study_time("u1", 10)
    progress = store.add_study_time("u1", 5)
    assert progress.total_study_time == before + 15


@pytest.mark.parametrize("minutes", [0, -5, 2.5, True])
def test_add_study_time_rejects_non_positive(store, minutes):
    with pytest.raises(ValueError):
        store.add_study_time("u1", minutes)


def test_record_quiz_score_appends(store, clock):
    store.record_quiz_score("u1", 7, 10, "spanish")
    clock.advance(minutes=5)
    progress = store.record_quiz_score("u1", 9, 10, "french")
    assert [(s.score, s.total, s.language) for s in progress.quiz_scores] == [
        (7, 10, "spanish"),
        (9, 10, "french"),
    ]
    assert progress.quiz_scores[1].date == clock.now


def test_record_quiz_score_validates(store):
    with pytest.raises(ValueError):
        store.record_quiz_score("u1", 11, 10, "spanish")


def test_update_progress_merges(store):
    store.complete_lesson("u1", "1")
    progress = store.update_progress("u1", total_study_time=42)
    assert progress.total_study_time == 42
    assert progress.completed_lessons == ("1",)


def test_reads_return_independent_values(store):
    first = store.get_progress("u1")
    store.complete_lesson("u1", "1")
    assert first.completed_lessons == ()
    with pytest.raises(ValidationError):
        first.streak = 5


def test_reads_existing_camel_case_record(store, users):
    users.insert_one({"_id": "u1", "progress": {
        "completedLessons": ["1", "3"],
        "quizScores": [{"score": 3, "total": 4, "date": "2024-02-01T10:00:00.000Z", "language": "spanish"}],
        "streak": 4,
        "lastActive": "2024-02-28T18:00:00.000Z",
        "totalStudyTime": 90,
    }})
    progress = store.get_progress("u1")
    assert progress.completed_lessons == ("1", "3")
    assert progress.quiz_scores[0].date == datetime(2024, 2, 1, 10, tzinfo=timezone.utc)
    assert progress.streak == 4


def test_partial_record_fills_defaults(store, users):
    users.insert_one({"_id": "u1", "progress": {"streak": 2}})
    progress = store.get_progress("u1")
    assert progress.streak == 2
    assert progress.completed_lessons == ()


def test_invalid_record_falls_back_to_fresh(store, users):
    users.insert_one({"_id": "u1", "progress": {"streak": -3}})
    assert store.get_progress("u1").streak == 0


# ---------- Failure chain ----------

def test_remote_down_reads_cache(make_store, users, local_cache):
    make_store().complete_lesson("u1", "1")
    offline = make_store(collection=DownCollection())
    assert offline.get_progress("u1").completed_lessons == ("1",)


def test_remote_down_without_cache_gives_default(make_store, local_cache):
    offline = make_store(collection=DownCollection())
    progress = offline.get_progress("u1")
    assert progress.streak == 0
    assert local_cache.get_item("progress_u1") is None


def test_remote_down_writes_still_land_in_cache(make_store, local_cache):
    offline = make_store(collection=DownCollection())
    offline.add_study_time("u1", 10)
    assert offline.get_progress("u1").total_study_time == 10
    assert json.loads(local_cache.get_item("progress_u1"))["totalStudyTime"] == 10


def test_everything_down_still_answers(make_store):
    offline = make_store(collection=DownCollection(), local=DownCache())
    assert offline.get_progress("u1") == UserProgress.initial(offline.clock())
    assert offline.save_progress("u1", UserProgress()) is False
    assert offline.complete_lesson("u1", "1").completed_lessons == ("1",)


def test_cache_down_remote_still_works(make_store, users):
    store = make_store(local=DownCache())
    store.add_study_time("u1", 20)
    assert users.find_one({"_id": "u1"})["progress"]["totalStudyTime"] == 20


# ---------- Summary ----------

@pytest.mark.parametrize("completed, level", [
    (0, "Beginner"),
    (9, "Beginner"),
    (10, "Intermediate"),
    (19, "Intermediate"),
    (20, "Advanced"),
])
def test_level_for(completed, level):
    assert level_for(completed) == level


def test_summarize(clock):
    progress = UserProgress(
        completed_lessons=("1", "2", "3", "4", "5"),
        quiz_scores=(
            QuizScore(score=8, total=10, date=clock.now, language="spanish"),
            QuizScore(score=1, total=2, date=clock.now, language="spanish"),
        ),
        streak=3,
        total_study_time=150,
    )
    summary = summarize(progress)
    assert summary.lessons_completed == 5
    assert summary.study_hours == 2
    assert summary.quizzes_taken == 2
    assert summary.average_quiz_percentage == 65.0
    assert summary.completion_percentage == 25.0
    assert summary.level == "Beginner"


def test_summarize_empty_progress():
    summary = summarize(UserProgress())
    assert summary.average_quiz_percentage == 0.0
    assert summary.completion_percentage == 0.0
    assert summary.study_hours == 0


def test_corrupt_cache_file_recovers_on_next_write(make_store, local_cache):
    with open(local_cache.path, "w", encoding="utf-8") as f:
        f.write("{truncated")
    offline = make_store(collection=DownCollection())
    assert offline.save_progress("u1", UserProgress()) is True
    assert offline.add_study_time("u1", 10).total_study_time == 10
    assert offline.get_progress("u1").total_study_time == 10


def test_concurrent_updates_with_remote_down(make_store, local_cache):
    offline = make_store(collection=DownCollection())
    threads = [
        threading.Thread(target=offline.add_study_time, args=(f"u{i}", 5))
        for i in range(16)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    for i in range(16):
        assert json.loads(local_cache.get_item(f"progress_u{i}"))["totalStudyTime"] == 5
