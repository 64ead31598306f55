import logging
import os
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

import catalog
from cache import DEFAULT_CACHE_PATH, LocalCache
from database import DATABASE_NAME, DATABASE_TIMEOUT_MS, DATABASE_URL, db, get_collection
from log_config import configure_logging
from progress import ProgressStore, summarize
from quiz import generate_quiz, score_quiz
from schemas import (
    ContentItem,
    Flashcard,
    Language,
    Lesson,
    ProgressSummary,
    QuizQuestion,
    QuizResult,
    QuizScore,
    QuizSubmit,
    StudyTimeAdd,
    UserProgress,
)
from storage import CacheProgressTier, RemoteProgressTier, TieredStorage

configure_logging()
logger = logging.getLogger(__name__)

QUIZ_SIZE = int(os.getenv("QUIZ_SIZE", 10))
STUDY_MINUTES_PER_LESSON = 10

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Services ----------

@lru_cache
def get_progress_store() -> ProgressStore:
    storage = TieredStorage(
        RemoteProgressTier(get_collection("users")),
        CacheProgressTier(LocalCache()),
    )
    logger.info("Progress store ready, remote tier %s", "configured" if db is not None else "not configured")
    return ProgressStore(storage)

# ---------- Health ----------

@app.get("/")
def read_root():
    return {"message": "Hello from the Lingo backend!"}

@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if DATABASE_URL else "❌ Not Set",
        "database_name": "✅ Set" if DATABASE_NAME else "❌ Not Set",
        "timeout_ms": DATABASE_TIMEOUT_MS,
        "connection_status": "Not Connected",
        "users_collection": False,
        "progress_cache": DEFAULT_CACHE_PATH,
    }
    if db is None:
        response["database"] = "❌ Database not initialized, progress served from the local cache"
        return response
    try:
        collections = db.list_collection_names()
    except PyMongoError as e:
        response["database"] = f"⚠️  Unreachable within {DATABASE_TIMEOUT_MS} ms: {str(e)[:50]}"
        return response
    response["users_collection"] = "users" in collections
    response["database"] = "✅ Connected & Working"
    response["connection_status"] = "Connected"
    return response

# ---------- Content ----------

@app.get("/api/languages", response_model=List[Language])
def list_languages():
    return catalog.LANGUAGES

@app.get("/api/languages/{language}/lessons", response_model=List[Lesson])
def list_lessons(language: str):
    return catalog.get_lessons(language)

@app.get("/api/languages/{language}/flashcards", response_model=List[Flashcard])
def list_flashcards(language: str):
    return catalog.flashcards(language)

# ---------- Quiz ----------

@app.get("/api/languages/{language}/quiz", response_model=List[QuizQuestion])
def get_quiz(language: str, size: int = Query(QUIZ_SIZE, ge=0, le=50)):
    return generate_quiz(catalog.content_pool(language), size)

@app.post("/api/languages/{language}/quiz/submit", response_model=QuizResult)
def submit_quiz(
    language: str,
    payload: QuizSubmit,
    size: int = Query(QUIZ_SIZE, ge=0, le=50),
    store: ProgressStore = Depends(get_progress_store),
):
    # Correct answers depend only on pool order, so a rebuilt quiz grades the submission
    questions = generate_quiz(catalog.content_pool(language), size)
    if len(payload.answers) != len(questions):
        raise HTTPException(status_code=400, detail="Invalid number of answers")

    result = score_quiz(questions, payload.answers)
    if payload.user_id:
        store.record_quiz_score(payload.user_id, result.score, result.total, language)
    return result

# ---------- Progress ----------

@app.get("/api/users/{user_id}/progress", response_model=UserProgress)
def read_progress(user_id: str, store: ProgressStore = Depends(get_progress_store)):
    return store.get_progress(user_id)

@app.get("/api/users/{user_id}/summary", response_model=ProgressSummary)
def read_summary(user_id: str, store: ProgressStore = Depends(get_progress_store)):
    return summarize(store.get_progress(user_id))

@app.post("/api/users/{user_id}/lessons/{lesson_id}/complete", response_model=UserProgress)
def complete_lesson(user_id: str, lesson_id: str, store: ProgressStore = Depends(get_progress_store)):
    store.complete_lesson(user_id, lesson_id)
    return store.add_study_time(user_id, STUDY_MINUTES_PER_LESSON)

@app.post("/api/users/{user_id}/study-time", response_model=UserProgress)
def add_study_time(user_id: str, payload: StudyTimeAdd, store: ProgressStore = Depends(get_progress_store)):
    try:
        return store.add_study_time(user_id, payload.minutes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# ---------- Schemas endpoint (for viewer tools) ----------

@app.get("/schema")
def read_schemas():
    def model_fields(model):
        return {name: str(field.annotation) for name, field in model.model_fields.items()}
    return {
        "userprogress": model_fields(UserProgress),
        "quizscore": model_fields(QuizScore),
        "quizquestion": model_fields(QuizQuestion),
        "lesson": model_fields(Lesson),
        "contentitem": model_fields(ContentItem),
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
