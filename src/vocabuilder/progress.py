import logging
import math
from typing import Iterable, List

import pandas as pd
from pydantic import TypeAdapter, ValidationError

from .models import (
    ProgressMap,
    ProgressSummary,
    SessionResult,
    StudentReport,
    UserProgress,
    WordReport,
    WordStats,
)
from .storage import PROGRESS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

progress_adapter = TypeAdapter(ProgressMap)


def accuracy_percent(correct: int, attempts: int) -> int:
    """Percentage of correct attempts, rounded half up; 0 when nothing was attempted."""
    if attempts <= 0:
        return 0
    return math.floor(100 * correct / attempts + 0.5)


def compute_summary(user_progress: UserProgress) -> ProgressSummary:
    total_attempts = sum(stats.attempts for stats in user_progress.values())
    total_correct = sum(stats.correct for stats in user_progress.values())
    return ProgressSummary(
        word_count=len(user_progress),
        total_attempts=total_attempts,
        total_correct=total_correct,
        accuracy_percent=accuracy_percent(total_correct, total_attempts),
    )


def word_reports(user_progress: UserProgress) -> List[WordReport]:
    return [
        WordReport(
            word=word,
            attempts=stats.attempts,
            correct=stats.correct,
            accuracy_percent=accuracy_percent(stats.correct, stats.attempts),
        )
        for word, stats in user_progress.items()
    ]


# --- Service Layer: Progress Tracking ---
class ProgressTracker:
    """Cumulative per-user, per-word attempt counters kept in the store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> ProgressMap:
        raw = self.store.get(PROGRESS_KEY)
        if not raw:
            return {}
        try:
            return progress_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse stored progress, ignoring it: {e}")
            return {}

    def save(self, progress: ProgressMap) -> None:
        self.store.set(PROGRESS_KEY, progress_adapter.dump_json(progress).decode())

    def update_progress(self, username: str, results: Iterable[SessionResult]) -> None:
        """Fold session results into the stored counters.

        The whole mapping is written back, so concurrent writers race and the
        last one wins.
        """
        if not username:
            return
        progress = self.load()
        user_words = progress.setdefault(username, {})
        for result in results:
            stats = user_words.setdefault(result.word, WordStats())
            stats.attempts += 1
            if result.correct:
                stats.correct += 1
        self.save(progress)

    def user_progress(self, username: str) -> UserProgress:
        return self.load().get(username, {})

    def student_reports(self) -> List[StudentReport]:
        """Per-student totals; word count is the number of distinct words attempted."""
        progress = self.load()
        if not progress:
            return []
        rows = [
            (student, word, stats.attempts, stats.correct)
            for student, words in progress.items()
            for word, stats in words.items()
        ]
        df = pd.DataFrame(rows, columns=["student", "word", "attempts", "correct"])
        totals = (
            df.groupby("student", sort=False)
            .agg(
                word_count=("word", "nunique"),
                total_attempts=("attempts", "sum"),
                total_correct=("correct", "sum"),
            )
            .reindex(list(progress), fill_value=0)
        )
        return [
            StudentReport(
                student=student,
                word_count=int(row.word_count),
                total_attempts=int(row.total_attempts),
                total_correct=int(row.total_correct),
                accuracy_percent=accuracy_percent(
                    int(row.total_correct), int(row.total_attempts)
                ),
            )
            for student, row in totals.iterrows()
        ]
