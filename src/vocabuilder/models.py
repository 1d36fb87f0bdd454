from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Vocabulary ---
class WordEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: str
    meaning: str
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    example: str = ""

    @property
    def correct_answer(self) -> str:
        """First synonym, else first word of the meaning, else the word itself."""
        if self.synonyms and self.synonyms[0]:
            return self.synonyms[0]
        first_token = self.meaning.split(" ")[0]
        return first_token or self.word


# --- Session ---
class SessionStatus(str, Enum):
    BUILDING = "building"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class SessionCard(BaseModel):
    entry: WordEntry
    options: List[str]
    correct_answer: str


class SessionResult(BaseModel):
    word: str
    correct: bool


class SessionState(BaseModel):
    status: SessionStatus = SessionStatus.BUILDING
    queue: List[SessionCard] = Field(default_factory=list)
    current: Optional[SessionCard] = None
    results: List[SessionResult] = Field(default_factory=list)
    session_size: int = 0
    username: str = ""
    created_at: datetime = Field(default_factory=datetime.now)


class AnswerFeedback(BaseModel):
    word: str
    selected: str
    correct_answer: str
    is_correct: bool
    message: str
    entry: WordEntry
    remaining: int
    complete: bool
    correct_count: int
    answered: int


# --- Progress ---
class WordStats(BaseModel):
    attempts: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_counts(self):
        if self.correct > self.attempts:
            raise ValueError("correct cannot exceed attempts")
        return self


UserProgress = Dict[str, WordStats]
ProgressMap = Dict[str, UserProgress]


class ProgressSummary(BaseModel):
    word_count: int
    total_attempts: int
    total_correct: int
    accuracy_percent: int


class WordReport(BaseModel):
    word: str
    attempts: int
    correct: int
    accuracy_percent: int


class StudentReport(BaseModel):
    student: str
    word_count: int
    total_attempts: int
    total_correct: int
    accuracy_percent: int
