import logging
import random
import uuid
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from .config import settings
from .errors import (
    InvalidOptionError,
    NoCardPresentedError,
    NoWordsAvailableError,
    SessionCompleteError,
    SessionNotFoundError,
)
from .models import (
    AnswerFeedback,
    SessionCard,
    SessionResult,
    SessionState,
    SessionStatus,
    WordEntry,
)
from .progress import ProgressTracker
from .quiz import QuizGenerator, SynonymQuizGenerator
from .storage import USERNAME_KEY, KeyValueStore, session_key
from .vocabulary import VocabularyManager

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES = [
    "Great job!",
    "Correct! Keep it up!",
    "Awesome work!",
    "You nailed it!",
    "Excellent!",
]
ERROR_MESSAGES = [
    "Not quite. You can do it!",
    "Almost! Keep trying!",
    "Don't worry, learn and move on!",
    "Keep going, you'll get it next time!",
    "Mistakes help you learn!",
]


def motivational_message(is_correct: bool, rng: random.Random) -> str:
    return rng.choice(SUCCESS_MESSAGES if is_correct else ERROR_MESSAGES)


# --- Transitions ---
# Each transition returns a new state and leaves its input untouched.
def build_session(
    pool: Sequence[WordEntry],
    generator: QuizGenerator,
    username: str = "",
    size: int = settings.SESSION_SIZE,
) -> SessionState:
    if not pool:
        raise NoWordsAvailableError("No words available.")
    cards = generator.generate(pool, size)
    return SessionState(
        status=SessionStatus.IN_PROGRESS,
        queue=cards,
        session_size=len(cards),
        username=username,
    )


def is_complete(state: SessionState) -> bool:
    return state.status == SessionStatus.COMPLETE


def remaining(state: SessionState) -> int:
    """Cards still to answer, counting the one on screen."""
    return len(state.queue) + (1 if state.current is not None else 0)


def draw_next(state: SessionState) -> Tuple[SessionState, SessionCard]:
    if is_complete(state):
        raise SessionCompleteError("Session is already complete.")
    if state.current is not None:
        return state, state.current
    card, *rest = state.queue
    return state.model_copy(update={"queue": rest, "current": card}), card


def submit_answer(
    state: SessionState,
    selected: str,
    pool: Sequence[WordEntry],
    generator: QuizGenerator,
) -> Tuple[SessionState, SessionResult]:
    card = state.current
    if card is None:
        raise NoCardPresentedError("No card is waiting for an answer.")

    is_correct = selected.lower() == card.correct_answer.lower()
    result = SessionResult(word=card.entry.word, correct=is_correct)
    queue = list(state.queue)
    if not is_correct:
        queue.append(generator.make_card(card.entry, pool))

    status = SessionStatus.IN_PROGRESS if queue else SessionStatus.COMPLETE
    new_state = state.model_copy(
        update={
            "queue": queue,
            "current": None,
            "results": state.results + [result],
            "status": status,
        }
    )
    return new_state, result


# --- Service Layer: Session Orchestration ---
class SessionEngine:
    """Runs quiz sessions against the store and records progress when one completes."""

    def __init__(
        self,
        store: KeyValueStore,
        vocabulary: VocabularyManager,
        tracker: ProgressTracker,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.vocabulary = vocabulary
        self.tracker = tracker
        self.rng = rng or random.Random(settings.RANDOM_SEED)
        self.generator = SynonymQuizGenerator(self.rng)

    def start(self, username: str) -> str:
        username = username.strip() or settings.DEFAULT_USERNAME
        self.store.set(USERNAME_KEY, username)
        state = build_session(self.vocabulary.load_words(), self.generator, username)

        session_id = str(uuid.uuid4())
        self.save(session_id, state)
        logger.info(
            f"New session: {session_id} [User: {username}, Cards: {state.session_size}]"
        )
        return session_id

    def load(self, session_id: Optional[str]) -> SessionState:
        raw = self.store.get(session_key(session_id)) if session_id else None
        if not raw:
            raise SessionNotFoundError("Session invalid")
        state = SessionState.model_validate_json(raw)
        if datetime.now() - state.created_at > timedelta(
            minutes=settings.SESSION_TIMEOUT_MINUTES
        ):
            self.abandon(session_id)
            raise SessionNotFoundError("Session expired")
        return state

    def save(self, session_id: str, state: SessionState) -> None:
        self.store.set(
            session_key(session_id),
            state.model_dump_json(),
            ex=timedelta(minutes=settings.SESSION_TIMEOUT_MINUTES),
        )

    def current(self, session_id: Optional[str]) -> Tuple[SessionCard, int]:
        state = self.load(session_id)
        new_state, card = draw_next(state)
        if new_state is not state:
            self.save(session_id, new_state)
        return card, remaining(new_state)

    def answer(self, session_id: Optional[str], selected: str) -> AnswerFeedback:
        state = self.load(session_id)
        card = state.current
        if card is None:
            raise NoCardPresentedError("No card is waiting for an answer.")
        if selected not in card.options:
            raise InvalidOptionError("Invalid option")

        state, result = submit_answer(
            state, selected, self.vocabulary.load_words(), self.generator
        )
        if is_complete(state):
            self.finish(session_id, state)
        else:
            self.save(session_id, state)

        return AnswerFeedback(
            word=result.word,
            selected=selected,
            correct_answer=card.correct_answer,
            is_correct=result.correct,
            message=motivational_message(result.correct, self.rng),
            entry=card.entry,
            remaining=remaining(state),
            complete=is_complete(state),
            correct_count=sum(1 for r in state.results if r.correct),
            answered=len(state.results),
        )

    def finish(self, session_id: str, state: SessionState) -> None:
        self.tracker.update_progress(state.username, state.results)
        self.store.remove(session_key(session_id))
        correct_count = sum(1 for r in state.results if r.correct)
        logger.info(
            f"Session complete: {session_id} "
            f"[User: {state.username}, {correct_count}/{len(state.results)} correct]"
        )

    def abandon(self, session_id: Optional[str]) -> None:
        if session_id:
            self.store.remove(session_key(session_id))
