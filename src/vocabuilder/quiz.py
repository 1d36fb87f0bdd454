import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .config import settings
from .models import SessionCard, WordEntry

DISTRACTOR_COUNT = settings.OPTION_COUNT - 1


def generate_options(
    entry: WordEntry, pool: Sequence[WordEntry], rng: random.Random
) -> List[str]:
    """Build the shuffled multiple-choice options for ``entry``.

    Distractors come from the synonyms of the other entries first, then from
    the other entries' headwords, and finally from blank placeholders when the
    pool is too small to fill every slot.
    """
    correct = entry.correct_answer
    correct_key = correct.lower()
    own_synonyms = {s.lower() for s in entry.synonyms}

    candidates = []
    seen = set()
    for other in pool:
        if other.word == entry.word:
            continue
        for synonym in other.synonyms:
            key = synonym.lower()
            if not synonym or key == correct_key or key in seen:
                continue
            seen.add(key)
            candidates.append(synonym)
    rng.shuffle(candidates)

    distractors = []
    for candidate in candidates:
        if len(distractors) >= DISTRACTOR_COUNT:
            break
        if candidate.lower() not in own_synonyms:
            distractors.append(candidate)

    chosen = {d.lower() for d in distractors}
    for other in pool:
        if len(distractors) >= DISTRACTOR_COUNT:
            break
        key = other.word.lower()
        if other.word == entry.word or key == correct_key or key in chosen:
            continue
        distractors.append(other.word)
        chosen.add(key)

    while len(distractors) < DISTRACTOR_COUNT:
        distractors.append("")

    options = [correct] + distractors
    rng.shuffle(options)
    return options


# --- Strategy Pattern: Quiz Generators ---
class QuizGenerator(ABC):
    """Abstract Base Class for card generation strategies."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    def make_card(self, entry: WordEntry, pool: Sequence[WordEntry]) -> SessionCard:
        pass

    def generate(self, pool: Sequence[WordEntry], count: int) -> List[SessionCard]:
        """Randomly selects up to ``count`` entries and builds a card for each."""
        if not pool:
            return []
        entries = list(pool)
        self.rng.shuffle(entries)
        return [self.make_card(entry, pool) for entry in entries[:count]]


class SynonymQuizGenerator(QuizGenerator):
    """Asks for a synonym of the word; distractors are other words' synonyms."""

    def make_card(self, entry: WordEntry, pool: Sequence[WordEntry]) -> SessionCard:
        return SessionCard(
            entry=entry,
            options=generate_options(entry, pool, self.rng),
            correct_answer=entry.correct_answer,
        )
