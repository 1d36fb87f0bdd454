import os
import random
import tempfile

import pytest

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="vocabuilder-log-"))

from vocabuilder.models import WordEntry
from vocabuilder.progress import ProgressTracker
from vocabuilder.quiz import SynonymQuizGenerator
from vocabuilder.session import SessionEngine
from vocabuilder.storage import MemoryStore
from vocabuilder.vocabulary import VocabularyManager

SAMPLE_CSV = """word,meaning,synonyms,antonyms,example
abundant,existing in large quantities,plentiful;ample,scarce,Food was abundant.
candid,truthful and straightforward,frank;honest,guarded,She was candid.
diligent,showing care in work,industrious|hardworking,lazy,A diligent worker.
eloquent,fluent in speaking,articulate;expressive,inarticulate,An eloquent speech.
frugal,sparing with money,thrifty;economical,wasteful,A frugal meal.
"""


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def pool():
    return [
        WordEntry(word="abundant", meaning="existing in large quantities", synonyms=["plentiful", "ample"], antonyms=["scarce"]),
        WordEntry(word="candid", meaning="truthful and straightforward", synonyms=["frank", "honest"], antonyms=["guarded"]),
        WordEntry(word="diligent", meaning="showing care in work", synonyms=["industrious", "hardworking"], antonyms=["lazy"]),
        WordEntry(word="eloquent", meaning="fluent in speaking", synonyms=["articulate", "expressive"], antonyms=["inarticulate"]),
        WordEntry(word="frugal", meaning="sparing with money", synonyms=["thrifty", "economical"], antonyms=["wasteful"]),
    ]


@pytest.fixture
def generator(rng):
    return SynonymQuizGenerator(rng)


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return str(path)


@pytest.fixture
def vocabulary(store, words_file):
    return VocabularyManager(store, words_file)


@pytest.fixture
def tracker(store):
    return ProgressTracker(store)


@pytest.fixture
def engine(store, vocabulary, tracker, rng):
    return SessionEngine(store, vocabulary, tracker, rng)
