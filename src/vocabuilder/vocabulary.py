import logging
from typing import List

from pydantic import TypeAdapter, ValidationError

from .errors import EmptyWordListError
from .models import WordEntry
from .parser import parse_csv
from .storage import WORDS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

word_list_adapter = TypeAdapter(List[WordEntry])


def read_word_file(path: str) -> List[WordEntry]:
    """Parse a CSV word file; an unreadable file yields an empty list."""
    try:
        with open(path, encoding="utf-8") as f:
            words = parse_csv(f.read())
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to load words from {path}: {e}")
        return []
    logger.info(f"Loaded {len(words)} words from {path}")
    return words


# --- Service Layer: Vocabulary Management ---
class VocabularyManager:
    """Resolves the active word pool: an uploaded list if present, else the bundled CSV."""

    def __init__(self, store: KeyValueStore, default_file: str):
        self.store = store
        self.default_file = default_file

    def load_words(self) -> List[WordEntry]:
        custom = self.load_custom()
        if custom is not None:
            return custom
        return self.load_default()

    def load_custom(self):
        raw = self.store.get(WORDS_KEY)
        if not raw:
            return None
        try:
            return word_list_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse custom words: {e}")
            return None

    def load_default(self) -> List[WordEntry]:
        return read_word_file(self.default_file)

    def upload(self, text: str) -> List[WordEntry]:
        """Replace the custom word list with the entries parsed from ``text``.

        Raises EmptyWordListError, leaving the stored list untouched, when no
        line of the upload yields an entry.
        """
        words = parse_csv(text)
        if not words:
            raise EmptyWordListError("No entries found in the CSV file.")
        self.store.set(WORDS_KEY, word_list_adapter.dump_json(words).decode())
        logger.info(f"Uploaded {len(words)} custom words")
        return words

    def reset(self) -> None:
        self.store.remove(WORDS_KEY)
        logger.info("Custom words removed, using the default list")

    def source(self) -> str:
        return "custom" if self.load_custom() is not None else "default"
