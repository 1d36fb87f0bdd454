import re
from typing import List

from .models import WordEntry

LINE_SPLIT = re.compile(r"\r?\n")
LIST_SPLIT = re.compile(r"[;|]")
FIELD_COUNT = 5


def split_list(value: str) -> List[str]:
    return [piece.strip() for piece in LIST_SPLIT.split(value) if piece.strip()]


def split_fields(line: str) -> List[str]:
    """Split on commas outside double quotes. Quote characters stay in the field."""
    fields = []
    current = []
    quoted = False
    for char in line:
        if char == '"':
            quoted = not quoted
        elif char == "," and not quoted:
            fields.append("".join(current))
            current = []
            continue
        current.append(char)
    fields.append("".join(current))
    return fields


def parse_csv(text: str) -> List[WordEntry]:
    """Parse a word list CSV into entries.

    The first line is a header and is always discarded. Blank lines and lines
    with fewer than five fields are skipped without complaint, so hand-edited
    files with stray rows still load. Quoted fields keep their commas, but
    quotes are neither stripped nor unescaped.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")

    lines = LINE_SPLIT.split(text.strip())[1:]
    entries = []
    for line in lines:
        if not line:
            continue
        parts = split_fields(line)
        if len(parts) < FIELD_COUNT:
            continue
        word, meaning, synonyms, antonyms, example = parts[:FIELD_COUNT]
        entries.append(
            WordEntry(
                word=word.strip(),
                meaning=meaning.strip(),
                synonyms=split_list(synonyms),
                antonyms=split_list(antonyms),
                example=example.strip(),
            )
        )
    return entries
