"""
Tests for distractor generation and card building.
"""

import random

from vocabuilder.models import WordEntry
from vocabuilder.quiz import SynonymQuizGenerator, generate_options


def count_matches(options, answer):
    return sum(1 for opt in options if opt.lower() == answer.lower())


class TestGenerateOptions:
    def test_four_options_with_correct_answer_once(self, pool, rng):
        for entry in pool:
            for _ in range(20):
                options = generate_options(entry, pool, rng)
                assert len(options) == 4
                assert count_matches(options, entry.correct_answer) == 1

    def test_distractors_exclude_own_synonyms(self, pool, rng):
        entry = pool[0]
        for _ in range(20):
            options = generate_options(entry, pool, rng)
            distractors = [o for o in options if o != entry.correct_answer]
            assert "ample" not in distractors

    def test_distractors_are_unique_case_insensitively(self, rng):
        pool = [
            WordEntry(word="big", meaning="large", synonyms=["huge"]),
            WordEntry(word="vast", meaning="wide", synonyms=["Immense", "broad"]),
            WordEntry(word="giant", meaning="very big", synonyms=["immense", "colossal"]),
            WordEntry(word="tall", meaning="high", synonyms=["lofty"]),
        ]
        for _ in range(20):
            options = generate_options(pool[0], pool, rng)
            lowered = [o.lower() for o in options]
            assert len(set(lowered)) == 4

    def test_candidate_matching_correct_answer_is_skipped(self, rng):
        pool = [
            WordEntry(word="big", meaning="large", synonyms=["huge"]),
            WordEntry(word="vast", meaning="wide", synonyms=["HUGE", "broad"]),
            WordEntry(word="tall", meaning="high", synonyms=["lofty", "towering"]),
        ]
        options = generate_options(pool[0], pool, rng)
        assert count_matches(options, "huge") == 1

    def test_falls_back_to_other_words(self, rng):
        pool = [
            WordEntry(word="cat", meaning="feline", synonyms=["kitty"]),
            WordEntry(word="dog", meaning="canine", synonyms=[]),
            WordEntry(word="owl", meaning="bird", synonyms=[]),
            WordEntry(word="fox", meaning="vulpine", synonyms=[]),
        ]
        options = generate_options(pool[0], pool, rng)
        assert sorted(options) == ["dog", "fox", "kitty", "owl"]

    def test_single_entry_pool_pads_with_blanks(self, rng):
        entry = WordEntry(word="cat", meaning="feline", synonyms=["kitty"])
        options = generate_options(entry, [entry], rng)
        assert len(options) == 4
        assert options.count("kitty") == 1
        assert options.count("") == 3

    def test_same_seed_gives_same_options(self, pool):
        first = generate_options(pool[1], pool, random.Random(7))
        second = generate_options(pool[1], pool, random.Random(7))
        assert first == second


class TestSynonymQuizGenerator:
    def test_generate_limits_to_count(self, pool, generator):
        cards = generator.generate(pool, 3)
        assert len(cards) == 3
        assert len({card.entry.word for card in cards}) == 3

    def test_generate_takes_whole_small_pool(self, pool, generator):
        cards = generator.generate(pool, 10)
        assert sorted(card.entry.word for card in cards) == sorted(e.word for e in pool)

    def test_generate_empty_pool(self, generator):
        assert generator.generate([], 10) == []

    def test_make_card(self, pool, generator):
        card = generator.make_card(pool[2], pool)
        assert card.correct_answer == "industrious"
        assert "industrious" in card.options
        assert len(card.options) == 4

    def test_generate_does_not_reorder_pool(self, pool, generator):
        words = [e.word for e in pool]
        generator.generate(pool, 3)
        assert [e.word for e in pool] == words


class TestHeadwordFallback:
    def test_headword_matching_correct_answer_is_skipped(self, rng):
        pool = [
            WordEntry(word="hound", meaning="hunting dog", synonyms=["dog"]),
            WordEntry(word="Dog", meaning="canine"),
            WordEntry(word="owl", meaning="bird"),
            WordEntry(word="fox", meaning="vulpine"),
        ]
        options = generate_options(pool[0], pool, rng)
        assert count_matches(options, "dog") == 1
        assert sorted(options) == ["", "dog", "fox", "owl"]

    def test_headword_already_chosen_is_not_repeated(self, rng):
        pool = [
            WordEntry(word="cat", meaning="feline", synonyms=["kitty"]),
            WordEntry(word="dog", meaning="canine", synonyms=["owl"]),
            WordEntry(word="owl", meaning="bird"),
            WordEntry(word="fox", meaning="vulpine"),
        ]
        options = generate_options(pool[0], pool, rng)
        assert sorted(options) == ["dog", "fox", "kitty", "owl"]
        assert options.count("owl") == 1
