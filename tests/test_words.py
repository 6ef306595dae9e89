"""Tests for word pool loading and tiering."""

import random

from word_runner.session import Difficulty
from word_runner.words import WordPool, load_word_pool, tier_for_length


def test_tier_thresholds():
    assert tier_for_length(2) is None
    assert tier_for_length(3) is Difficulty.EASY
    assert tier_for_length(5) is Difficulty.EASY
    assert tier_for_length(6) is Difficulty.MEDIUM
    assert tier_for_length(8) is Difficulty.MEDIUM
    assert tier_for_length(9) is Difficulty.HARD


def test_from_words_normalizes_and_partitions():
    pool = WordPool.from_words([' cat ', 'go', 'Rocket\r', 'butterfly', '', 'dog'])

    assert pool.words_for(Difficulty.EASY) == ('CAT', 'DOG')
    assert pool.words_for(Difficulty.MEDIUM) == ('ROCKET',)
    assert pool.words_for(Difficulty.HARD) == ('BUTTERFLY',)
    assert pool.total == 4


def test_draw_from_empty_tier_returns_none():
    pool = WordPool.from_words(['cat'])
    assert pool.draw(Difficulty.HARD, random.Random(1)) is None
    assert pool.draw(Difficulty.EASY, random.Random(1)) == 'CAT'


def test_missing_word_file_degrades_to_empty_pool(tmp_path, caplog):
    pool = load_word_pool(tmp_path / 'nope.txt')

    assert pool.total == 0
    for difficulty in Difficulty:
        assert pool.words_for(difficulty) == ()
    assert 'unavailable' in caplog.text


def test_load_word_file(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text('apple\nbanana\nxy\nencyclopedia\n', encoding='utf-8')

    pool = load_word_pool(path)

    assert pool.words_for(Difficulty.EASY) == ('APPLE',)
    assert pool.words_for(Difficulty.MEDIUM) == ('BANANA',)
    assert pool.words_for(Difficulty.HARD) == ('ENCYCLOPEDIA',)


def test_packaged_word_list_covers_every_tier():
    from word_runner.config import DEFAULT_WORD_LIST

    pool = load_word_pool(DEFAULT_WORD_LIST)
    for difficulty in Difficulty:
        assert len(pool.words_for(difficulty)) > 20
