from __future__ import annotations

import threading
from typing import Iterable

from .channels import ResultChannel
from .errors import InvalidInputError
from .logger import get_logger
from .trie import Trie

LOGGER = get_logger(__name__)


def feed_dictionary(feed: ResultChannel[str], *sources: Iterable[str]) -> None:
    """
    Push every line of every source (uppercased, stripped) onto `feed`, then
    close it. Closing happens even if a source raises, so the reader never hangs.
    """
    try:
        for source in sources:
            for line in source:
                feed.send(line.strip().upper())
    finally:
        feed.close()


def read_dictionary_to_trie(feed: ResultChannel[str]) -> Trie:
    """Build a trie from a word feed. Blank and non A-Z entries are skipped."""
    trie = Trie()
    added = skipped = 0
    for word in feed:
        if not word:
            continue
        try:
            trie.insert(word)
        except InvalidInputError:
            skipped += 1
            LOGGER.debug("Skipping dictionary entry %r", word)
            continue
        added += 1
    LOGGER.info("Dictionary loaded: %d entries accepted, %d skipped", added, skipped)
    return trie


def load_dictionary(*sources: Iterable[str]) -> Trie:
    """Read `sources` on a producer thread while the calling thread builds the trie."""
    feed: ResultChannel[str] = ResultChannel()
    errors: list[BaseException] = []

    def produce() -> None:
        try:
            feed_dictionary(feed, *sources)
        except BaseException as e:  # surfaced below, after the trie consumer stops
            errors.append(e)

    producer = threading.Thread(target=produce, name="dictionary-feed", daemon=True)
    producer.start()
    trie = read_dictionary_to_trie(feed)
    producer.join()
    if errors:
        raise errors[0]
    return trie
