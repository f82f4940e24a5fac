import io
import threading

import pytest

from puzzlehelper.core.budget import SearchBudget
from puzzlehelper.core.channels import ChannelClosedError, Collector, ResultChannel
from puzzlehelper.core.dictionary import load_dictionary


def test_channel_fans_in_from_many_producers():
    channel = ResultChannel()
    collector = Collector(channel)

    def produce(start):
        for i in range(start, start + 100):
            channel.send(i)

    threads = [threading.Thread(target=produce, args=(n * 100,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    channel.close()

    assert sorted(collector.join()) == list(range(400))


def test_collector_filters_items():
    channel = ResultChannel()
    collector = Collector(channel, accept=lambda n: n % 2 == 0)
    for n in range(10):
        channel.send(n)
    channel.close()
    assert collector.join() == [0, 2, 4, 6, 8]


def test_collector_reraises_filter_errors():
    channel = ResultChannel()

    def boom(_):
        raise ValueError("bad item")

    collector = Collector(channel, accept=boom)
    channel.send(1)
    channel.close()
    with pytest.raises(ValueError):
        collector.join()


def test_send_after_close():
    channel = ResultChannel()
    channel.close()
    channel.close()
    assert channel.closed
    with pytest.raises(ChannelClosedError):
        channel.send("late")


def test_budget_node_limit():
    budget = SearchBudget(max_nodes=3)
    assert [budget.spend() for _ in range(5)] == [True, True, True, False, False]
    assert budget.exhausted


def test_budget_cancel():
    budget = SearchBudget()
    assert budget.spend()
    budget.cancel()
    assert not budget.spend()
    assert budget.exhausted


def test_budget_time_limit():
    budget = SearchBudget(max_seconds=0)
    assert budget.time_up()
    assert not budget.spend()


def test_load_dictionary_normalises_and_skips():
    trie = load_dictionary(io.StringIO("hello\n  World \n\nit's\nHELLO\nnaïve\n"))
    assert sorted(w.word for w in trie) == ["HELLO", "WORLD"]


def test_load_dictionary_reads_several_sources(tmp_path):
    p = tmp_path / "words.txt"
    p.write_text("alpha\nbeta\n", encoding="utf-8")
    with open(p, encoding="utf-8") as f:
        trie = load_dictionary(f, ["gamma", "ALPHA"])
    assert trie.size() == 3
    assert "GAMMA" in trie


def test_load_dictionary_surfaces_read_errors():
    def broken():
        yield "ONE"
        raise OSError("disk went away")

    with pytest.raises(OSError):
        load_dictionary(broken())


def test_budget_counts_nodes_across_threads():
    budget = SearchBudget()

    def spend_many():
        for _ in range(1000):
            budget.spend()

    threads = [threading.Thread(target=spend_many) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert budget.nodes == 8000
    assert not budget.exhausted
