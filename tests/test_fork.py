import pytest

from lexgraph.fork import Fork
from lexgraph.ranges import Range


class _Graph:
    def __init__(self):
        self.nodes = [None]
        self.merges = []

    def push(self, node):
        self.nodes.append(node)
        return len(self.nodes) - 1

    def __getitem__(self, node_id):
        return self.nodes[node_id]

    def merge(self, a, b):
        if a == b:
            return a
        self.merges.append((a, b))
        return self.push(("merged", a, b))


def test_fork_iter():
    fork = Fork().branch(Range.from_chars("4", "7"), 1).branch(Range.from_chars("a", "d"), 2)
    assert list(fork.branches()) == [
        (Range(ord("4"), ord("7")), 1),
        (Range(ord("a"), ord("d")), 2),
    ]


def test_merge_no_conflict():
    graph = _Graph()
    leaf1 = graph.push("FOO")
    leaf2 = graph.push("BAR")
    fork = Fork().branch("1", leaf1)
    fork.merge(Fork().branch("2", leaf2), graph)
    assert fork == Fork().branch("1", leaf1).branch("2", leaf2)
    assert graph.merges == []


def test_merge_miss_right():
    graph = _Graph()
    leaf1 = graph.push("FOO")
    leaf2 = graph.push("BAR")
    fork = Fork().branch("1", leaf1)
    fork.merge(Fork().with_miss(leaf2), graph)
    assert fork == Fork().branch("1", leaf1).with_miss(leaf2)


def test_merge_miss_left():
    graph = _Graph()
    leaf1 = graph.push("FOO")
    leaf2 = graph.push("BAR")
    fork = Fork().with_miss(leaf1)
    fork.merge(Fork().branch("2", leaf2), graph)
    assert fork == Fork().branch("2", leaf2).with_miss(leaf1)


def test_merge_conflict_uses_graph_merge():
    graph = _Graph()
    leaf1 = graph.push("FOO")
    leaf2 = graph.push("BAR")
    fork = Fork().branch("x", leaf1)
    fork.merge(Fork().branch("x", leaf2), graph)
    assert graph.merges == [(leaf1, leaf2)]
    assert fork.contains("x") == 3


def test_contains_byte():
    fork = Fork().branch(Range.from_chars("a", "z"), 42)
    assert fork.contains("t") == 42


def test_contains_range():
    fork = Fork().branch(Range.from_chars("a", "m"), 42).branch(Range.from_chars("n", "z"), 42)
    assert fork.contains(Range.from_chars("i", "r")) == 42
    assert fork.contains(Range.from_chars("a", "z")) == 42


def test_contains_different_ranges():
    fork = Fork().branch(Range.from_chars("a", "m"), 42).branch(Range.from_chars("n", "z"), 47)
    assert fork.contains(Range.from_chars("i", "r")) is None
    assert fork.contains(Range.from_chars("a", "z")) is None
    assert fork.contains(Range.from_chars("d", "f")) == 42
    assert fork.contains(Range.from_chars("n", "p")) == 47


def test_contains_missing_byte():
    fork = Fork().branch("a", 1)
    assert fork.contains(Range.from_chars("a", "b")) is None


def test_branch_overlap_raises():
    with pytest.raises(ValueError):
        Fork().branch("a", 1).branch(Range.from_chars("a", "c"), 2)


def test_add_branch_merges_overlap():
    graph = _Graph()
    a = graph.push("A")
    b = graph.push("B")
    fork = Fork().branch("a", a)
    fork.add_branch(Range.from_chars("a", "b"), b, graph)
    assert graph.merges == [(a, b)]
    assert list(fork.branches()) == [(Range.from_byte("a"), 3), (Range.from_byte("b"), b)]


def test_copy_is_independent():
    fork = Fork().branch("a", 1)
    clone = fork.copy()
    clone.branch("b", 2)
    assert fork == Fork().branch("a", 1)
    assert clone != fork


def test_shake_marks_reachable():
    graph = _Graph()
    leaf = graph.push("LEAF")
    unused = graph.push("UNUSED")
    inner = graph.push(Fork().branch("x", leaf))
    other = graph.push("OTHER")
    root = Fork().branch("a", inner).with_miss(other)
    filter = [False] * len(graph.nodes)
    root.shake(graph, filter)
    assert filter[leaf] and filter[inner] and filter[other]
    assert not filter[unused]


def test_repr_and_hash():
    fork = Fork().branch(Range.from_chars("a", "z"), 1).with_miss(2)
    assert repr(fork) == "{[a-z] ⇒ 1, _ ⇒ 2}"
    assert hash(fork) == hash(Fork().branch(Range.from_chars("a", "z"), 1).with_miss(2))