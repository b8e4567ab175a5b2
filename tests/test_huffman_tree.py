from __future__ import annotations

import random

from huffzip.core.code_table import build_code_table
from huffzip.core.huffman_tree import HuffmanTree, build_freq_table, build_huffman_tree


def _check_tree_invariants(tree: HuffmanTree) -> None:
    for n in tree.nodes:
        if n.is_leaf:
            continue
        children = [c for c in (n.left, n.right) if c is not None]
        assert children, "nodo interno senza figli"
        assert n.freq == sum(tree.nodes[c].freq for c in children)


def test_freq_table_abc() -> None:
    freq = build_freq_table(b"AAAAABBBCC")
    assert freq == {ord("A"): 5, ord("B"): 3, ord("C"): 2}
    assert list(freq) == sorted(freq)


def test_freq_table_conservation_random() -> None:
    rng = random.Random(1234)
    data = bytes(rng.getrandbits(8) for _ in range(5000))
    freq = build_freq_table(data)
    assert sum(freq.values()) == len(data)
    assert all(f > 0 for f in freq.values())


def test_empty_input_has_no_tree() -> None:
    assert build_freq_table(b"") == {}
    assert build_huffman_tree({}) is None
    assert build_code_table(None) == {}


def test_tree_shape_and_subtree_frequencies() -> None:
    rng = random.Random(42)
    data = bytes(rng.choice(b"abcdefghij \n0123") for _ in range(3000))
    freq = build_freq_table(data)
    tree = build_huffman_tree(freq)
    assert tree is not None

    leaves = list(tree.leaves())
    internals = [n for n in tree.nodes if not n.is_leaf]
    assert sorted(n.symbol for n in leaves) == sorted(freq)
    assert len(internals) == len(leaves) - 1
    assert tree.node(tree.root).freq == len(data)

    _check_tree_invariants(tree)
    for i in range(len(tree.nodes)):
        assert tree.subtree_freq(i) == tree.nodes[i].freq


def test_single_symbol_gets_one_bit_code() -> None:
    tree = build_huffman_tree({7: 1000})
    assert tree is not None
    root = tree.node(tree.root)
    assert root.symbol is None
    assert root.right is None
    assert root.left is not None
    assert tree.node(root.left).symbol == 7
    assert root.freq == 1000
    assert build_code_table(tree) == {7: "0"}


def test_tie_break_is_by_byte_value() -> None:
    tree = build_huffman_tree({200: 1, 10: 1})
    assert build_code_table(tree) == {10: "0", 200: "1"}


def test_tree_is_deterministic() -> None:
    freq = {sym: (sym % 5) + 1 for sym in range(0, 256, 3)}
    t1 = build_huffman_tree(freq)
    t2 = build_huffman_tree(dict(reversed(list(freq.items()))))
    assert t1 is not None and t2 is not None
    assert t1.nodes == t2.nodes
    assert t1.root == t2.root


def test_skewed_tree_depth() -> None:
    # Fibonacci weights give the deepest possible tree (n - 1 levels).
    fib = [1, 1]
    while len(fib) < 30:
        fib.append(fib[-1] + fib[-2])
    freq = {sym: f for sym, f in enumerate(fib)}

    tree = build_huffman_tree(freq)
    codes = build_code_table(tree)
    lengths = sorted(len(c) for c in codes.values())
    assert lengths[0] == 1
    assert lengths[-1] == 29
    assert len(codes[29]) == 1
