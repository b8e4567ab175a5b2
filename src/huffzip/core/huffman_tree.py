from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterator
from dataclasses import dataclass


# -------------------
# Strutture di base Huffman
# -------------------
@dataclass(frozen=True)
class HuffmanNode:
    freq: int
    symbol: int | None = None  # 0-255 per foglie, None per interni
    left: int | None = None  # indice nell'arena
    right: int | None = None

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None and self.left is None and self.right is None


@dataclass
class HuffmanTree:
    """Binary tree stored as an arena of nodes addressed by index.

    The same shape is used for the encoder tree (real frequencies) and for the
    decode trie rebuilt from a codebook (all frequencies 0).
    """

    nodes: list[HuffmanNode]
    root: int

    def node(self, idx: int) -> HuffmanNode:
        return self.nodes[idx]

    def leaves(self) -> Iterator[HuffmanNode]:
        return (n for n in self.nodes if n.is_leaf)

    def leaf_paths(self) -> Iterator[tuple[int, str]]:
        """Yield (symbol, path) for every leaf, left subtree first.

        Iterative walk: very skewed trees (depth up to 255) never touch the
        recursion limit.
        """
        stack: list[tuple[int, str]] = [(self.root, "")]
        while stack:
            idx, path = stack.pop()
            n = self.nodes[idx]
            if n.is_leaf:
                yield n.symbol, path  # type: ignore[misc]
                continue
            # right pushed first => left popped first
            if n.right is not None:
                stack.append((n.right, path + "1"))
            if n.left is not None:
                stack.append((n.left, path + "0"))

    def subtree_freq(self, idx: int) -> int:
        """Sum of the leaf frequencies below ``idx``."""
        total = 0
        stack = [idx]
        while stack:
            n = self.nodes[stack.pop()]
            if n.is_leaf:
                total += n.freq
                continue
            if n.left is not None:
                stack.append(n.left)
            if n.right is not None:
                stack.append(n.right)
        return total


def build_freq_table(data: bytes) -> dict[int, int]:
    """Count every byte value of ``data``; only non-zero counts, ascending keys."""
    freq = [0] * 256
    for b in data:
        freq[b] += 1
    return {sym: f for sym, f in enumerate(freq) if f > 0}


def build_huffman_tree(freq: dict[int, int]) -> HuffmanTree | None:
    """Greedy min-frequency merge.

    Heap keys are (freq, seq): leaves are pushed by ascending byte value and
    merged nodes get a later seq, so equal frequencies always pop in the same
    order on every run.
    """
    nodes: list[HuffmanNode] = []
    heap: list[tuple[int, int, int]] = []
    counter = itertools.count()

    for sym in sorted(freq):
        f = freq[sym]
        if f <= 0:
            continue
        if not 0 <= sym <= 0xFF:
            raise ValueError(f"simbolo fuori range: {sym}")
        nodes.append(HuffmanNode(freq=f, symbol=sym))
        heapq.heappush(heap, (f, next(counter), len(nodes) - 1))

    if not heap:
        return None

    # Caso speciale: un solo simbolo => radice sintetica con la sola foglia a sinistra
    if len(heap) == 1:
        f, _, only = heap[0]
        nodes.append(HuffmanNode(freq=f, symbol=None, left=only, right=None))
        return HuffmanTree(nodes=nodes, root=len(nodes) - 1)

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        nodes.append(HuffmanNode(freq=f1 + f2, symbol=None, left=n1, right=n2))
        heapq.heappush(heap, (f1 + f2, next(counter), len(nodes) - 1))

    return HuffmanTree(nodes=nodes, root=heap[0][2])
