import heapq
from typing import Dict, List, Optional

from errors import DecodingError, UnknownSymbol


class HuffmanNode: # Node for Huffman tree, stored in the tree's arena
    __slots__ = ("symbol", "weight", "left", "right", "parent", "leftmost")

    def __init__(self, symbol, weight, left=None, right=None):
        self.symbol = symbol    # SymbolId or None for internal nodes
        self.weight = weight
        self.left = left        # arena index of left child
        self.right = right      # arena index of right child
        self.parent = None      # arena index of parent, None at the root
        self.leftmost = symbol  # symbol of the left-most descendant leaf

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(symbol={self.symbol}, weight={self.weight})"
        return f"HuffmanNode(weight={self.weight}, left={self.left}, right={self.right})"


class HuffmanTree:
    """
    Huffman trie built from a FrequencyTable.

    Nodes live in ``self.nodes`` and refer to each other by index. Equal
    weights are ordered by the symbol of each node's left-most leaf, so the
    shape depends only on the table contents and never on insertion order.
    """

    def __init__(self, table: Dict[int, int]):
        if not table:
            raise ValueError("cannot build a Huffman tree from an empty table")

        self.nodes: List[HuffmanNode] = []
        self.leaves: Dict[int, int] = {} # symbol -> arena index

        priority_queue = []
        for symbol, weight in table.items():
            index = self._add(HuffmanNode(symbol, weight))
            self.leaves[symbol] = index
            priority_queue.append((weight, symbol, index))
        heapq.heapify(priority_queue)

        # Build the tree
        while len(priority_queue) > 1:
            _, _, left = heapq.heappop(priority_queue)
            _, _, right = heapq.heappop(priority_queue)
            merged = self._merge(left, right)
            node = self.nodes[merged]
            heapq.heappush(priority_queue, (node.weight, node.leftmost, merged))

        # a single entry becomes a leaf root with an empty code
        self.root = priority_queue[0][2]

    def _add(self, node: HuffmanNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def _merge(self, left: int, right: int) -> int:
        l, r = self.nodes[left], self.nodes[right]
        node = HuffmanNode(None, l.weight + r.weight, left, right)
        node.leftmost = l.leftmost
        index = self._add(node)
        l.parent = r.parent = index
        return index

    def __contains__(self, symbol) -> bool:
        return symbol in self.leaves

    def __len__(self) -> int:
        return len(self.leaves)

    @property
    def weight(self) -> int:
        return self.nodes[self.root].weight

    def root_symbol(self) -> Optional[int]:
        """Symbol of the root when the tree is a lone leaf, else None."""
        node = self.nodes[self.root]
        return node.symbol if node.is_leaf else None

    def code_for(self, symbol: int) -> str:
        """Walk leaf -> root through parent links, prepending one bit per step."""
        try:
            index = self.leaves[symbol]
        except KeyError:
            raise UnknownSymbol(symbol) from None

        bits = []
        parent = self.nodes[index].parent
        while parent is not None:
            bits.append('0' if self.nodes[parent].left == index else '1')
            index = parent
            parent = self.nodes[index].parent
        return ''.join(reversed(bits))

    def codes(self) -> Dict[int, str]:
        """All codes from one root -> leaf walk using an explicit stack."""
        codes = {}
        stack = [(self.root, '')]
        while stack:
            index, code = stack.pop()
            node = self.nodes[index]
            if node.is_leaf:
                codes[node.symbol] = code
                continue
            stack.append((node.right, code + '1'))
            stack.append((node.left, code + '0'))
        return codes

    def depth(self) -> int:
        return max(len(code) for code in self.codes().values())

    def weighted_path_length(self) -> int:
        return sum(self.nodes[self.leaves[s]].weight * len(c) for s, c in self.codes().items())

    def average_code_length(self) -> float:
        return self.weighted_path_length() / self.weight


class HuffmanDecoder:
    """
    Incremental root -> leaf walk, one bit per ``step``.

    ``step`` returns None while the walk is still on an internal node and the
    leaf's symbol once it reaches one, after which it restarts at the root.
    """

    def __init__(self, tree: HuffmanTree):
        self.tree = tree
        self.current = tree.root

    @property
    def at_root(self) -> bool:
        return self.current == self.tree.root

    def reset(self):
        self.current = self.tree.root

    def step(self, bit: int) -> Optional[int]:
        node = self.tree.nodes[self.current]
        child = node.left if bit == 0 else node.right
        if child is None:
            side = "left" if bit == 0 else "right"
            at = self.current
            self.reset()
            raise DecodingError(f"no {side} child below node {at}")

        node = self.tree.nodes[child]
        if not node.is_leaf:
            self.current = child
            return None

        self.current = self.tree.root # reset to the root for the next symbol
        return node.symbol


def build_huffman_tree(frequency_table: Dict[int, int]) -> HuffmanTree:
    return HuffmanTree(frequency_table)


def generate_huffman_codes(tree: HuffmanTree) -> Dict[int, str]:
    return tree.codes()
