"""DOT (graphviz) rendering of a built Huffman tree, for inspection only."""

from huffman import HuffmanTree
from freqtable import EOF

SPECIAL_LABELS = {
    EOF: "EOF",
    ord('\n'): "newline",
    ord('\t'): "tab",
    ord(' '): "space",
}

RECORD_ESCAPES = set('"\\<>{}|')


def symbol_label(symbol) -> str:
    if symbol is None:
        return " "
    if symbol in SPECIAL_LABELS:
        return SPECIAL_LABELS[symbol]
    ch = chr(symbol)
    if not ch.isprintable() or symbol > 0x7E:
        return f"0x{symbol:02X}"
    if ch in RECORD_ESCAPES:
        return "\\" + ch
    return ch


def tree_to_dot(tree: HuffmanTree) -> str:
    lines = ["graph Tree {", "\tnode [shape=record]", ""]

    stack = [tree.root]
    while stack:
        index = stack.pop()
        node = tree.nodes[index]
        label = f"{symbol_label(node.symbol)} {node.weight}"
        lines.append(f'\tnode{index} [label = "<f0> |<f1> {label}|<f2> "]')
        if node.left is not None:
            lines.append(f"\tnode{index}:f0 -- node{node.left}:f1")
        if node.right is not None:
            lines.append(f"\tnode{index}:f2 -- node{node.right}:f1")
        # right first so the left subtree is emitted first
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(tree: HuffmanTree, path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(tree_to_dot(tree))
