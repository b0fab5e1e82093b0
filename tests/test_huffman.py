import random

import pytest

from errors import DecodingError, UnknownSymbol
from freqtable import EOF, FrequencyTable
from huffman import HuffmanDecoder, HuffmanTree, build_huffman_tree, generate_huffman_codes

A, B, C, D, E = (ord(ch) for ch in "abcde")
CLASSIC = {A: 5, B: 9, C: 12, D: 13, E: 16, EOF: 1}


def test_classic_example_codes():
    codes = generate_huffman_codes(build_huffman_tree(CLASSIC))
    assert codes == {
        C: "00",
        D: "01",
        E: "11",
        B: "101",
        EOF: "1000",
        A: "1001",
    }


def test_classic_example_is_optimal():
    tree = HuffmanTree(CLASSIC)
    internal = [n.weight for n in tree.nodes if not n.is_leaf]
    assert tree.weighted_path_length() == 133
    # Huffman cost is the sum of all merge weights
    assert tree.weighted_path_length() == sum(internal)
    # a fixed 3-bit code for six symbols costs more
    assert tree.weighted_path_length() <= 3 * sum(CLASSIC.values())


def test_root_weight_is_total():
    tree = HuffmanTree(CLASSIC)
    assert tree.weight == sum(CLASSIC.values())
    assert len(tree) == len(CLASSIC)


def test_every_internal_node_has_two_children():
    tree = HuffmanTree(FrequencyTable.count(b"the quick brown fox jumps over the lazy dog"))
    for node in tree.nodes:
        assert (node.left is None) == (node.right is None)


def test_leaf_weights_match_table():
    table = FrequencyTable.count(b"mississippi")
    tree = HuffmanTree(table)
    for symbol, index in tree.leaves.items():
        assert tree.nodes[index].weight == table[symbol]


def test_equal_weights_break_ties_by_leftmost_symbol():
    tree = HuffmanTree({A: 1, B: 1, EOF: 1})
    assert tree.codes() == {EOF: "0", A: "10", B: "11"}


def test_shape_independent_of_insertion_order():
    items = list(FrequencyTable.count(b"abracadabra alakazam 0000").items())
    reference = HuffmanTree(dict(items)).codes()
    rng = random.Random(7)
    for _ in range(10):
        rng.shuffle(items)
        assert HuffmanTree(dict(items)).codes() == reference


def test_code_for_matches_codes():
    tree = HuffmanTree(FrequencyTable.count(bytes(range(256)) + b"aaaabbbcc"))
    codes = tree.codes()
    for symbol in codes:
        assert tree.code_for(symbol) == codes[symbol]


def test_codes_are_prefix_free():
    rng = random.Random(1)
    data = bytes(rng.choice(b"abcdefgh\x00\xff") for _ in range(500))
    codes = list(HuffmanTree(FrequencyTable.count(data)).codes().values())
    for i, x in enumerate(codes):
        for j, y in enumerate(codes):
            if i != j:
                assert not y.startswith(x)


def test_kraft_sum_is_one():
    codes = HuffmanTree(FrequencyTable.count(b"hello, world")).codes()
    assert sum(2.0 ** -len(c) for c in codes.values()) == pytest.approx(1.0)


def test_single_entry_tree_is_a_leaf():
    tree = HuffmanTree({EOF: 1})
    assert tree.root_symbol() == EOF
    assert tree.code_for(EOF) == ""
    assert tree.codes() == {EOF: ""}


def test_repeated_byte_gets_two_leaves():
    tree = HuffmanTree(FrequencyTable.count(b"A" * 10000))
    assert tree.root_symbol() is None
    assert tree.codes() == {EOF: "0", ord("A"): "1"}


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        HuffmanTree({})


def test_unknown_symbol():
    tree = HuffmanTree(CLASSIC)
    with pytest.raises(UnknownSymbol):
        tree.code_for(ord("z"))
    with pytest.raises(KeyError):
        tree.code_for(ord("z"))


def test_decoder_steps():
    decoder = HuffmanDecoder(HuffmanTree(CLASSIC))
    assert [decoder.step(b) for b in (1, 0, 0, 1)] == [None, None, None, A]
    assert decoder.at_root
    assert [decoder.step(b) for b in (0, 1)] == [None, D]


def test_decoder_reset():
    decoder = HuffmanDecoder(HuffmanTree(CLASSIC))
    decoder.step(1)
    assert not decoder.at_root
    decoder.reset()
    assert decoder.step(0) is None
    assert decoder.step(0) == C


def test_decoder_absent_child():
    decoder = HuffmanDecoder(HuffmanTree({EOF: 1}))
    with pytest.raises(DecodingError):
        decoder.step(0)
    assert decoder.at_root
