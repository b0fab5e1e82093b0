import pytest

import huffzip


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "original.txt"
    path.write_bytes(b"Content of file 1\n" * 50)
    return path


def test_compress_decompress(tmp_path, sample, capsys):
    packed = tmp_path / "compressed.huf"
    out = tmp_path / "decompressed.txt"
    dot = tmp_path / "huffman_tree.dot"

    assert huffzip.main(["compress", str(sample), str(packed), "--dot", str(dot)]) == 0
    assert huffzip.main(["-q", "decompress", str(packed), str(out)]) == 0

    assert out.read_bytes() == sample.read_bytes()
    assert dot.read_text(encoding="utf-8").startswith("graph Tree {")
    assert "original.txt: 900 ->" in capsys.readouterr().out


def test_inspect(tmp_path, sample, capsys):
    packed = tmp_path / "compressed.huf"
    huffzip.main(["compress", str(sample), str(packed)])
    capsys.readouterr()

    assert huffzip.main(["inspect", str(packed)]) == 0
    out = capsys.readouterr().out
    assert "EOF" in out
    assert "newline" in out
    assert "total weight" in out


def test_corrupt_input_exits_with_error(tmp_path, capsys):
    bad = tmp_path / "bad.huf"
    bad.write_bytes(b"\x00")
    assert huffzip.main(["decompress", str(bad), str(tmp_path / "out.txt")]) == 1
    assert "Error:" in capsys.readouterr().err
    assert not (tmp_path / "out.txt").exists()


def test_missing_file_exits_with_error(tmp_path, capsys):
    assert huffzip.main(["inspect", str(tmp_path / "missing.huf")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert huffzip.main([]) == 2
    assert "usage" in capsys.readouterr().out
