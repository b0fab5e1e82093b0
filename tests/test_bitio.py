import io

from bitio import BitReader, BitWriter


def test_writer_packs_msb_first_and_pads():
    sink = io.BytesIO()
    writer = BitWriter(sink)
    writer.write_code("1010000111")
    writer.close()
    assert sink.getvalue() == bytes([0b10100001, 0b11000000])
    assert writer.bits_written == 10
    assert writer.pad_bits == 6


def test_writer_close_is_idempotent():
    sink = io.BytesIO()
    writer = BitWriter(sink)
    writer.write_bit(1)
    writer.close()
    writer.close()
    assert sink.getvalue() == b"\x80"


def test_writer_empty():
    sink = io.BytesIO()
    with BitWriter(sink) as writer:
        pass
    assert sink.getvalue() == b""
    assert writer.pad_bits == 0


def test_writer_does_not_close_sink():
    sink = io.BytesIO()
    with BitWriter(sink) as writer:
        writer.write_code("11111111")
    assert not sink.closed
    assert sink.getvalue() == b"\xff"


def test_reader_bits_then_none():
    reader = BitReader(io.BytesIO(bytes([0b10000001])))
    assert [reader.read_bit() for _ in range(8)] == [1, 0, 0, 0, 0, 0, 0, 1]
    assert reader.read_bit() is None
    assert reader.read_bit() is None


def test_reader_across_chunks():
    data = bytes(range(40))
    reader = BitReader(io.BytesIO(data), chunk_size=3)
    bits = list(reader)
    assert len(bits) == 8 * len(data)
    rebuilt = bytes(int("".join(map(str, bits[i:i + 8])), 2) for i in range(0, len(bits), 8))
    assert rebuilt == data


def test_writer_reader_agree():
    code = "0110100111010001011"
    sink = io.BytesIO()
    with BitWriter(sink) as writer:
        writer.write_code(code)
    bits = list(BitReader(io.BytesIO(sink.getvalue())))
    assert "".join(map(str, bits[:len(code)])) == code
    assert bits[len(code):] == [0] * writer.pad_bits
