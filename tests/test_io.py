import pytest

from bytefield.model.io import DataLoader, DataLoadError


def test_load_text_file(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("hi!\n", encoding="utf-8")
    seq = DataLoader.load_file(str(path))
    assert list(seq) == [104, 105, 33, 10]
    assert seq.source == "sample.txt"


def test_undecodable_bytes_are_replaced(tmp_path):
    path = tmp_path / "broken.txt"
    path.write_bytes(b"a\xffb")
    seq = DataLoader.load_file(str(path))
    assert list(seq) == [97, 0xFFFD, 98]


def test_load_binary_file(tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(bytes([0, 1, 254, 255]))
    seq = DataLoader.load_binary(str(path))
    assert list(seq) == [0, 1, 254, 255]


def test_empty_file_gives_empty_sequence(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    assert len(DataLoader.load_file(str(path))) == 0


@pytest.mark.parametrize("loader", [DataLoader.load_file, DataLoader.load_binary])
def test_missing_file_raises_load_error(tmp_path, loader):
    with pytest.raises(DataLoadError):
        loader(str(tmp_path / "missing.txt"))


def test_unknown_encoding_raises_load_error(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("x")
    with pytest.raises(DataLoadError):
        DataLoader.load_file(str(path), encoding="no-such-codec")


def test_crlf_line_breaks_are_kept(tmp_path):
    path = tmp_path / "windows.txt"
    path.write_bytes(b"a\r\nb")
    seq = DataLoader.load_file(str(path))
    assert list(seq) == [97, 13, 10, 98]
