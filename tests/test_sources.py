"""Tests for input file readers."""
from datetime import datetime
import pytest

from favarchive.errors import SourceFormatError
from favarchive.sources import read_favolog_csv, read_status_ids, read_status_txt


def test_read_favolog_csv(tmp_path):
    path = tmp_path / "favolog.csv"
    path.write_text('123,240102 030405,someone,"hello, world",a b\n456,240103 000000,other,text,\n')
    items = read_favolog_csv(path)
    assert [item.tweet_id for item in items] == [123, 456]
    assert items[0].timestamp == datetime(2024, 1, 2, 3, 4, 5)
    assert items[0].text == "hello, world"
    assert items[0].tags == ["a", "b"]


def test_read_favolog_csv_bad_length(tmp_path):
    path = tmp_path / "favolog.csv"
    path.write_text("123,240102 030405,someone\n")
    with pytest.raises(SourceFormatError):
        read_favolog_csv(path)


def test_read_favolog_csv_bad_date(tmp_path):
    path = tmp_path / "favolog.csv"
    path.write_text("123,yesterday,someone,text,tag\n")
    with pytest.raises(SourceFormatError):
        read_favolog_csv(path)


def test_read_status_txt(tmp_path):
    path = tmp_path / "statuses.txt"
    path.write_text("https://x.com/someone/status/111\n\n222\nhttps://twitter.com/a/status/333\n")
    assert read_status_txt(path) == [111, 222, 333]


def test_read_status_txt_invalid_line(tmp_path):
    path = tmp_path / "statuses.txt"
    path.write_text("https://x.com/someone/status/\n")
    with pytest.raises(SourceFormatError):
        read_status_txt(path)


def test_read_status_ids_keeps_duplicates_csv_first(tmp_path):
    txt = tmp_path / "a.txt"
    txt.write_text("1\n2\n")
    csv_path = tmp_path / "b.csv"
    csv_path.write_text("2,240102 030405,someone,text,tag\n")
    assert read_status_ids([txt, csv_path]) == [2, 1, 2]
