import pytest

from smartmed.errors import CsvParseError, MalformedFileError
from smartmed.parsers import parse_csv, read_upload


def test_parse_csv_one_record_per_non_blank_line(sample_csv_text):
    records = parse_csv(sample_csv_text)

    assert [r.get("id") for r in records] == ["MED001", "MED002", "MED003"]
    assert [r.row_number for r in records] == [1, 2, 3]


def test_parse_csv_trims_headers_and_values():
    records = parse_csv(" name , category \n  Aspirin 75mg ,  Anti-platelet \n")

    assert records[0].values == {"name": "Aspirin 75mg", "category": "Anti-platelet"}


def test_parse_csv_skips_blank_lines_between_rows():
    records = parse_csv("name,category\nA,X\n\n   \nB,Y\n")

    assert [r.get("name") for r in records] == ["A", "B"]


def test_parse_csv_handles_windows_line_endings():
    records = parse_csv("name,currentStock\r\nA,5\r\nB,7\r\n")

    assert [r.get("currentStock") for r in records] == ["5", "7"]


def test_parse_csv_missing_trailing_fields_become_empty():
    records = parse_csv("name,category,location\nA,X\n")

    assert records[0].get("location") == ""


def test_parse_csv_does_not_understand_quotes():
    records = parse_csv('name,category\n"Vitamin C, 500mg",Supplements\n')

    # The embedded comma shifts the columns; this is a known limitation.
    assert records[0].get("name") == '"Vitamin C'
    assert records[0].get("category") == '500mg"'


def test_parse_csv_header_only_gives_no_records():
    assert parse_csv("name,category\n") == []


@pytest.mark.parametrize("text", ["", "\n", "   \nname\nA\n", " , ,\nA,B\n"])
def test_parse_csv_rejects_missing_header(text):
    with pytest.raises(CsvParseError):
        parse_csv(text)


def test_read_upload_rejects_non_csv_extension(tmp_path):
    path = tmp_path / "inventory.xlsx"
    path.write_text("name\nA\n")

    with pytest.raises(MalformedFileError):
        read_upload(path)


def test_read_upload_rejects_missing_file(tmp_path):
    with pytest.raises(MalformedFileError):
        read_upload(tmp_path / "missing.csv")


def test_read_upload_strips_bom_and_falls_back_to_latin1(tmp_path):
    bom_file = tmp_path / "bom.CSV"
    bom_file.write_bytes("\ufeffname\nA\n".encode("utf-8"))
    latin_file = tmp_path / "latin.csv"
    latin_file.write_bytes("name\nCaf\xe9\n".encode("latin-1"))

    assert read_upload(bom_file).startswith("name")
    assert "Café" in read_upload(latin_file)


def test_parse_csv_only_breaks_lines_on_newline():
    records = parse_csv("name,currentStock\nGauze\x85 pads,10\nA\u2028B,5\nC\x0bD,1\n")

    assert [r.get("name") for r in records] == ["Gauze\x85 pads", "A\u2028B", "C\x0bD"]
    assert [r.get("currentStock") for r in records] == ["10", "5", "1"]


def test_latin1_upload_keeps_one_row_per_line(tmp_path):
    path = tmp_path / "cp1252.csv"
    path.write_bytes(b"name,currentStock,minimumStock\r\nGauze\x85 pads,10,5\r\n")

    records = parse_csv(read_upload(path))

    assert len(records) == 1
    assert records[0].values == {
        "name": "Gauze\x85 pads",
        "currentStock": "10",
        "minimumStock": "5",
    }
