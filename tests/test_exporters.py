import csv
import datetime
import io

from src.exporters import generate_summary_csv, generate_summary_html, summary_filename

FILE_IDS = ("JB0000002", "JB0000010")

ROWS = [
    {
        "partNumber": 'Cable "A"',
        "tier": "Tier 1",
        "total_quantity": 7,
        "description": "Flex, 2m",
        "file_quantities": {"JB0000002": 3, "JB0000010": 4},
    },
    {
        "partNumber": "P2",
        "tier": "Tier 2",
        "total_quantity": 1,
        "description": None,
        "file_quantities": {"JB0000010": 1},
    },
]


def test_csv_layout():
    text = generate_summary_csv(ROWS, FILE_IDS).decode("utf-8-sig")
    lines = text.splitlines()

    assert lines[0] == '"Part Number","Tier","Total Quantity","Description","JB0000002","JB0000010"'
    assert lines[1] == '"Cable ""A""","Tier 1",7,"Flex, 2m",3,4'
    assert lines[2] == '"P2","Tier 2",1,"",0,1'


def test_csv_parses_back():
    text = generate_summary_csv(ROWS, FILE_IDS).decode("utf-8-sig")
    parsed = list(csv.reader(io.StringIO(text)))

    assert parsed[1][0] == 'Cable "A"'
    assert parsed[1][3] == "Flex, 2m"
    assert len(parsed) == 3


def test_csv_has_excel_signature():
    assert generate_summary_csv(ROWS, FILE_IDS).startswith(b"\xef\xbb\xbf")


def test_summary_filename():
    assert summary_filename(datetime.date(2024, 5, 1)) == "2024-05-01_BOM_Summary.csv"
    assert summary_filename(datetime.date(2024, 5, 1), ext="html") == "2024-05-01_BOM_Summary.html"


def test_html_report():
    rows = ROWS + [
        {
            "partNumber": "<script>alert(1)</script>",
            "tier": "Tier 2",
            "total_quantity": 2,
            "description": "Tom & Jerry",
            "file_quantities": {"JB0000002": 2},
        }
    ]
    page = generate_summary_html(rows, FILE_IDS, title="Site BOM")

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Site BOM</title>" in page
    assert "<th>JB0000010</th>" in page
    assert "3 unique parts across 2 files." in page
    assert "<script>alert(1)</script>" not in page
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page
    assert "Tom &amp; Jerry" in page
    assert 'id="search"' in page
