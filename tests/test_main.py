"""
Tests for the command line entry point.
"""

import json

from signloop.main import guess_mime_type, main


def test_guess_mime_type():
    """MIME types are guessed from the file extension."""
    assert guess_mime_type("lease.pdf") == "application/pdf"
    assert guess_mime_type("scan.png") == "image/png"
    assert guess_mime_type("notes.txt") == "text/plain"
    assert guess_mime_type("archive") == "application/octet-stream"


def test_extract_command(tmp_path, capsys, sample_contract):
    """The extract command prints the extraction as JSON."""
    contract_file = tmp_path / "contract.txt"
    contract_file.write_text(sample_contract, encoding="utf-8")

    exit_code = main(["extract", str(contract_file)])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["method"] == "pdf_parse"
    assert output["text"] == sample_contract.strip()


def test_extract_command_unsupported_type(tmp_path, capsys):
    """Pipeline errors exit with a non-zero code."""
    contract_file = tmp_path / "contract.docx"
    contract_file.write_bytes(b"PK\x03\x04")

    exit_code = main(["extract", str(contract_file)])

    assert exit_code == 2
    assert "not supported" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    """A missing input file is reported."""
    exit_code = main(["analyze", str(tmp_path / "missing.pdf")])

    assert exit_code == 1
    assert "File not found" in capsys.readouterr().err
