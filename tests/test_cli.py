"""Tests for the money-showcase command line."""
import io
import json
from unittest.mock import patch

import pytest

from money_showcase import cli


@pytest.fixture
def document_path(tmp_path, showcase_document):
    path = tmp_path / "showcase.json"
    path.write_text(json.dumps(showcase_document), encoding="utf-8")
    return path


def test_prints_parameters_of_filled_form(document_path, capsys):
    exit_code = cli.run_cli(
        [
            str(document_path),
            "--set", "phone=79991234567",
            "--set", "sum=250.00",
            "--set", "colour=red",
            "--set", "shade=navy",
        ]
    )

    assert exit_code == 0
    parameters = json.loads(capsys.readouterr().out)
    assert parameters["phone"] == "79991234567"
    assert parameters["colour"] == "red"
    assert parameters["csrf"] == "abc"
    assert "shade" not in parameters


def test_incomplete_form_exits_with_two(document_path, capsys, caplog):
    exit_code = cli.run_cli([str(document_path), "--set", "colour=blue"])

    assert exit_code == 2
    assert capsys.readouterr().out == ""
    assert "Invalid field: phone" in caplog.text
    assert "Invalid field: shade" in caplog.text


def test_unknown_names_are_reported(document_path, caplog):
    cli.run_cli([str(document_path), "--set", "nickname=bob"])
    assert "No parameter named 'nickname'" in caplog.text


def test_showcase_output_reencodes_document(document_path, capsys):
    exit_code = cli.run_cli([str(document_path), "--set", "phone=79991234567", "--output", "showcase"])

    assert exit_code == 0
    document = json.loads(capsys.readouterr().out)
    assert document["form"]["fields"][0]["value"] == "79991234567"


def test_reads_document_from_stdin(showcase_document, capsys):
    stdin = io.TextIOWrapper(io.BytesIO(json.dumps(showcase_document).encode("utf-8")))
    with patch.object(cli.sys, "stdin", stdin):
        exit_code = cli.run_cli(["-", "--output", "showcase"])
    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["title"] == "Mobile top-up"


def test_missing_file_exits_with_one(tmp_path):
    assert cli.run_cli([str(tmp_path / "missing.json")]) == 1


def test_malformed_document_exits_with_one(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{\"form\": {}}", encoding="utf-8")
    assert cli.run_cli([str(path)]) == 1


def test_source_and_scid_are_exclusive(document_path):
    with pytest.raises(SystemExit):
        cli.run_cli([str(document_path), "--scid", "5551"])
    with pytest.raises(SystemExit):
        cli.run_cli([])


def test_bad_assignment_is_rejected(document_path):
    with pytest.raises(SystemExit):
        cli.run_cli([str(document_path), "--set", "novalue"])
