"""CLI tests."""

import json

import pytest
from typer.testing import CliRunner

from einvoice_gateway import cli
from einvoice_gateway.cli import app

from .conftest import VALID_INVOICE, raw_result, ruleset_report

runner = CliRunner()


@pytest.fixture(autouse=True)
def scratch_env(tmp_path, monkeypatch):
    monkeypatch.setenv("EINVOICE_SCRATCH_DIR", str(tmp_path / "scratch"))


@pytest.fixture
def raw_file(tmp_path, mixed_raw):
    path = tmp_path / "raw.json"
    path.write_text(json.dumps(mixed_raw), encoding="utf-8")
    return path


def test_check_well_formed(tmp_path) -> None:
    invoice = tmp_path / "invoice.xml"
    invoice.write_bytes(VALID_INVOICE)

    result = runner.invoke(app, ["check", "--invoice", str(invoice)])

    assert result.exit_code == 0
    assert "well-formed" in result.output


def test_check_malformed(tmp_path) -> None:
    invoice = tmp_path / "broken.xml"
    invoice.write_text("<Invoice><ID>1</Invoice>")

    result = runner.invoke(app, ["check", "--invoice", str(invoice)])

    assert result.exit_code == 1


def test_check_missing_file(tmp_path) -> None:
    result = runner.invoke(app, ["check", "--invoice", str(tmp_path / "nope.xml")])
    assert result.exit_code == 1


def test_report_json_unsuccessful_exits_2(tmp_path, raw_file) -> None:
    output = tmp_path / "out" / "report.json"

    result = runner.invoke(
        app,
        ["report", "--input", str(raw_file), "--output", str(output)],
    )

    assert result.exit_code == 2
    data = json.loads(output.read_text(encoding="utf-8"))
    assert list(data["results"]) == ["AUNZ_PEPPOL", "EN16931_Syntax"]
    assert "Total errors: 1" in result.output


def test_report_docx_moves_file_out_of_scratch(tmp_path) -> None:
    raw = tmp_path / "clean.json"
    raw.write_text(json.dumps(raw_result({"AUNZ_UBL_1_0_10": ruleset_report()})))
    output = tmp_path / "report.docx"

    result = runner.invoke(
        app,
        [
            "report",
            "--input",
            str(raw),
            "--rules",
            "AUNZ_UBL_1_0_10",
            "--format",
            "docx",
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert output.read_bytes().startswith(b"PK")
    assert list((tmp_path / "scratch").iterdir()) == []


def test_report_unknown_ruleset(tmp_path, raw_file) -> None:
    result = runner.invoke(
        app,
        [
            "report",
            "--input",
            str(raw_file),
            "--rules",
            "AUNZ_PEPPOL_SB_1_0_10",
            "--output",
            str(tmp_path / "r.json"),
        ],
    )
    assert result.exit_code == 1


def test_validate_runs_full_pipeline(tmp_path, monkeypatch) -> None:
    invoice = tmp_path / "invoice.xml"
    invoice.write_bytes(VALID_INVOICE)
    output = tmp_path / "report.html"
    calls = []

    async def fake_remote(content, filename, rules):
        calls.append((filename, rules))
        return raw_result({"AUNZ_UBL_1_0_10": ruleset_report()})

    monkeypatch.setattr(cli, "_validate_remote", fake_remote)

    result = runner.invoke(
        app,
        [
            "validate",
            "--invoice",
            str(invoice),
            "--rules",
            "AUNZ_UBL_1_0_10",
            "--format",
            "html",
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert calls == [("invoice.xml", "AUNZ_UBL_1_0_10")]
    assert "Validation Report for invoice.xml" in output.read_text(encoding="utf-8")


def test_validate_sends_parsed_rulesets(tmp_path, monkeypatch) -> None:
    invoice = tmp_path / "invoice.xml"
    invoice.write_bytes(VALID_INVOICE)
    calls = []

    async def fake_remote(content, filename, rules):
        calls.append(rules)
        return raw_result(
            {
                "AUNZ_PEPPOL_1_0_10": ruleset_report(),
                "AUNZ_UBL_1_0_10": ruleset_report(),
            }
        )

    monkeypatch.setattr(cli, "_validate_remote", fake_remote)

    result = runner.invoke(
        app,
        [
            "validate",
            "--invoice",
            str(invoice),
            "--rules",
            " AUNZ_PEPPOL_1_0_10 , AUNZ_UBL_1_0_10",
            "--output",
            str(tmp_path / "report.json"),
        ],
    )

    assert result.exit_code == 0
    assert calls == ["AUNZ_PEPPOL_1_0_10,AUNZ_UBL_1_0_10"]


def test_validate_rejects_blank_rules_before_remote_call(tmp_path, monkeypatch) -> None:
    invoice = tmp_path / "invoice.xml"
    invoice.write_bytes(VALID_INVOICE)

    async def fake_remote(content, filename, rules):
        raise AssertionError("validator must not be called")

    monkeypatch.setattr(cli, "_validate_remote", fake_remote)

    result = runner.invoke(
        app, ["validate", "--invoice", str(invoice), "--rules", " , "]
    )

    assert result.exit_code == 1
