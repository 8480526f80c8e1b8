"""
Command-line interface for the E-Invoice Validation Gateway.

Usage examples:
    python -m einvoice_gateway.cli check --invoice invoices/valid_invoice.xml
    python -m einvoice_gateway.cli report --input output/raw.json --format pdf --output output/report.pdf
    python -m einvoice_gateway.cli validate --invoice invoices/valid_invoice.xml --rules AUNZ_UBL_1_0_10
"""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from pathlib import Path

import typer

from .checker import check as check_invoice
from .client import ValidatorClient
from .config import get_settings
from .errors import GatewayError
from .normalizer import normalize
from .renderer import render
from .rulesets import parse_rulesets
from .schema import NormalizedReport, RenderedArtifact
from .scratch import ScratchSpace

app = typer.Typer(help="E-invoice checking, validation and report rendering CLI.")


def _ensure_parent_directory(path: Path) -> None:
    """
    Ensure the parent directory for a file path exists.
    """
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)


def _read_invoice(invoice: str) -> bytes:
    invoice_path = Path(invoice)
    if not invoice_path.is_file():
        typer.echo(f"Invoice not found: {invoice_path}", err=True)
        raise typer.Exit(code=1)
    return invoice_path.read_bytes()


def _write_artifact(artifact: RenderedArtifact, output: str) -> Path:
    output_path = Path(output)
    _ensure_parent_directory(output_path)
    if artifact.is_file:
        shutil.move(str(artifact.path), str(output_path))
    else:
        output_path.write_text(artifact.body, encoding="utf-8")
    return output_path


def _finish(report: NormalizedReport, artifact: RenderedArtifact, output: str) -> None:
    output_path = _write_artifact(artifact, output)
    typer.echo(f"Successful: {report.successful}")
    typer.echo(f"Summary: {report.summary}")
    typer.echo(f"Total errors: {report.total_error_count}")
    typer.echo(f"Report written to {output_path}")

    # Exit non-zero if the invoice failed validation
    if not report.successful:
        raise typer.Exit(code=2)


def _scratch() -> ScratchSpace:
    scratch = ScratchSpace(get_settings().scratch_dir)
    scratch.ensure()
    return scratch


@app.callback()
def configure(
    log_level: str = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    logging.basicConfig(
        level=log_level or get_settings().log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@app.command()
def check(
    invoice: str = typer.Option(..., "--invoice", help="XML invoice to check."),
) -> None:
    """
    Check that an invoice is non-empty, well-formed XML.
    """
    content = _read_invoice(invoice)
    try:
        check_invoice(content)
    except GatewayError as exc:
        typer.echo(f"{exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{invoice} is well-formed.")


@app.command()
def report(
    input: str = typer.Option(
        ...,
        "--input",
        help="JSON file holding a raw validator response.",
    ),
    rules: str = typer.Option(
        None,
        "--rules",
        help="Comma-separated rulesets the response was produced for.",
    ),
    format: str = typer.Option("json", "--format", help="json, html, pdf or docx."),
    output: str = typer.Option(
        "output/report.json",
        "--output",
        help="Path to write the rendered report to.",
    ),
    name: str = typer.Option(
        "invoice.xml", "--name", help="Invoice name used in report titles."
    ),
) -> None:
    """
    Normalize a saved validator response and render it.
    """
    input_path = Path(input)
    if not input_path.exists():
        typer.echo(f"Input JSON not found: {input_path}", err=True)
        raise typer.Exit(code=1)

    raw = json.loads(input_path.read_text(encoding="utf-8"))
    try:
        report_obj = normalize(raw, rules or get_settings().default_ruleset)
        artifact = render(report_obj, format, name, _scratch())
    except GatewayError as exc:
        typer.echo(f"{exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1)

    _finish(report_obj, artifact, output)


async def _validate_remote(content: bytes, filename: str, rules: str) -> dict:
    async with ValidatorClient() as client:
        return await client.validate(content, filename, rules)


@app.command()
def validate(
    invoice: str = typer.Option(..., "--invoice", help="XML invoice to validate."),
    rules: str = typer.Option(
        None,
        "--rules",
        help="Comma-separated rulesets. Defaults to the configured rulesets.",
    ),
    format: str = typer.Option("json", "--format", help="json, html, pdf or docx."),
    output: str = typer.Option(
        "output/report.json",
        "--output",
        help="Path to write the rendered report to.",
    ),
) -> None:
    """
    Check an invoice, validate it remotely and render the report.
    """
    content = _read_invoice(invoice)
    filename = Path(invoice).name
    try:
        rulesets = parse_rulesets(rules or get_settings().default_ruleset)
        check_invoice(content)
        raw = asyncio.run(_validate_remote(content, filename, ",".join(rulesets)))
        report_obj = normalize(raw, rulesets)
        artifact = render(report_obj, format, filename, _scratch())
    except GatewayError as exc:
        typer.echo(f"{exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1)

    _finish(report_obj, artifact, output)


def main() -> None:
    """
    Entrypoint used when executing as a module.
    """
    app()


if __name__ == "__main__":
    main()
