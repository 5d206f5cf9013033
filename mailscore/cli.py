"""
mailscore CLI - Command line interface for validation and scoring.

Usage:
    mailscore --help                          Show all commands
    mailscore check-template -s "Hi" -f t.html
    mailscore check-list emails.txt           One address per line
    mailscore probe user@example.org -s "Test" -f t.html
    mailscore health-metrics --window 7d
    mailscore quality 42
"""

import asyncio
from pathlib import Path

import typer

app = typer.Typer(
    name="mailscore",
    help="mailscore CLI - email validation and deliverability scoring",
    no_args_is_help=True,
)


# --- Printer helpers ---


def _print_success(message: str) -> None:
    """Print a success message."""
    typer.echo(f"  ✅ {message}")


def _print_warning(message: str) -> None:
    """Print a warning message."""
    typer.echo(f"  ⚠️ {message}")


def _print_info(message: str) -> None:
    """Print an advisory message."""
    typer.echo(f"  💡 {message}")


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        _print_error(f"Cannot read {path}: {e}")
        raise typer.Exit(2) from e


@app.command()
def check_template(
    subject: str = typer.Option("", "--subject", "-s", help="Subject line"),
    html_file: Path = typer.Option(..., "--html-file", "-f", help="HTML body file"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """Grade an email template. Exits 1 when it has blocking issues."""
    from mailscore.config import get_config
    from mailscore.services.email_validation import EmailTemplate, build_template_validator

    validator = build_template_validator(get_config().validation)
    result = validator.validate(EmailTemplate(subject=subject, html_content=_read_text(html_file)))

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        typer.echo(
            f"\nScore: {result.score}/100 | Deliverability: {result.deliverability_score}/100"
            f" | Spam: {result.spam_score}/10"
        )
        for issue in result.issues:
            _print_error(issue)
        for warning in result.warnings:
            _print_warning(warning)
        for suggestion in result.suggestions:
            _print_info(suggestion)
        if result.is_valid:
            _print_success("Template is valid")

    if not result.is_valid:
        raise typer.Exit(1)


@app.command()
def check_list(
    path: Path = typer.Argument(..., help="File with one address per line"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """Split an address list into valid, invalid, duplicate and disposable buckets."""
    from mailscore.config import get_config
    from mailscore.services.email_validation import ListHygieneValidator

    addresses = [line for line in _read_text(path).splitlines() if line.strip()]
    validator = ListHygieneValidator(get_config().validation.disposable_domains)
    result = validator.validate(addresses)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    report = result.report
    typer.echo(f"\nTotal: {report.total} | Validity: {report.validity_rate}%")
    _print_success(f"Valid: {report.valid}")
    _print_warning(f"Invalid: {report.invalid}")
    _print_warning(f"Duplicates: {report.duplicates}")
    _print_warning(f"Disposable: {report.disposable}")


@app.command()
def probe(
    to: str = typer.Argument(..., help="Recipient address"),
    subject: str = typer.Option("Deliverability test", "--subject", "-s", help="Subject line"),
    html_file: Path | None = typer.Option(None, "--html-file", "-f", help="HTML body file"),
):
    """Run the deliverability gates and send a probe email."""
    from mailscore.core.logging import setup_logging
    from mailscore.services.email_validation import get_validation_service

    setup_logging()
    html = _read_text(html_file) if html_file else "<p>Deliverability test</p>"

    service = get_validation_service()
    result = asyncio.run(service.test_deliverability(to, subject, html))

    for gate, passed in result.checks.model_dump().items():
        if passed:
            _print_success(f"{gate}")
        else:
            _print_warning(f"{gate}")

    if not result.success:
        _print_error(result.error or "Deliverability check failed")
        raise typer.Exit(1)

    _print_success(f"Sent, message id {result.message_id}")


@app.command()
def health_metrics(
    window: str = typer.Option("30d", "--window", "-w", help="Trailing window: 7d, 30d or 90d"),
):
    """Show sending health for a trailing window."""
    from mailscore.core.logging import setup_logging
    from mailscore.services.email_validation import (
        StoreUnavailableError,
        TimeWindow,
        get_validation_service,
    )

    setup_logging()
    try:
        time_window = TimeWindow(window)
    except ValueError as e:
        _print_error(f"Unknown window {window!r}, expected 7d, 30d or 90d")
        raise typer.Exit(2) from e

    try:
        metrics = asyncio.run(get_validation_service().get_health_metrics(time_window))
    except StoreUnavailableError as e:
        _print_error(str(e))
        raise typer.Exit(1) from e

    typer.echo(metrics.model_dump_json(indent=2))


@app.command()
def quality(
    sent_email_id: int = typer.Argument(..., help="Sent email id"),
):
    """Show the quality score of one sent email."""
    from mailscore.core.logging import setup_logging
    from mailscore.services.email_validation import (
        SentEmailNotFoundError,
        StoreUnavailableError,
        get_validation_service,
    )

    setup_logging()
    try:
        score = asyncio.run(get_validation_service().get_quality_score(sent_email_id))
    except SentEmailNotFoundError as e:
        _print_error(str(e))
        raise typer.Exit(1) from e
    except StoreUnavailableError as e:
        _print_error(str(e))
        raise typer.Exit(1) from e

    typer.echo(score.model_dump_json(indent=2))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Start the API server."""
    import uvicorn

    uvicorn.run("mailscore.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
