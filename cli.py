"""
Command-line interface for the page audit engine.

    python cli.py audit example.com -o ./reports --timeout 60000
    python cli.py list
    python cli.py show <report-id>
"""
from __future__ import annotations

import logging
import sys
import time

import click

from analyzers.orchestrator import run_audit
from config import DEFAULT_NAVIGATION_TIMEOUT_MS, DEFAULT_OUTPUT_DIR, DEVICE_CHOICES, OUTPUT_FORMATS
from models import AuditConfig, AuditResult
from reporting.storage import ReportStorage
from scoring.scorer import terminal_color


logger = logging.getLogger(__name__)

SCORE_ROWS = [
    ("performance",   "Performance"),
    ("visibility",    "Visibility"),
    ("security",      "Security"),
    ("accessibility", "Accessibility"),
    ("trust",         "Trust"),
]


def _format_score(score: int) -> str:
    return click.style(f"{score:>3}", fg=terminal_color(score), bold=True)


def _parse_formats(ctx, param, value: str) -> list[str]:
    formats = [f.strip().lower() for f in value.split(",") if f.strip()]
    unknown = [f for f in formats if f not in OUTPUT_FORMATS]
    if unknown:
        raise click.BadParameter(f"unsupported format(s): {', '.join(unknown)}")
    return formats


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Single-page website audit: performance, visibility, security, accessibility, trust."""
    pass


@cli.command()
@click.argument("url")
@click.option("-o", "--output", default=DEFAULT_OUTPUT_DIR, show_default=True, help="Report directory")
@click.option("-f", "--format", "formats", default="json", show_default=True,
              callback=_parse_formats, help="Comma-separated output formats (json,html,pdf)")
@click.option("-d", "--device", type=click.Choice(DEVICE_CHOICES), default="both", show_default=True,
              help="Screenshot devices")
@click.option("--deep", is_flag=True, help="Check every link instead of the first batch")
@click.option("--timeout", type=int, default=DEFAULT_NAVIGATION_TIMEOUT_MS, show_default=True,
              help="Page load timeout in milliseconds")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def audit(url: str, output: str, formats: list[str], device: str, deep: bool, timeout: int, verbose: bool):
    """Run a full audit on URL"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AuditConfig(url=url, output=output, formats=formats, device=device,
                             deep=deep, timeout=timeout)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="URL") from exc

    click.echo(f"\n🔍 Starting audit for: {config.url}\n")
    started = time.monotonic()

    try:
        with click.progressbar(length=100, label="Auditing", show_pos=False,
                               item_show_func=lambda m: m) as bar:
            done = {"pct": 0}

            def on_progress(pct: int, message: str) -> None:
                step = max(0, pct - done["pct"])
                done["pct"] = max(done["pct"], pct)
                bar.update(step, message)

            result = run_audit(config, on_progress=on_progress)
    except Exception as exc:
        logger.debug("Audit failed", exc_info=True)
        click.secho(f"\nAudit failed: {exc}", fg="red", err=True)
        sys.exit(1)

    click.echo()
    print_scores(result)
    print_summary(result)

    if "json" in config.formats:
        storage = ReportStorage(config.output)
        report_id = storage.save(result)
        click.echo(f"📄 JSON report saved: {storage.report_path(report_id)}")
    for fmt in config.formats:
        if fmt != "json":
            click.secho(f"⚠️  {fmt} output is not available yet; skipped", fg="yellow")

    click.echo(f"\n✅ Audit completed in {time.monotonic() - started:.1f}s\n")


def print_scores(result: AuditResult) -> None:
    scores = result.new_scores
    click.echo("📊 Scores:")
    for key, label in SCORE_ROWS:
        click.echo(f"  ├─ {label + ':':<15}{_format_score(getattr(scores, key))}")
    click.echo(f"  └─ {'Overall:':<15}{_format_score(scores.overall)}")
    click.echo()


def print_summary(result: AuditResult) -> None:
    details = result.legacy.details
    click.echo("📝 Summary:")

    seo = details.seo
    if seo:
        if not seo.meta.title:
            click.echo("  ⚠️  Missing page title")
        if not seo.meta.description:
            click.echo("  ⚠️  Missing meta description")
        if seo.headings.h1_count == 0:
            click.echo("  ⚠️  Missing H1 tag")
        elif seo.headings.h1_count > 1:
            click.echo(f"  ⚠️  Multiple H1 tags ({seo.headings.h1_count})")
        if seo.content.is_thin_content:
            click.echo(f"  ⚠️  Thin content ({seo.content.word_count} words)")
        if seo.images.missing_alt > 0:
            click.echo(f"  ⚠️  Images missing alt text ({seo.images.missing_alt})")
    if details.social and not details.social.open_graph.is_complete:
        click.echo("  ⚠️  Incomplete Open Graph tags")
    if details.tech and not details.tech.security.is_https:
        click.echo("  ⚠️  Site not using HTTPS")
    for issue in details.scanner_issues:
        click.echo(f"  ℹ️  {issue.title}")
    click.echo()

    if details.tech and details.tech.technologies:
        click.echo("🔧 Technologies detected: " + ", ".join(t.name for t in details.tech.technologies))
    if details.social and details.social.profiles:
        click.echo("📱 Social profiles found: " + ", ".join(details.social.profiles))

    quick = result.suggestions.quick_wins
    if quick:
        click.echo("\n⚡ Quick wins:")
        for s in quick:
            click.echo(f"  • {s.title}")


@cli.command("list")
@click.option("-o", "--output", default=DEFAULT_OUTPUT_DIR, show_default=True, help="Report directory")
def list_reports(output: str):
    """List stored reports, newest first"""
    reports = ReportStorage(output).list_reports()
    if not reports:
        click.echo("No reports found.")
        return
    for meta in reports:
        click.echo(f"{meta['id']}  {meta.get('created_at', ''):<32}  {meta.get('url', '')}")


@cli.command()
@click.argument("report_id")
@click.option("-o", "--output", default=DEFAULT_OUTPUT_DIR, show_default=True, help="Report directory")
def show(report_id: str, output: str):
    """Print a stored report's scores and suggestions"""
    stored = ReportStorage(output).load(report_id)
    if stored is None:
        click.secho(f"Report not found: {report_id}", fg="red", err=True)
        sys.exit(1)

    meta = stored["metadata"]
    click.echo(f"\n{meta['url']}  ({meta.get('completed_at') or meta.get('created_at')})\n")

    scores = stored["scores"]
    click.echo("📊 Scores:")
    for key, label in SCORE_ROWS:
        click.echo(f"  ├─ {label + ':':<15}{_format_score(scores[key])}")
    click.echo(f"  └─ {'Overall:':<15}{_format_score(scores['overall'])}")

    buckets = [
        ("⚡ Quick wins", "quick_wins"),
        ("🎯 Priority fixes", "priority_fixes"),
        ("✨ Nice to have", "nice_to_have"),
    ]
    for title, key in buckets:
        items = stored["suggestions"].get(key) or []
        if items:
            click.echo(f"\n{title}:")
            for s in items:
                click.echo(f"  • {s['title']} ({s['impact']} impact, {s['effort']} effort)")
    click.echo()


if __name__ == "__main__":
    cli()
