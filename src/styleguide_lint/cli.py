"""
CLI for styleguide-lint.

Checks Markdown style guides for editorial defects and shows the
structure the checks work on.

Usage:
    guidelint check README.md
    guidelint check docs/ --format json --output report.json
    guidelint outline README.md
    guidelint toc README.md
    guidelint examples README.md
    guidelint diff README-old.md README.md
    guidelint revisions drafts/
    guidelint rules
"""

import functools
import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from styleguide_lint import __version__
from styleguide_lint.config import SEVERITIES, LintConfig
from styleguide_lint.errors import StyleGuideLintError
from styleguide_lint.linter import Linter
from styleguide_lint.logging import configure_logging, get_logger
from styleguide_lint.parser.example_extractors import ExampleExtractor
from styleguide_lint.parser.markdown_parser import MarkdownParser, resolve_anchor
from styleguide_lint.reporters import REPORTERS, get_reporter
from styleguide_lint.revisions import compare_revisions, group_revisions, similarity
from styleguide_lint.rules import get_rule, list_rules

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def handle_errors(func):
    """Turn tool errors into a red message and exit status 2."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StyleGuideLintError as e:
            logger.debug("command_failed", **e.to_dict())
            err_console.print(f"[bold red]Error:[/bold red] {e}")
            raise click.exceptions.Exit(2)

    return wrapper


def _split_ids(values: tuple[str, ...]) -> list[str]:
    ids = []
    for value in values:
        ids.extend(part.strip().upper() for part in value.split(",") if part.strip())
    return ids


def _load_config(ctx: click.Context, start: Path | None = None) -> LintConfig:
    config_path = ctx.obj.get("config_path")
    if config_path:
        return LintConfig.from_yaml(Path(config_path))
    return LintConfig.discover(start)


def _parser(config: LintConfig) -> MarkdownParser:
    return MarkdownParser(toc_titles=config.toc_titles)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(dir_okay=False),
    help="Config file (default: nearest .styleguide-lint.yaml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for diagnostics on stderr.",
)
@click.option("--log-json", is_flag=True, help="Emit logs as JSON.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str, log_json: bool):
    """Lint Markdown style guides.

    Checks that the table of contents resolves, that no section is
    duplicated, and that Bad/Good code samples are paired and current.
    """
    configure_logging(level=log_level, json_format=True if log_json else None)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(sorted(REPORTERS)),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the report to a file.")
@click.option(
    "--fail-on",
    type=click.Choice(SEVERITIES),
    default=None,
    help="Lowest severity that fails the run (default from config: error).",
)
@click.option("--select", multiple=True, help="Only run these rule ids (comma-separated or repeated).")
@click.option("--ignore", multiple=True, help="Skip these rule ids (comma-separated or repeated).")
@click.pass_context
@handle_errors
def check(
    ctx: click.Context,
    paths: tuple[Path, ...],
    output_format: str,
    output: Path | None,
    fail_on: str | None,
    select: tuple[str, ...],
    ignore: tuple[str, ...],
):
    """Lint style-guide files or directories.

    Exits 1 when a violation at or above --fail-on is found, 2 on
    configuration or usage errors.

    Examples:
        guidelint check README.md
        guidelint check docs/ --ignore TOC003 --fail-on warning
    """
    config = _load_config(ctx, paths[0])

    for rule_id in _split_ids(select) + _split_ids(ignore):
        get_rule(rule_id)
    if select:
        config.enabled_rules = _split_ids(select)
    config.disabled_rules = config.disabled_rules + _split_ids(ignore)

    report = Linter(config).lint_paths(list(paths))
    reporter = get_reporter(output_format)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            reporter.write(report, f)
        err_console.print(f"✅ Report written to {output}")
    elif output_format == "text":
        reporter.write(report, console.file)
    else:
        click.echo(reporter.render(report))

    if report.has_failures(fail_on or config.fail_on):
        ctx.exit(1)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def outline(ctx: click.Context, file_path: Path, as_json: bool):
    """Show the section tree with anchors and line numbers."""
    document = _parser(_load_config(ctx, file_path)).parse_file(file_path)

    if as_json:
        click.echo(json.dumps(document.outline(), indent=2))
        return

    console.print(f"\n[bold blue]📄 {escape(document.title)}[/bold blue]\n")
    for section in document.sections:
        indent = "  " * (section.level - 1)
        console.print(
            f"{indent}[bold]{escape(section.title)}[/bold] [dim]#{section.anchor}  (line {section.line})[/dim]",
            highlight=False,
        )


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def toc(ctx: click.Context, file_path: Path):
    """Show table-of-contents entries and whether each resolves."""
    document = _parser(_load_config(ctx, file_path)).parse_file(file_path)

    if not document.toc:
        console.print("[yellow]⚠️  No table of contents found[/yellow]")
        return

    table = Table(title=f"Table of contents ({len(document.toc)} entries)")
    table.add_column("Line", justify="right")
    table.add_column("Entry", style="cyan")
    table.add_column("Anchor")
    table.add_column("Resolves", justify="center")

    unresolved = 0
    for entry in document.toc:
        ok = resolve_anchor(document, entry.anchor)
        unresolved += 0 if ok else 1
        table.add_row(str(entry.line), "  " * entry.depth + escape(entry.text), f"#{entry.anchor}", "✅" if ok else "❌")

    console.print(table)
    if unresolved:
        console.print(f"[bold red]{unresolved} unresolved entr{'y' if unresolved == 1 else 'ies'}[/bold red]")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def examples(ctx: click.Context, file_path: Path):
    """List Bad/Good example pairs and unpaired samples per section."""
    config = _load_config(ctx, file_path)
    document = _parser(config).parse_file(file_path)
    extractor = ExampleExtractor(bad_labels=config.bad_labels, good_labels=config.good_labels)
    result = extractor.extract_pairs(document)

    table = Table(title=f"Example pairs ({len(result.pairs)})")
    table.add_column("Section", style="cyan")
    table.add_column("Bad", justify="right")
    table.add_column("Good", justify="right")
    table.add_column("Language")

    for pair in result.pairs:
        language = pair.good.language or "-"
        if not pair.languages_match:
            language = f"{pair.bad.language or '-'} / {pair.good.language or '-'}"
        table.add_row(pair.section or "-", str(pair.bad.line), str(pair.good.line), language)

    console.print(table)

    if result.unpaired:
        console.print(f"\n[bold yellow]⚠️  Unpaired samples ({len(result.unpaired)}):[/bold yellow]")
        for block in result.unpaired:
            console.print(f"  line {block.line}: {escape(block.label_text or '')} ({block.section or '-'})", highlight=False)


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--show-diff", is_flag=True, help="Print unified diffs of changed sections.")
@click.pass_context
@handle_errors
def diff(ctx: click.Context, old: Path, new: Path, as_json: bool, show_diff: bool):
    """Compare two revisions of a guide section by section."""
    config = _load_config(ctx, new)
    parser = _parser(config)
    extractor = ExampleExtractor(bad_labels=config.bad_labels, good_labels=config.good_labels)
    result = compare_revisions(parser.parse_file(old), parser.parse_file(new), extractor)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(f"\n[bold blue]🔀 {old} → {new}[/bold blue]  similarity {result.similarity:.0%}\n")
    if result.is_identical:
        console.print("[green]✅ No section differences[/green]")
        return

    for ref in result.added:
        console.print(f"  [green]+ {escape(ref.title)}[/green] (line {ref.line})", highlight=False)
    for ref in result.removed:
        console.print(f"  [red]- {escape(ref.title)}[/red] (line {ref.line})", highlight=False)
    for move in result.moved:
        console.print(f"  [blue]→ {escape(move.old_title)}  ⇒  {escape(move.new_title)}[/blue]", highlight=False)
    for change in result.changed:
        console.print(f"  [yellow]~ {escape(change.title)}[/yellow] ({change.similarity:.0%} similar)", highlight=False)
        if show_diff:
            for line in change.diff:
                console.print(f"      {line}", markup=False, highlight=False)

    if result.example_changes:
        console.print(f"\n[bold]Code samples changed ({len(result.example_changes)}):[/bold]")
        for change in result.example_changes:
            label = f" [{change.label}]" if change.label else ""
            console.print(f"  {change.kind}: {change.section} #{change.index + 1}{label}", markup=False, highlight=False)

    console.print(f"\n[dim]{result.unchanged} section(s) unchanged[/dim]")


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None, help="Similarity needed to group two files.")
@click.pass_context
@handle_errors
def revisions(ctx: click.Context, directory: Path, threshold: float | None):
    """Group files in a directory that are drafts of the same guide."""
    config = _load_config(ctx, directory)
    linter = Linter(config)
    documents = [linter.parser.parse_file(path) for path in linter.collect_files([directory])]
    groups = group_revisions(documents, threshold if threshold is not None else config.revision_threshold)

    for number, group in enumerate(groups, start=1):
        head = group[0]
        console.print(f"\n[bold]Group {number}[/bold]: {escape(head.title)}")
        for document in group:
            score = similarity(head, document)
            console.print(f"  {document.path}  [dim]{score:.0%}[/dim]", highlight=False)

    drafts = sum(1 for g in groups if len(g) > 1)
    console.print(f"\n{len(documents)} file(s), {len(groups)} group(s), {drafts} with multiple revisions")


@cli.command()
def rules():
    """List the available rules."""
    table = Table(title="Rules")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Description")

    for rule in list_rules():
        table.add_row(rule.rule_id, rule.name, rule.severity.value, rule.description)

    console.print(table)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
