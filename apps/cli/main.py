"""CLI application for GradleFix."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from gradlefix.detect import identify
from gradlefix.errors import GradleFixError
from gradlefix.formats import DependencyFormat, get_format
from gradlefix.inspections import Problem, fix_all, inspect
from gradlefix.logging import setup_logging
from gradlefix.outdated import check_project
from gradlefix.paste import convert_groovy, convert_kotlin
from gradlefix.releases import LatestVersionContext, ReleaseFeed
from gradlefix.settings import load_application_settings, load_project_settings
from gradlefix.wrapper import find_wrapper_version, upgrade_wrapper

console = Console()


def read_input(file_path: str) -> tuple[str, str | None]:
    """Read a file, or stdin for '-'; returns the content and the filename hint."""
    if file_path == "-":
        return sys.stdin.read(), None

    path_obj = Path(file_path)
    if not path_obj.exists():
        console.print(f"Error: File {file_path} not found", style="red")
        raise typer.Exit(1)
    return path_obj.read_text(), file_path


def resolve_format(format_name: str | None, project_dir: Path) -> DependencyFormat:
    """Preferred format from the option, falling back to the project settings."""
    if format_name:
        try:
            fmt = get_format(format_name)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--dependency-format") from e
        if not fmt.generatable:
            raise typer.BadParameter(f"{fmt.human_name} format cannot be generated", param_hint="--dependency-format")
        return fmt
    return load_project_settings(project_dir).format


def format_problems_json(path: str, problems: list[Problem]) -> str:
    reports = [
        {
            "code": problem.code,
            "message": problem.message,
            "level": problem.level.value,
            "start": problem.start,
            "end": problem.end,
            "fixable": problem.fix is not None,
        }
        for problem in problems
    ]
    return json.dumps({"file": path, "problems": reports}, indent=2)


def problems_table(content: str, problems: list[Problem]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Code")
    table.add_column("Message")
    table.add_column("Fix")
    for problem in problems:
        line = content.count("\n", 0, problem.start) + 1
        table.add_row(str(line), problem.code, problem.message, "yes" if problem.fix else "")
    return table


app = typer.Typer(
    name="gradlefix",
    help="GradleFix - Normalize Gradle Kotlin DSL dependency declarations",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    log_level: str | None = typer.Option(None, "--log-level", help="Explicit log level, e.g. DEBUG"),
) -> None:
    """GradleFix - Normalize Gradle Kotlin DSL dependency declarations."""
    try:
        setup_logging(verbose=verbose, quiet=quiet, log_level=log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


@app.command()
def check(
    file_path: str = typer.Argument(help="Path to a build.gradle.kts file (use '-' for stdin)"),
    format_name: str | None = typer.Option(None, "--dependency-format", "-f", help="Preferred dependency format"),
    output_format: str = typer.Option("table", "--format", help="Output format: table or json"),
) -> None:
    """Report problems in a Kotlin DSL build script."""
    try:
        content, filename = read_input(file_path)
        project_dir = Path(file_path).parent if filename else Path.cwd()
        problems = inspect(content, resolve_format(format_name, project_dir))

        if output_format == "json":
            console.print_json(format_problems_json(filename or "<stdin>", problems))
        elif problems:
            console.print(problems_table(content, problems))
        else:
            console.print("No problems found")

        if problems:
            raise typer.Exit(2)

    except typer.Exit:
        raise
    except GradleFixError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def fix(
    file_path: str = typer.Argument(help="Path to a build.gradle.kts file (use '-' for stdin)"),
    output: str | None = typer.Option(None, "--out", "-o", help="Output file (use '-' for stdout)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file in place"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the fixed script without writing it"),
    format_name: str | None = typer.Option(None, "--dependency-format", "-f", help="Preferred dependency format"),
) -> None:
    """Apply every available quick fix to a Kotlin DSL build script."""
    try:
        content, filename = read_input(file_path)
        project_dir = Path(file_path).parent if filename else Path.cwd()
        problems = inspect(content, resolve_format(format_name, project_dir))
        fixed = fix_all(content, problems)

        if fixed == content:
            console.print("Nothing to fix")
            raise typer.Exit(0)

        if dry_run or (output == "-") or (filename is None and not output):
            sys.stdout.write(fixed)
        elif in_place and filename:
            Path(filename).write_text(fixed)
            console.print(f"Fixed {filename}")
        elif output:
            Path(output).write_text(fixed)
            console.print(f"Wrote fixed script to {output}")
        else:
            console.print("Error: Specify --in-place, --out, or --dry-run", style="red")
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except GradleFixError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def convert(
    file_path: str = typer.Argument("-", help="Snippet to convert (use '-' for stdin)"),
    source: str = typer.Option("auto", "--from", help="Snippet dialect: groovy, kotlin or auto"),
    format_name: str | None = typer.Option(None, "--dependency-format", "-f", help="Target dependency format"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Convert detected Groovy without asking"),
) -> None:
    """Convert a pasted dependency snippet into the preferred Kotlin DSL format."""
    try:
        content, filename = read_input(file_path)
        dialect = identify(content, filename) if source == "auto" else source
        settings = load_project_settings(Path.cwd())
        target = resolve_format(format_name, Path.cwd())

        if dialect == "groovy":
            # Only ask when the dialect was guessed
            if source == "auto" and not (yes or settings.always_convert_groovy):
                if not typer.confirm("Snippet looks like Groovy DSL, convert it to Kotlin DSL?", default=True, err=True):
                    sys.stdout.write(content)
                    raise typer.Exit(0)
            result = convert_groovy(content, target)
        elif dialect in ("kotlin", "unknown"):
            result = convert_kotlin(content, target)
        else:
            console.print(f"Error: Unsupported dialect: {dialect}", style="red")
            raise typer.Exit(1)

        sys.stdout.write(result.text)

    except typer.Exit:
        raise
    except GradleFixError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def version(
    project_dir: Path = typer.Argument(Path("."), help="Gradle project root"),
    upgrade: bool = typer.Option(False, "--upgrade", help="Upgrade the wrapper to the latest version"),
) -> None:
    """Check whether the project's Gradle wrapper is outdated."""
    try:
        wrapper = find_wrapper_version(project_dir)
        if wrapper is None:
            console.print(f"Error: No Gradle wrapper found in {project_dir}", style="red")
            raise typer.Exit(1)

        application = load_application_settings()
        settings = load_project_settings(project_dir, application)
        context = LatestVersionContext()
        asyncio.run(context.refresh(ReleaseFeed(application.feed_url, application.feed_timeout)))

        report = check_project(wrapper.version, context, settings)
        if report is None:
            console.print(f"Gradle {wrapper.version} (outdated version notifications are ignored)")
            raise typer.Exit(0)

        if not report.is_outdated:
            console.print(f"Gradle {report.installed} is up to date (latest: {report.latest})", style="green")
            raise typer.Exit(0)

        console.print(
            f"Gradle {report.installed} is outdated, latest is {report.latest} ({report.severity.name.lower()} update)",
            style="yellow",
        )
        if upgrade:
            text = wrapper.properties_file.read_text()
            wrapper.properties_file.write_text(upgrade_wrapper(text, context.latest))
            console.print(f"Updated {wrapper.properties_file}")

    except typer.Exit:
        raise
    except GradleFixError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
