import logging
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ruler.constants import COPILOT_INSTRUCTIONS_DIR, CURSOR_RULES_DIR, VERBOSE_ENV_VAR, VERSION
from ruler.converter import RuleConverter
from ruler.errors import RuleWriteError, SourceDirectoryNotFoundError
from ruler.models import ConversionFailure, ConversionMode, ConversionReport, ConvertedRule, RuleFormat
from ruler.repository import RulesRepository, target_relative_path
from ruler.tui import ConversionConsoleUI


DEFAULT_DIRS = {
    RuleFormat.CURSOR: CURSOR_RULES_DIR,
    RuleFormat.COPILOT: COPILOT_INSTRUCTIONS_DIR,
}


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("ruler")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _conversion_options(mode: ConversionMode) -> Callable:
    source_default = DEFAULT_DIRS[mode.source]
    target_default = DEFAULT_DIRS[mode.target]

    def decorator(func: Callable) -> Callable:
        func = click.option(
            "--dry-run",
            is_flag=True,
            help="Convert and report without writing files.",
        )(func)
        func = click.option(
            "-t",
            "--to",
            "to_dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help=f"Target directory (default: {target_default}).",
        )(func)
        func = click.option(
            "-f",
            "--from",
            "from_dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help=f"Source directory (default: {source_default}).",
        )(func)
        return func

    return decorator


def _write_outputs(
    report: ConversionReport, target: RulesRepository, mode: ConversionMode, dry_run: bool
) -> tuple[ConversionReport, list[tuple[ConvertedRule, Path]]]:
    written: list[ConvertedRule] = []
    targets: list[tuple[ConvertedRule, Path]] = []
    failures: list[ConversionFailure] = list(report.failures)
    for converted in report.converted:
        relative = target_relative_path(converted.path, mode.source, mode.target)
        if not dry_run:
            try:
                target.write(relative, converted.text)
            except OSError as exc:
                failures.append(
                    ConversionFailure(
                        path=converted.path,
                        error=RuleWriteError(target.root / relative, str(exc)),
                    )
                )
                continue
        written.append(converted)
        targets.append((converted, target.root / relative))
    return ConversionReport(converted=written, failures=failures), targets


def _run_conversion(
    mode: ConversionMode, from_dir: Optional[Path], to_dir: Optional[Path], dry_run: bool
) -> None:
    ui = ConversionConsoleUI(Console())
    source = RulesRepository(from_dir or DEFAULT_DIRS[mode.source], mode.source)
    target = RulesRepository(to_dir or DEFAULT_DIRS[mode.target], mode.target)

    if not source.exists():
        raise click.ClickException(str(SourceDirectoryNotFoundError(source.root)))

    entries = list(source.iter_entries())
    if not entries:
        ui.render_no_sources(source.root)
        return

    report = RuleConverter(mode.source, mode.target).convert(entries)
    report, targets = _write_outputs(report, target, mode, dry_run)

    label = f"{mode.value}:{mode.source.value}->{mode.target.value}"
    ui.render_report(
        report,
        targets,
        mode=f"{label} (dry run)" if dry_run else label,
        source=source.root,
        target=target.root,
        dry_run=dry_run,
    )

    if report.failures:
        raise click.exceptions.Exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(VERSION, prog_name="ruler")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    envvar=VERBOSE_ENV_VAR,
    help="Log per-file conversion details to stderr.",
)
def cli(verbose: bool) -> None:
    """Convert between Cursor rules and GitHub Copilot instructions."""
    _configure_logging(verbose)


@cli.command(help="Convert Cursor rules to GitHub Copilot instructions.")
@_conversion_options(ConversionMode.C2G)
def c2g(from_dir: Optional[Path], to_dir: Optional[Path], dry_run: bool) -> None:
    _run_conversion(ConversionMode.C2G, from_dir, to_dir, dry_run)


@cli.command(help="Convert GitHub Copilot instructions to Cursor rules.")
@_conversion_options(ConversionMode.G2C)
def g2c(from_dir: Optional[Path], to_dir: Optional[Path], dry_run: bool) -> None:
    _run_conversion(ConversionMode.G2C, from_dir, to_dir, dry_run)


def main() -> int:
    try:
        code = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        return 1
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
