from pathlib import Path

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.panel import Panel

from ruler.models import ConversionReport, ConvertedRule
from ruler.tui.enums import UIStyle
from ruler.tui.tables import ConversionTable, ResultTable


def _panel(title: str, body: RenderableType, style: UIStyle) -> Panel:
    return Panel(body, title=title, border_style=style.value, padding=(0, 1))


class ConversionConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_no_sources(self, source: Path) -> None:
        self.console.print(
            _panel("sources", f"No rule files found in {escape(str(source))}", UIStyle.YELLOW)
        )

    def render_report(
        self,
        report: ConversionReport,
        targets: list[tuple[ConvertedRule, Path]],
        mode: str,
        source: Path,
        target: Path,
        dry_run: bool = False,
    ) -> None:
        self.console.print(
            _panel(
                "conversion overview",
                ConversionTable.summary_block(report, mode=mode, source=source, target=target),
                UIStyle.BLUE,
            )
        )

        if targets:
            self.console.print(
                _panel(
                    "would convert" if dry_run else "converted",
                    ConversionTable.converted_table(targets),
                    UIStyle.CYAN,
                )
            )

        if report.failures:
            errors_text = "\n".join(
                f"- {escape(str(item.path))}: {escape(item.reason)}" for item in report.failures
            )
            self.console.print(_panel("errors", errors_text, UIStyle.RED))

        self.console.print(
            ResultTable.stats_panel(
                converted=len(report.converted),
                failed=len(report.failures),
                title="dry run" if dry_run else "convert",
            )
        )
