from pathlib import Path

from rich.panel import Panel
from rich.table import Column, Table
from rich.text import Text

from ruler.models import ConversionReport, ConvertedRule
from ruler.tui.enums import UIStyle


class ConversionTable:
    @staticmethod
    def summary_block(report: ConversionReport, mode: str, source: Path, target: Path) -> Table:
        counts = report.summary()
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode)
        table.add_row("From", Text(str(source)))
        table.add_row("To", Text(str(target)))
        table.add_row("Files", str(counts["files"]))
        return table

    @staticmethod
    def converted_table(items: list[tuple[ConvertedRule, Path]]) -> Table:
        table = Table(
            Column(header="Source", overflow="fold"),
            Column(header="Target", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for converted, target_path in items:
            table.add_row(Text(str(converted.path)), Text(str(target_path)))
        return table


class ResultTable:
    @staticmethod
    def stats_panel(converted: int, failed: int, title: str = "convert") -> Panel:
        stats: dict[str, str] = {
            "converted": str(converted),
            "failed": str(failed),
        }
        table = Table(show_header=False, box=None)
        for key, value in stats.items():
            table.add_row(f"[bold]{key}[/bold]", value)
        return Panel(
            table,
            title=title,
            border_style=UIStyle.GREEN.value if failed == 0 else UIStyle.RED.value,
        )
