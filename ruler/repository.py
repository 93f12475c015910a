"""Filesystem access for rule directories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Union

from ruler.constants import (
    COPILOT_INSTRUCTIONS_SUFFIX,
    CURSOR_RULE_SUFFIX,
    MARKDOWN_SUFFIX,
)
from ruler.errors import RuleReadError
from ruler.models import RuleFormat


_SOURCE_SUFFIXES: dict[RuleFormat, tuple[str, ...]] = {
    RuleFormat.CURSOR: (CURSOR_RULE_SUFFIX, MARKDOWN_SUFFIX),
    RuleFormat.COPILOT: (COPILOT_INSTRUCTIONS_SUFFIX, MARKDOWN_SUFFIX),
}

_OUTPUT_SUFFIXES: dict[RuleFormat, str] = {
    RuleFormat.CURSOR: CURSOR_RULE_SUFFIX,
    RuleFormat.COPILOT: COPILOT_INSTRUCTIONS_SUFFIX,
}


def _strip_suffix(name: str, suffixes: tuple[str, ...]) -> str:
    lowered = name.lower()
    for suffix in suffixes:
        if lowered.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return Path(name).stem


def target_relative_path(relative: Path, source: RuleFormat, target: RuleFormat) -> Path:
    """Rename ``relative`` to the target format's extension, keeping its folders."""
    stem = _strip_suffix(relative.name, _SOURCE_SUFFIXES[source])
    return relative.with_name(f"{stem}{_OUTPUT_SUFFIXES[target]}")


class RulesRepository:
    def __init__(self, root: Path, rule_format: RuleFormat) -> None:
        self._root = root
        self._format = rule_format

    @property
    def root(self) -> Path:
        return self._root

    @property
    def rule_format(self) -> RuleFormat:
        return self._format

    def exists(self) -> bool:
        return self._root.is_dir()

    def _is_rule_file(self, relative: Path) -> bool:
        if any(part.startswith(".") for part in relative.parts):
            return False
        return relative.name.lower().endswith(_SOURCE_SUFFIXES[self._format])

    def list_rule_files(self) -> list[Path]:
        if not self.exists():
            return []
        files: list[Path] = []
        for child in sorted(self._root.rglob("*")):
            if not child.is_file():
                continue
            relative = child.relative_to(self._root)
            if self._is_rule_file(relative):
                files.append(relative)
        return files

    def read(self, relative: Path) -> str:
        path = self._root / relative
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise RuleReadError(path, str(exc)) from exc

    def iter_entries(self) -> Iterator[tuple[Path, Union[str, RuleReadError]]]:
        for relative in self.list_rule_files():
            try:
                yield relative, self.read(relative)
            except RuleReadError as exc:
                yield relative, exc

    def write(self, relative: Path, text: str) -> Path:
        path = self._root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        return path
