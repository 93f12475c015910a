"""Per-format rule compilers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import yaml

from ruler.constants import (
    COPILOT_APPLY_TO_KEY,
    CURSOR_ALWAYS_APPLY_KEY,
    CURSOR_GLOBS_KEY,
    DESCRIPTION_KEY,
    FRONTMATTER_DELIMITER,
)
from ruler.models import RuleFormat
from ruler.rules.models import RuleDocument


def _dump_field(key: str, value: Any) -> str:
    if isinstance(value, list):
        # Flow sequence on the key's own line: globs: ['*.ts', '*.tsx']
        rendered = yaml.safe_dump(
            value, default_flow_style=True, allow_unicode=True, width=float("inf")
        ).rstrip("\n")
        return f"{key}: {rendered}"
    return yaml.safe_dump(
        {key: value},
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    ).rstrip("\n")


def _empty_field(key: str) -> str:
    return f"{key}:"


def _description_field(rule: RuleDocument) -> list[str]:
    if rule.description is None:
        return []
    if rule.description == "":
        return [_empty_field(DESCRIPTION_KEY)]
    return [_dump_field(DESCRIPTION_KEY, rule.description)]


class IRuleCompiler(ABC):
    def compile(self, rule: RuleDocument) -> str:
        """Return the rule as frontmatter plus body for the target format."""
        if not rule.has_frontmatter:
            return rule.body
        parts: list[str] = []
        parts.append(FRONTMATTER_DELIMITER)
        parts.extend(self.fields(rule))
        parts.append(FRONTMATTER_DELIMITER)
        parts.append("")
        parts.append(rule.body)
        return "\n".join(parts)

    @abstractmethod
    def fields(self, rule: RuleDocument) -> list[str]:
        """Return the frontmatter lines for ``rule``."""


class CursorRuleCompiler(IRuleCompiler):
    """Compile to Cursor .mdc frontmatter with a globs list and alwaysApply."""

    def fields(self, rule: RuleDocument) -> list[str]:
        lines = _description_field(rule)
        if rule.patterns:
            lines.append(_dump_field(CURSOR_GLOBS_KEY, list(rule.patterns)))
        else:
            lines.append(_empty_field(CURSOR_GLOBS_KEY))
        lines.append(_dump_field(CURSOR_ALWAYS_APPLY_KEY, rule.always_apply))
        return lines


class CopilotRuleCompiler(IRuleCompiler):
    """Compile to Copilot .instructions.md frontmatter with a joined applyTo."""

    def fields(self, rule: RuleDocument) -> list[str]:
        lines = _description_field(rule)
        if rule.patterns:
            lines.append(_dump_field(COPILOT_APPLY_TO_KEY, ",".join(rule.patterns)))
        else:
            lines.append(_empty_field(COPILOT_APPLY_TO_KEY))
        return lines


_COMPILERS: dict[RuleFormat, type[IRuleCompiler]] = {
    RuleFormat.CURSOR: CursorRuleCompiler,
    RuleFormat.COPILOT: CopilotRuleCompiler,
}


def compiler_for(rule_format: RuleFormat) -> IRuleCompiler:
    return _COMPILERS[rule_format]()
