"""Convert batches of rule documents between formats."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Union

from ruler.errors import RulerError
from ruler.models import ConversionFailure, ConversionReport, ConvertedRule, RuleFormat
from ruler.rules.compilers import compiler_for
from ruler.rules.mapper import map_rule
from ruler.rules.parser import parse_rule_text

logger = logging.getLogger(__name__)

SourceEntry = tuple[Path, Union[str, RulerError]]


def convert_text(text: str, source: RuleFormat, target: RuleFormat) -> str:
    rule = parse_rule_text(text, source)
    return compiler_for(target).compile(map_rule(rule, target))


class RuleConverter:
    def __init__(self, source: RuleFormat, target: RuleFormat) -> None:
        self.source = source
        self.target = target

    def iter_results(
        self, entries: Iterable[SourceEntry]
    ) -> Iterator[Union[ConvertedRule, ConversionFailure]]:
        """Yield one result per entry; a failed entry never stops the batch.

        An entry whose payload is already an error (an unreadable file) is
        passed through as a failure.
        """
        for path, payload in entries:
            if isinstance(payload, RulerError):
                logger.debug("Skipping unreadable %s: %s", path, payload)
                yield ConversionFailure(path=path, error=payload)
                continue
            try:
                text = convert_text(payload, self.source, self.target)
            except RulerError as exc:
                logger.debug("Failed to convert %s: %s", path, exc)
                yield ConversionFailure(path=path, error=exc)
                continue
            logger.debug("Converted %s", path)
            yield ConvertedRule(path=path, text=text)

    def convert(self, entries: Iterable[SourceEntry]) -> ConversionReport:
        report = ConversionReport()
        for result in self.iter_results(entries):
            if isinstance(result, ConversionFailure):
                report.failures.append(result)
            else:
                report.converted.append(result)
        return report
