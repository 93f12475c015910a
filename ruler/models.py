from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class RuleFormat(str, Enum):
    CURSOR = "cursor"
    COPILOT = "copilot"


class ConversionMode(str, Enum):
    C2G = "c2g"
    G2C = "g2c"

    @property
    def source(self) -> RuleFormat:
        return RuleFormat.CURSOR if self == ConversionMode.C2G else RuleFormat.COPILOT

    @property
    def target(self) -> RuleFormat:
        return RuleFormat.COPILOT if self == ConversionMode.C2G else RuleFormat.CURSOR


@dataclass
class ConvertedRule:
    path: Path
    text: str


@dataclass
class ConversionFailure:
    path: Path
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error)


@dataclass
class ConversionReport:
    converted: list[ConvertedRule] = field(default_factory=list)
    failures: list[ConversionFailure] = field(default_factory=list)

    def is_valid(self) -> bool:
        return not self.failures

    def summary(self) -> dict[str, int]:
        return {
            "files": len(self.converted) + len(self.failures),
            "converted": len(self.converted),
            "failed": len(self.failures),
        }
