"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class RawDocument:
    metadata_text: Optional[str]
    body: str


@dataclass(frozen=True)
class PatternList:
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class SinglePattern:
    value: str


@dataclass(frozen=True)
class JoinedPatterns:
    value: str


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Absent:
    pass


ApplicabilityField = Union[PatternList, SinglePattern, JoinedPatterns, Empty, Absent]


@dataclass(frozen=True)
class NormalizedMetadata:
    """Known frontmatter fields after shape resolution.

    ``universal`` is set when the applicability field reduced to the lone
    ``**`` pattern; ``patterns`` is then left empty.
    """

    description: Optional[str] = None
    patterns: tuple[str, ...] = ()
    always_apply: bool = False
    universal: bool = False


@dataclass(frozen=True)
class RuleDocument:
    description: Optional[str] = None
    patterns: tuple[str, ...] = ()
    always_apply: bool = False
    body: str = ""
    has_frontmatter: bool = True
