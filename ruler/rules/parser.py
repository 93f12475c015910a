"""Parse rule frontmatter into the convention-neutral rule model."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Optional

import yaml

from ruler.constants import (
    COPILOT_APPLY_TO_KEY,
    CURSOR_ALWAYS_APPLY_KEY,
    CURSOR_GLOBS_KEY,
    DESCRIPTION_KEY,
    UNIVERSAL_PATTERN,
)
from ruler.errors import MalformedMetadataError, UnsupportedFieldShapeError
from ruler.models import RuleFormat
from ruler.rules.frontmatter import split_frontmatter
from ruler.rules.models import (
    Absent,
    ApplicabilityField,
    Empty,
    JoinedPatterns,
    NormalizedMetadata,
    PatternList,
    RuleDocument,
    SinglePattern,
)

logger = logging.getLogger(__name__)

_FIELD_LINE_RE = re.compile(
    r"^(?P<key>(?P<name>[A-Za-z_][\w-]*)[ \t]*:)(?P<value>[^\r\n]*)(?P<eol>\r?\n?)$"
)
_QUOTES = ("'", '"')
# Plain scalars may not start with these; an unquoted glob like ``*.ts`` would
# otherwise be read as an alias.
_INDICATORS = ("*", "&", "!", "%", "@", "`")


def applicability_key(rule_format: RuleFormat) -> str:
    if rule_format == RuleFormat.CURSOR:
        return CURSOR_GLOBS_KEY
    return COPILOT_APPLY_TO_KEY


def _closing_quote(value: str, start: int) -> Optional[int]:
    quote = value[start]
    index = start + 1
    while index < len(value):
        char = value[index]
        if quote == '"' and char == "\\":
            index += 2
            continue
        if char == quote:
            if quote == "'" and value[index + 1 : index + 2] == "'":
                index += 2
                continue
            return index
        index += 1
    return None


def _split_quoted_scalars(value: str) -> Optional[list[str]]:
    """Split ``"a", 'b'`` into its quoted tokens, or return None."""
    items: list[str] = []
    index = 0
    length = len(value)
    while True:
        while index < length and value[index] in " \t":
            index += 1
        if index >= length or value[index] not in _QUOTES:
            return None
        end = _closing_quote(value, index)
        if end is None:
            return None
        items.append(value[index : end + 1])
        index = end + 1
        while index < length and value[index] in " \t":
            index += 1
        if index == length or value[index] == "#":
            return items
        if value[index] != ",":
            return None
        index += 1


def _rewrite_field_value(value: str) -> Optional[str]:
    stripped = value.strip()
    if not stripped or stripped.startswith("["):
        return None
    if stripped.startswith(_QUOTES):
        items = _split_quoted_scalars(stripped)
        if items is None or len(items) < 2:
            return None
        return f"[{', '.join(items)}]"
    if stripped.startswith(_INDICATORS):
        escaped = stripped.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return None


def preprocess_frontmatter(metadata_text: str, field: str) -> str:
    """Repair non-standard values of ``field`` so YAML can load the block.

    Several quoted scalars without brackets become a flow sequence, and an
    unquoted value starting with a YAML indicator becomes one quoted scalar.
    Every other line is returned untouched.
    """
    lines: list[str] = []
    for line in metadata_text.splitlines(keepends=True):
        match = _FIELD_LINE_RE.match(line)
        if match is None or match.group("name") != field:
            lines.append(line)
            continue
        rewritten = _rewrite_field_value(match.group("value"))
        if rewritten is None:
            lines.append(line)
            continue
        logger.debug("Rewrote %s value %r as %s", field, match.group("value"), rewritten)
        lines.append(f"{match.group('key')} {rewritten}{match.group('eol')}")
    return "".join(lines)


class _FrontmatterLoader(yaml.SafeLoader):
    """Safe loader that keeps scalars as text and refuses anchors and aliases.

    Only the null resolver survives, so ``yes``, ``010`` or ``1.10`` reach the
    rule model exactly as written.
    """

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag == "tag:yaml.org,2002:null"]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def compose_node(self, parent, index):
        event = self.peek_event()
        if isinstance(event, yaml.AliasEvent) or getattr(event, "anchor", None) is not None:
            raise yaml.composer.ComposerError(
                None, None, "anchors and aliases are not supported", event.start_mark
            )
        return super().compose_node(parent, index)


def _load_mapping(metadata_text: str) -> dict:
    try:
        raw = yaml.load(metadata_text, Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        detail = getattr(exc, "problem", None) or type(exc).__name__
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            detail = f"{detail} at line {mark.line + 1}"
        raise MalformedMetadataError(detail) from exc
    except ValueError as exc:
        # Explicit tags such as !!timestamp or !!int fail outside YAMLError.
        raise MalformedMetadataError(str(exc) or type(exc).__name__) from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise MalformedMetadataError(f"expected a mapping, got {type(raw).__name__}")
    return raw


def _shape_name(value: Any) -> str:
    if isinstance(value, dict):
        return "mapping"
    if isinstance(value, list):
        return "sequence"
    return type(value).__name__


def _scalar_text(field: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float, date)):
        return str(value)
    raise UnsupportedFieldShapeError(field, _shape_name(value))


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1].strip()
    return value


def classify_applicability(raw: Any, present: bool, field: str) -> ApplicabilityField:
    if not present:
        return Absent()
    if raw is None:
        return Empty()
    if isinstance(raw, list):
        items: list[str] = []
        for item in raw:
            if item is None:
                continue
            if isinstance(item, (list, dict)):
                raise UnsupportedFieldShapeError(field, f"nested {_shape_name(item)}")
            items.append(_scalar_text(field, item))
        return PatternList(tuple(items))
    if isinstance(raw, bool):
        raise UnsupportedFieldShapeError(field, "bool")
    text = _scalar_text(field, raw)
    if not text.strip():
        return Empty()
    if "," in text:
        return JoinedPatterns(text)
    return SinglePattern(text)


def normalize_patterns(value: ApplicabilityField) -> tuple[str, ...]:
    if isinstance(value, PatternList):
        segments = list(value.patterns)
    elif isinstance(value, JoinedPatterns):
        segments = value.value.split(",")
    elif isinstance(value, SinglePattern):
        segments = [value.value]
    else:
        return ()
    patterns = (_strip_quotes(segment.strip()) for segment in segments)
    return tuple(pattern for pattern in patterns if pattern)


def _parse_description(raw: dict) -> Optional[str]:
    if DESCRIPTION_KEY not in raw:
        return None
    value = raw[DESCRIPTION_KEY]
    if value is None:
        return ""
    return _scalar_text(DESCRIPTION_KEY, value)


def _parse_always_apply(raw: dict) -> bool:
    value = raw.get(CURSOR_ALWAYS_APPLY_KEY)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise UnsupportedFieldShapeError(CURSOR_ALWAYS_APPLY_KEY, _shape_name(value))


def parse_metadata(metadata_text: str, source_format: RuleFormat) -> NormalizedMetadata:
    field = applicability_key(source_format)
    raw = _load_mapping(preprocess_frontmatter(metadata_text, field))

    applicability = classify_applicability(raw.get(field), field in raw, field)
    patterns = normalize_patterns(applicability)
    always_apply = False
    if source_format == RuleFormat.CURSOR:
        always_apply = _parse_always_apply(raw)

    universal = patterns == (UNIVERSAL_PATTERN,)
    return NormalizedMetadata(
        description=_parse_description(raw),
        patterns=() if universal else patterns,
        always_apply=always_apply,
        universal=universal,
    )


def build_rule(
    metadata: NormalizedMetadata, body: str, has_frontmatter: bool = True
) -> RuleDocument:
    return RuleDocument(
        description=metadata.description,
        patterns=metadata.patterns,
        always_apply=metadata.always_apply or metadata.universal,
        body=body,
        has_frontmatter=has_frontmatter,
    )


def parse_rule_text(text: str, source_format: RuleFormat) -> RuleDocument:
    raw = split_frontmatter(text)
    if raw.metadata_text is None:
        return build_rule(NormalizedMetadata(), raw.body, has_frontmatter=False)
    metadata = parse_metadata(raw.metadata_text, source_format)
    return build_rule(metadata, raw.body)
