"""Tests for frontmatter normalization and rule building."""

import pytest

from ruler.errors import MalformedMetadataError, UnsupportedFieldShapeError
from ruler.models import RuleFormat
from ruler.rules.models import (
    Absent,
    Empty,
    JoinedPatterns,
    PatternList,
    SinglePattern,
)
from ruler.rules.parser import (
    classify_applicability,
    normalize_patterns,
    parse_metadata,
    parse_rule_text,
    preprocess_frontmatter,
)


def test_preprocess_multiple_quoted_strings() -> None:
    text = 'globs: "**/mode-transition*/**", "**/context-preservation*/**"\nalwaysApply: false\n'
    assert preprocess_frontmatter(text, "globs") == (
        'globs: ["**/mode-transition*/**", "**/context-preservation*/**"]\n'
        "alwaysApply: false\n"
    )


def test_preprocess_single_quoted_items() -> None:
    assert preprocess_frontmatter("globs: '*.ts', '*.tsx'", "globs") == "globs: ['*.ts', '*.tsx']"


def test_preprocess_keeps_single_scalar_with_commas() -> None:
    text = 'globs: "**/optimization*/**,**/integration*/**"\n'
    assert preprocess_frontmatter(text, "globs") == text


def test_preprocess_keeps_bracketed_value() -> None:
    text = 'globs: ["*.ts", "*.tsx"]\n'
    assert preprocess_frontmatter(text, "globs") == text


def test_preprocess_ignores_other_fields() -> None:
    text = 'description: "a", "b"\nglobs: "*.py"\n'
    assert preprocess_frontmatter(text, "globs") == text


def test_preprocess_ignores_indented_lines() -> None:
    text = 'nested:\n  globs: "a", "b"\n'
    assert preprocess_frontmatter(text, "globs") == text


def test_preprocess_quotes_unquoted_alias_like_value() -> None:
    assert preprocess_frontmatter("globs: *.ts,*.tsx\n", "globs") == 'globs: "*.ts,*.tsx"\n'


def test_preprocess_leaves_unterminated_quotes_for_yaml() -> None:
    text = 'globs: "*.ts", "*.tsx\n'
    assert preprocess_frontmatter(text, "globs") == text


@pytest.mark.parametrize(
    "raw,present,expected",
    [
        (["*.ts", "*.tsx"], True, PatternList(("*.ts", "*.tsx"))),
        ("*.js", True, SinglePattern("*.js")),
        ("*.js,*.jsx", True, JoinedPatterns("*.js,*.jsx")),
        (None, True, Empty()),
        ("  ", True, Empty()),
        (None, False, Absent()),
        ([1, 2.5], True, PatternList(("1", "2.5"))),
    ],
)
def test_classify_applicability(raw, present, expected) -> None:
    assert classify_applicability(raw, present, "globs") == expected


@pytest.mark.parametrize("raw", [{"a": 1}, [["*.ts"]], [{"a": "b"}], True])
def test_classify_rejects_unsupported_shapes(raw) -> None:
    with pytest.raises(UnsupportedFieldShapeError) as exc_info:
        classify_applicability(raw, True, "globs")
    assert exc_info.value.field == "globs"


def test_normalize_pattern_list_trims_and_keeps_order() -> None:
    assert normalize_patterns(PatternList((" src/**/*.py ", "", "*.md"))) == ("src/**/*.py", "*.md")


def test_normalize_joined_patterns() -> None:
    assert normalize_patterns(JoinedPatterns("*.js, *.jsx,")) == ("*.js", "*.jsx")


def test_normalize_joined_patterns_strips_segment_quotes() -> None:
    assert normalize_patterns(JoinedPatterns("'*.py', \"*.pyx\"")) == ("*.py", "*.pyx")


def test_normalize_single_and_empty() -> None:
    assert normalize_patterns(SinglePattern(" *.vue ")) == ("*.vue",)
    assert normalize_patterns(Empty()) == ()
    assert normalize_patterns(Absent()) == ()


def test_parse_standard_array() -> None:
    rule = parse_rule_text(
        "---\n"
        'description: "Standard array format test"\n'
        'globs: ["*.ts", "*.tsx"]\n'
        "alwaysApply: false\n"
        "---\n"
        "\n"
        "# Standard Array Format Test\n",
        RuleFormat.CURSOR,
    )
    assert rule.description == "Standard array format test"
    assert rule.patterns == ("*.ts", "*.tsx")
    assert rule.always_apply is False
    assert rule.body == "# Standard Array Format Test\n"
    assert rule.has_frontmatter is True


def test_parse_block_list() -> None:
    rule = parse_rule_text(
        "---\nglobs:\n  - \"*.py\"\n  - \"src/**/*.py\"\n---\nBody\n", RuleFormat.CURSOR
    )
    assert rule.patterns == ("*.py", "src/**/*.py")
    assert rule.description is None


def test_parse_comma_separated_globs() -> None:
    rule = parse_rule_text(
        "---\n"
        'description: "Test comma-separated globs"\n'
        'globs: "**/optimization*/**,**/integration*/**"\n'
        "alwaysApply: false\n"
        "---\n"
        "\n"
        "This is a test rule with comma-separated globs.",
        RuleFormat.CURSOR,
    )
    assert rule.patterns == ("**/optimization*/**", "**/integration*/**")
    assert rule.body == "This is a test rule with comma-separated globs."


def test_parse_multiple_quoted_strings_globs() -> None:
    rule = parse_rule_text(
        "---\n"
        'description: "Test multiple quoted strings"\n'
        'globs: "**/mode-transition*/**", "**/context-preservation*/**"\n'
        "alwaysApply: false\n"
        "---\n"
        "\n"
        "Body.\n",
        RuleFormat.CURSOR,
    )
    assert rule.description == "Test multiple quoted strings"
    assert rule.patterns == ("**/mode-transition*/**", "**/context-preservation*/**")
    assert rule.always_apply is False


def test_parse_unquoted_globs() -> None:
    rule = parse_rule_text("---\nglobs: *.ts, *.tsx\n---\nBody\n", RuleFormat.CURSOR)
    assert rule.patterns == ("*.ts", "*.tsx")


def test_parse_always_apply() -> None:
    rule = parse_rule_text(
        '---\ndescription: "Always apply test"\nglobs: []\nalwaysApply: true\n---\n\nBody\n',
        RuleFormat.CURSOR,
    )
    assert rule.always_apply is True
    assert rule.patterns == ()


def test_parse_always_apply_quoted_string() -> None:
    rule = parse_rule_text('---\nalwaysApply: "TRUE"\n---\n', RuleFormat.CURSOR)
    assert rule.always_apply is True


def test_parse_cursor_universal_glob_sets_always_apply() -> None:
    rule = parse_rule_text('---\nglobs: "**"\nalwaysApply: false\n---\nBody\n', RuleFormat.CURSOR)
    assert rule.always_apply is True
    assert rule.patterns == ()


def test_parse_copilot_universal_apply_to() -> None:
    rule = parse_rule_text(
        '---\ndescription: "Universal apply test"\napplyTo: "**"\n---\n\nBody\n',
        RuleFormat.COPILOT,
    )
    assert rule.always_apply is True
    assert rule.patterns == ()


def test_parse_copilot_joined_apply_to() -> None:
    rule = parse_rule_text(
        '---\ndescription: "Reverse conversion test"\napplyTo: "*.py,*.pyx,**test**"\n---\n\nBody\n',
        RuleFormat.COPILOT,
    )
    assert rule.patterns == ("*.py", "*.pyx", "**test**")
    assert rule.always_apply is False


def test_parse_copilot_ignores_cursor_keys() -> None:
    rule = parse_rule_text(
        "---\nglobs: ['*.ts']\nalwaysApply: true\n---\nBody\n", RuleFormat.COPILOT
    )
    assert rule.patterns == ()
    assert rule.always_apply is False


def test_parse_no_frontmatter() -> None:
    rule = parse_rule_text("# No Frontmatter Test\n", RuleFormat.CURSOR)
    assert rule.has_frontmatter is False
    assert rule.description is None
    assert rule.patterns == ()
    assert rule.always_apply is False
    assert rule.body == "# No Frontmatter Test\n"


def test_empty_description_differs_from_absent() -> None:
    empty = parse_metadata("description:\nglobs:\n", RuleFormat.CURSOR)
    absent = parse_metadata("globs:\n", RuleFormat.CURSOR)
    assert empty.description == ""
    assert absent.description is None
    assert empty.patterns == ()


def test_quoted_empty_description() -> None:
    assert parse_metadata('description: ""\n', RuleFormat.CURSOR).description == ""


def test_empty_block_defaults() -> None:
    metadata = parse_metadata("", RuleFormat.CURSOR)
    assert metadata.description is None
    assert metadata.patterns == ()
    assert metadata.always_apply is False


def test_unknown_keys_are_ignored() -> None:
    metadata = parse_metadata("name: x\ntags: [a, b]\nglobs: '*.md'\n", RuleFormat.CURSOR)
    assert metadata.patterns == ("*.md",)


@pytest.mark.parametrize(
    "block",
    [
        'globs: ["*.ts", "*.tsx"\n',
        'description: "never closed\n',
        "- just\n- a list\n",
        "plain text\n",
    ],
)
def test_malformed_metadata(block: str) -> None:
    with pytest.raises(MalformedMetadataError):
        parse_metadata(block, RuleFormat.CURSOR)


def test_unsupported_description_shape() -> None:
    with pytest.raises(UnsupportedFieldShapeError) as exc_info:
        parse_metadata("description:\n  nested: value\n", RuleFormat.CURSOR)
    assert exc_info.value.field == "description"
    assert exc_info.value.shape == "mapping"


def test_unsupported_always_apply_value() -> None:
    with pytest.raises(UnsupportedFieldShapeError):
        parse_metadata("alwaysApply: sometimes\n", RuleFormat.CURSOR)


@pytest.mark.parametrize("value", ["yes", "off", "010", "1_000", "1.10", "2024-13-45", "2024-01-01", "0x1F"])
def test_description_text_kept_verbatim(value: str) -> None:
    metadata = parse_metadata(f"description: {value}\n", RuleFormat.CURSOR)
    assert metadata.description == value


@pytest.mark.parametrize("value", ["1.10", "010", "on"])
def test_apply_to_text_kept_verbatim(value: str) -> None:
    metadata = parse_metadata(f"applyTo: {value}\n", RuleFormat.COPILOT)
    assert metadata.patterns == (value,)


def test_glob_list_items_kept_verbatim() -> None:
    metadata = parse_metadata("globs: [1.10, 007, no]\n", RuleFormat.CURSOR)
    assert metadata.patterns == ("1.10", "007", "no")


@pytest.mark.parametrize("value", ["true", "True", "false", "FALSE"])
def test_plain_always_apply_booleans(value: str) -> None:
    metadata = parse_metadata(f"alwaysApply: {value}\n", RuleFormat.CURSOR)
    assert metadata.always_apply is (value.lower() == "true")


@pytest.mark.parametrize("value", ["~", "null", ""])
def test_null_description_is_empty(value: str) -> None:
    assert parse_metadata(f"description: {value}\n", RuleFormat.CURSOR).description == ""


@pytest.mark.parametrize(
    "block",
    [
        "description: &d hello\n",
        "description: &d hello\nname: *d\n",
        "base: &b\n  x: 1\nother:\n  <<: *b\n",
        "globs: &g ['*.ts']\n",
    ],
)
def test_anchors_and_aliases_are_rejected(block: str) -> None:
    with pytest.raises(MalformedMetadataError) as exc_info:
        parse_metadata(block, RuleFormat.CURSOR)
    assert "anchors and aliases are not supported" in str(exc_info.value)


@pytest.mark.parametrize(
    "block",
    [
        "description: !!timestamp 2024-13-45\n",
        "description: !!int abc\n",
        "description: !!float nope\n",
    ],
)
def test_invalid_explicit_tags_are_malformed(block: str) -> None:
    with pytest.raises(MalformedMetadataError):
        parse_metadata(block, RuleFormat.CURSOR)
