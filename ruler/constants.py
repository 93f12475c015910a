from pathlib import Path
from typing import Final


VERSION: Final[str] = "0.1.0"

FRONTMATTER_DELIMITER: Final[str] = "---"
UNIVERSAL_PATTERN: Final[str] = "**"

DESCRIPTION_KEY: Final[str] = "description"
CURSOR_GLOBS_KEY: Final[str] = "globs"
CURSOR_ALWAYS_APPLY_KEY: Final[str] = "alwaysApply"
COPILOT_APPLY_TO_KEY: Final[str] = "applyTo"

CURSOR_RULES_DIR: Final[Path] = Path(".cursor") / "rules"
COPILOT_INSTRUCTIONS_DIR: Final[Path] = Path(".github") / "instructions"

CURSOR_RULE_SUFFIX: Final[str] = ".mdc"
COPILOT_INSTRUCTIONS_SUFFIX: Final[str] = ".instructions.md"
MARKDOWN_SUFFIX: Final[str] = ".md"

VERBOSE_ENV_VAR: Final[str] = "RULER_VERBOSE"
