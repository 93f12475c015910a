"""Reconcile ``always_apply`` with the universal pattern per target format."""

from __future__ import annotations

import logging
from dataclasses import replace

from ruler.constants import UNIVERSAL_PATTERN
from ruler.models import RuleFormat
from ruler.rules.models import RuleDocument

logger = logging.getLogger(__name__)


def map_rule(rule: RuleDocument, target: RuleFormat) -> RuleDocument:
    """Return ``rule`` shaped for ``target``.

    Copilot has no boolean flag, so ``always_apply`` becomes the lone ``**``
    pattern there and any explicit patterns are dropped. Cursor reads a lone
    ``**`` back as ``always_apply`` with no patterns.
    """
    if target == RuleFormat.COPILOT:
        if not rule.always_apply:
            return rule
        if rule.patterns and rule.patterns != (UNIVERSAL_PATTERN,):
            logger.debug("Dropping patterns %s in favour of %s", rule.patterns, UNIVERSAL_PATTERN)
        return replace(rule, patterns=(UNIVERSAL_PATTERN,))

    if rule.patterns == (UNIVERSAL_PATTERN,):
        return replace(rule, patterns=(), always_apply=True)
    return rule
