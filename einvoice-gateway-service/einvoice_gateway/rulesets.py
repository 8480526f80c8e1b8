"""
Ruleset identifiers and the report categories they are published under.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence, Union

from .errors import MissingRuleset

UBL_RULESET = "AUNZ_UBL_1_0_10"
PEPPOL_RULESET = "AUNZ_PEPPOL_1_0_10"
DEFAULT_RULESET = f"{PEPPOL_RULESET},{UBL_RULESET}"

RulesetSpec = Union[str, Sequence[str]]


class Category(str, Enum):
    """
    Report categories. Only two exist: the UBL ruleset reports as
    EN16931 syntax, every other ruleset collapses onto AUNZ_PEPPOL.
    """

    EN16931_SYNTAX = "EN16931_Syntax"
    AUNZ_PEPPOL = "AUNZ_PEPPOL"


def category_label(ruleset: str) -> Category:
    if ruleset == UBL_RULESET:
        return Category.EN16931_SYNTAX
    # Distinct non-UBL rulesets share this label; the last one wins.
    return Category.AUNZ_PEPPOL


def parse_rulesets(spec: RulesetSpec) -> List[str]:
    """
    Normalize a ruleset spec into an ordered list of identifiers.

    Accepts a comma-separated string ("A,B") or a sequence (["A", "B"]);
    both give the same list. Order and duplicates are preserved, blanks are
    dropped.
    """
    if spec is None:
        raise MissingRuleset("Please input a ruleset.")
    tokens = spec.split(",") if isinstance(spec, str) else list(spec)

    rulesets = [str(token).strip() for token in tokens]
    rulesets = [r for r in rulesets if r]
    if not rulesets:
        raise MissingRuleset("Please input a ruleset.")
    return rulesets
