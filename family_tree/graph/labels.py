"""Relationship label normalization and reciprocal lookup."""

from dataclasses import dataclass
from typing import Optional

RELATES_TO = "RELATES_TO"
DEFAULT_LINK_TYPE = "family"
FALLBACK_RECIPROCAL = "relative"


def normalize_label(label: Optional[str]) -> Optional[str]:
    """Lower-case a stored label; None stays None."""
    return label.lower() if label else None


@dataclass
class LabelInfo:
    """Reciprocal labels for a relationship term."""
    term: str
    reciprocal_male: str
    reciprocal_female: str
    reciprocal_neutral: str


class ReciprocalMap:
    """Looks up the inverse of a relationship label."""

    MAPPINGS = {
        # parent / child
        "father": LabelInfo("father", "son", "daughter", "child"),
        "mother": LabelInfo("mother", "son", "daughter", "child"),
        "parent": LabelInfo("parent", "son", "daughter", "child"),
        "son": LabelInfo("son", "father", "mother", "parent"),
        "daughter": LabelInfo("daughter", "father", "mother", "parent"),
        "child": LabelInfo("child", "father", "mother", "parent"),
        # spouse
        "husband": LabelInfo("husband", "husband", "wife", "spouse"),
        "wife": LabelInfo("wife", "husband", "wife", "spouse"),
        "spouse": LabelInfo("spouse", "husband", "wife", "spouse"),
        # siblings
        "brother": LabelInfo("brother", "brother", "sister", "sibling"),
        "sister": LabelInfo("sister", "brother", "sister", "sibling"),
        "sibling": LabelInfo("sibling", "brother", "sister", "sibling"),
        # grandparents
        "grandfather": LabelInfo("grandfather", "grandson", "granddaughter", "grandchild"),
        "grandmother": LabelInfo("grandmother", "grandson", "granddaughter", "grandchild"),
        "grandparent": LabelInfo("grandparent", "grandson", "granddaughter", "grandchild"),
        "grandson": LabelInfo("grandson", "grandfather", "grandmother", "grandparent"),
        "granddaughter": LabelInfo("granddaughter", "grandfather", "grandmother", "grandparent"),
        "grandchild": LabelInfo("grandchild", "grandfather", "grandmother", "grandparent"),
        # extended
        "uncle": LabelInfo("uncle", "nephew", "niece", "nephew/niece"),
        "aunt": LabelInfo("aunt", "nephew", "niece", "nephew/niece"),
        "nephew": LabelInfo("nephew", "uncle", "aunt", "uncle/aunt"),
        "niece": LabelInfo("niece", "uncle", "aunt", "uncle/aunt"),
        "cousin": LabelInfo("cousin", "cousin", "cousin", "cousin"),
        # in-laws
        "father-in-law": LabelInfo("father-in-law", "son-in-law", "daughter-in-law", "child-in-law"),
        "mother-in-law": LabelInfo("mother-in-law", "son-in-law", "daughter-in-law", "child-in-law"),
        "son-in-law": LabelInfo("son-in-law", "father-in-law", "mother-in-law", "parent-in-law"),
        "daughter-in-law": LabelInfo("daughter-in-law", "father-in-law", "mother-in-law", "parent-in-law"),
    }

    # Common spellings mapped to canonical terms
    ALIASES = {
        "dad": "father",
        "mom": "mother",
        "mum": "mother",
        "grandpa": "grandfather",
        "grandma": "grandmother",
    }

    @classmethod
    def lookup(cls, label: str) -> Optional[LabelInfo]:
        key = " ".join(label.strip().lower().split())
        key = cls.ALIASES.get(key, key)
        return cls.MAPPINGS.get(key)

    @classmethod
    def reciprocal(cls, label: str, gender: Optional[str] = None) -> str:
        """
        Inverse label for `label`, as seen from the other member.

        Args:
            label: Relationship of A to B (e.g. "Father")
            gender: Gender hint for B ("M"/"F"); neutral term when unknown

        Returns:
            Lower-case inverse label, "relative" for unknown terms
        """
        info = cls.lookup(label or "")
        if info is None:
            return FALLBACK_RECIPROCAL

        hint = (gender or "").strip().upper()[:1]
        if hint == "M":
            return info.reciprocal_male
        if hint == "F":
            return info.reciprocal_female
        return info.reciprocal_neutral


def reciprocal_label(label: str, gender: Optional[str] = None) -> str:
    return ReciprocalMap.reciprocal(label, gender)
