"""Human-readable description of a single matcher check."""

from __future__ import annotations

from dataclasses import dataclass, replace

_IRREGULAR_PLURALS = frozenset(
    {"data", "people", "children", "men", "women", "indices", "criteria", "media"}
)
_SINGULAR_ENDINGS = ("ss", "us", "is", "ous")

_CONJUGATIONS: dict[str, tuple[str, str]] = {
    # verb: (singular, plural)
    "be": ("is", "are"),
    "have": ("has", "have"),
    "contain": ("contains", "contain"),
    "start with": ("starts with", "start with"),
    "end with": ("ends with", "end with"),
}


@dataclass(frozen=True)
class Sentence:
    """Subject/verb/object description of one matcher call.

    Attributes:
        verb: Infinitive verb, e.g. "be", "have", "contain".
        object: What the verb applies to, e.g. "greater than 42".
        subject: Label of the value under test. Empty until the sentence is
            attached to a step.
        qualifiers: Trailing phrases such as "when rounded".
        negated: Whether the check was negated with ``not_()``.
        actual: Rendering of the observed value, shown on failure.
    """

    verb: str
    object: str
    subject: str = ""
    qualifiers: tuple[str, ...] = ()
    negated: bool = False
    actual: str | None = None

    def with_negation(self, negated: bool) -> Sentence:
        return replace(self, negated=negated)

    def with_qualifier(self, qualifier: str) -> Sentence:
        return replace(self, qualifiers=(*self.qualifiers, qualifier))

    def with_actual(self, actual: str) -> Sentence:
        return replace(self, actual=actual)

    def with_subject(self, subject: str) -> Sentence:
        return replace(self, subject=subject)

    def _tail(self) -> str:
        if not self.qualifiers:
            return ""
        return " " + " ".join(self.qualifiers)

    def format(self) -> str:
        """Raw form without subject: ``"not be positive"``."""
        prefix = "not " if self.negated else ""
        return f"{prefix}{self.verb} {self.object}{self._tail()}"

    def format_grammatical(self) -> str:
        """Like :meth:`format` but with "not" after the verb: ``"be not positive"``."""
        if self.negated:
            return f"{self.verb} not {self.object}{self._tail()}"
        return f"{self.verb} {self.object}{self._tail()}"

    def format_with_conjugation(self, subject: str) -> str:
        """Conjugate the verb for *subject*: ``"is not positive"`` / ``"are empty"``."""
        verb = self.conjugate_verb(self.is_plural_subject(subject))
        if self.negated:
            return f"{verb} not {self.object}{self._tail()}"
        return f"{verb} {self.object}{self._tail()}"

    def format_with_actual(self) -> str:
        base = self.format()
        if self.actual is None:
            return base
        return f"{base} (got {self.actual})"

    def conjugate_verb(self, plural: bool) -> str:
        if self.verb in _CONJUGATIONS:
            singular_form, plural_form = _CONJUGATIONS[self.verb]
            return plural_form if plural else singular_form
        if plural:
            return self.verb
        verb = self.verb
        if verb.endswith(("s", "x", "z", "sh", "ch")):
            return f"{verb}es"
        if verb.endswith("y") and not verb.endswith(("ay", "ey", "oy", "uy")):
            return f"{verb[:-1]}ies"
        return f"{verb}s"

    @staticmethod
    def extract_base_name(expr: str) -> str:
        """Reduce ``"&items.len()"`` or ``"items[0]"`` to ``"items"``."""
        name = expr.lstrip("&")
        for sep in (".", "["):
            if sep in name:
                name = name[: name.index(sep)]
        return name

    @classmethod
    def is_plural_subject(cls, subject: str) -> bool:
        # snake_case names: only the last word decides
        word = cls.extract_base_name(subject).split("_")[-1].lower()
        if word in _IRREGULAR_PLURALS:
            return True
        if not word.isalpha() or word.endswith(_SINGULAR_ENDINGS):
            return False
        return word.endswith("s")

    def __str__(self) -> str:
        return self.format()
