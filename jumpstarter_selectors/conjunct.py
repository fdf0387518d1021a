from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from .operators import Operator


class ConjunctId(NamedTuple):
    """Structural identity of a conjunct.

    Values keep the order they were given in, so ``In(k, [a, b])`` and
    ``In(k, [b, a])`` are different identities.
    """

    key: str
    operator: Operator
    values: tuple[str, ...]


@dataclass(frozen=True)
class Conjunct:
    """A single requirement on one label key."""

    key: str
    operator: Operator
    values: tuple[str, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "operator", Operator.from_api(self.operator, self.key))
        object.__setattr__(self, "values", tuple(self.values or ()))

    @classmethod
    def create(cls, key: str, operator: "Operator | str", values: Iterable[str] | None = None) -> "Conjunct":
        return cls(key=key, operator=operator, values=values)

    @property
    def id(self) -> ConjunctId:
        return ConjunctId(self.key, self.operator, self.values)

    @property
    def string(self) -> str:
        """Render the conjunct, e.g. ``tier in (frontend, "")``."""
        match self.operator:
            case Operator.EXISTS | Operator.DOES_NOT_EXIST:
                return f"{self.key} {self.operator.display}"
            case Operator.IN | Operator.NOT_IN:
                values = ", ".join('""' if value == "" else value for value in self.values)
                return f"{self.key} {self.operator.display} ({values})"

    def matches(self, labels: Mapping[str, str | None]) -> bool:
        value = labels.get(self.key)
        match self.operator:
            case Operator.EXISTS:
                return value is not None
            case Operator.DOES_NOT_EXIST:
                return value is None
            case Operator.IN:
                return value is not None and value in self.values
            case Operator.NOT_IN:
                # an empty label value never conflicts with NotIn
                return not value or value not in self.values

    def __str__(self):
        return self.string
