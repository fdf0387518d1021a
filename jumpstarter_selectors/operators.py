"""Label selector operators as used by the Kubernetes API."""

from enum import StrEnum

from .exceptions import InvalidOperatorError


class Operator(StrEnum):
    """Label selector requirement operators.

    The enum values are the operator names used in ``matchExpressions``.
    """

    IN = "In"
    """The label is present and its value is one of the listed values"""

    NOT_IN = "NotIn"
    """The label value, if set and non-empty, is none of the listed values"""

    EXISTS = "Exists"
    """The label is present, with any value"""

    DOES_NOT_EXIST = "DoesNotExist"
    """The label is absent"""

    @property
    def display(self) -> str:
        """The lowercase word form used when rendering a conjunct."""
        return _DISPLAY[self]

    @classmethod
    def from_api(cls, value: "str | Operator", key: str | None = None) -> "Operator":
        """Convert from an API operator name to enum."""
        if isinstance(value, Operator):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidOperatorError(value, key) from e

    def to_api(self) -> str:
        """Convert to an API operator name."""
        return self.value


_DISPLAY = {
    Operator.IN: "in",
    Operator.NOT_IN: "not in",
    Operator.EXISTS: "exists",
    Operator.DOES_NOT_EXIST: "does not exist",
}
