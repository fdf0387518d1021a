"""Custom exceptions for jumpstarter-selectors package.

Every error raised while building or configuring a label selector derives from
LabelSelectorError, so callers can handle selector problems with a single except
clause. Chained causes are kept and rendered, e.g.

.. code-block:: python

    raise InvalidSelectorError("malformed matchExpressions") from validation_error
"""


class LabelSelectorError(Exception):
    """Base exception for all jumpstarter-selectors errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        if self.__cause__:
            return f"{self.message} (Caused by: {self.__cause__})"
        return f"{self.message}"


class InvalidOperatorError(LabelSelectorError):
    """Raised when a selector operator is not one of In, NotIn, Exists or DoesNotExist."""

    def __init__(self, operator: object, key: str | None = None):
        self.operator = operator
        self.key = key
        message = f'Unsupported label selector operator "{operator}"'
        if key is not None:
            message += f' for key "{key}"'
        super().__init__(message)


class InvalidSelectorError(LabelSelectorError):
    """Raised when a selector description is structurally malformed."""

    pass


class ConfigurationError(LabelSelectorError):
    """Raised when a label selector configuration document is not valid."""

    def __init__(self, message: str, config_path: str | None = None):
        self.config_path = config_path
        super().__init__(message)
