from .config import LabelSelectorConfigV1Alpha1
from .conjunct import Conjunct, ConjunctId
from .exceptions import ConfigurationError, InvalidOperatorError, InvalidSelectorError, LabelSelectorError
from .json import JsonBaseModel, V1LabelSelector, V1LabelSelectorRequirement
from .operators import Operator
from .selector import LabelSelector

__all__ = [
    "Conjunct",
    "ConjunctId",
    "ConfigurationError",
    "InvalidOperatorError",
    "InvalidSelectorError",
    "JsonBaseModel",
    "LabelSelector",
    "LabelSelectorConfigV1Alpha1",
    "LabelSelectorError",
    "Operator",
    "V1LabelSelector",
    "V1LabelSelectorRequirement",
]
