import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from kubernetes_asyncio.client.models import V1LabelSelector as K8sV1LabelSelector
from pydantic import TypeAdapter, ValidationError

from .conjunct import Conjunct, ConjunctId
from .exceptions import InvalidOperatorError, InvalidSelectorError
from .json import V1LabelSelector, V1LabelSelectorRequirement
from .operators import Operator
from .serialize import is_k8s_obj, k8s_obj_to_dict, labels_of, to_k8s_label_selector

logger = logging.getLogger(__name__)

EQUALITY_MAP_ADAPTER = TypeAdapter(dict[str, Optional[str]])


class LabelSelector:
    """A label selector: the AND of a set of conjuncts over resource labels.

    The selector can be built from the JSON format returned by the Kubernetes API,
    either the old equality map used by e.g. ReplicationControllers::

        {"app": "web", "tier": None}

    where a ``None`` value means the key must exist, or the newer expression format::

        {"matchLabels": {"app": "web"}, "matchExpressions": [{"key": "tier", "operator": "Exists"}]}

    Pydantic ``V1LabelSelector`` models and kubernetes_asyncio ``V1LabelSelector``
    objects are accepted as well.

    ``empty_selects_all`` decides whether a selector without conjuncts matches
    every resource or none. The typical behavior is ``False``; filtering by labels,
    where no selector means no filter, is the usual exception.

    With ``strict`` (the default) unknown operators and ``In``/``NotIn`` expressions
    without values are rejected. Otherwise such expressions are skipped with a warning.
    """

    def __init__(self, selector: Any = None, empty_selects_all: bool = False, strict: bool = True):
        self._conjuncts: dict[ConjunctId, Conjunct] = {}
        self._empty_selects_all = bool(empty_selects_all)
        self._strict = strict

        if selector is not None:
            self._load(selector)

    @property
    def empty_selects_all(self) -> bool:
        return self._empty_selects_all

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def conjuncts(self) -> Mapping[ConjunctId, Conjunct]:
        return MappingProxyType(self._conjuncts)

    def _load(self, selector: Any):
        match selector:
            case V1LabelSelector():
                self._load_expressions(selector)
            case _ if is_k8s_obj(selector):
                self._load_expressions(self._validate_expressions(k8s_obj_to_dict(selector)))
            case Mapping():
                if selector.get("matchLabels") is not None or selector.get("matchExpressions") is not None:
                    self._load_expressions(self._validate_expressions(selector))
                else:
                    self._load_equality_map(selector)
            case _:
                raise InvalidSelectorError(f"Unsupported label selector type {type(selector).__name__}")

    @staticmethod
    def _validate_expressions(selector: Mapping) -> V1LabelSelector:
        try:
            return V1LabelSelector.model_validate(dict(selector))
        except ValidationError as e:
            raise InvalidSelectorError("Invalid label selector expressions") from e

    def _load_expressions(self, selector: V1LabelSelector):
        for key, value in (selector.match_labels or {}).items():
            self.add_conjunct(key, Operator.IN, [value])

        for expression in selector.match_expressions or []:
            try:
                operator = Operator.from_api(expression.operator, expression.key)
            except InvalidOperatorError:
                if self._strict:
                    raise
                logger.warning(
                    "Ignoring label selector expression on %s with unsupported operator %s",
                    expression.key,
                    expression.operator,
                )
                continue

            if operator in (Operator.IN, Operator.NOT_IN) and not expression.values:
                if self._strict:
                    raise InvalidSelectorError(
                        f'Operator {operator} on key "{expression.key}" requires at least one value'
                    )
                logger.warning("Label selector expression on %s with operator %s has no values", expression.key, operator)

            self.add_conjunct(expression.key, operator, expression.values)

    def _load_equality_map(self, selector: Mapping):
        try:
            labels = EQUALITY_MAP_ADAPTER.validate_python(dict(selector))
        except ValidationError as e:
            raise InvalidSelectorError("Invalid label selector") from e

        for key, value in labels.items():
            if value is not None:
                self.add_conjunct(key, Operator.IN, [value])
            else:
                self.add_conjunct(key, Operator.EXISTS, [])

    @staticmethod
    def _conjunct_id(conjunct: Conjunct | ConjunctId | tuple) -> ConjunctId:
        if isinstance(conjunct, Conjunct):
            return conjunct.id
        if not isinstance(conjunct, tuple) or len(conjunct) != 3:
            raise TypeError(f"Expected a Conjunct or a (key, operator, values) conjunct id, got {conjunct!r}")
        key, operator, values = conjunct
        return ConjunctId(key, operator, tuple(values or ()))

    def add_conjunct(self, key: str, operator: Operator | str, values: Iterable[str] | None = None) -> Conjunct:
        """Add a conjunct, replacing any conjunct with the same key, operator and values.

        The returned conjunct can later be passed to remove_conjunct.
        """
        conjunct = Conjunct.create(key, operator, values)
        self._conjuncts[conjunct.id] = conjunct
        logger.debug("Added conjunct %s", conjunct)
        return conjunct

    def remove_conjunct(self, conjunct: Conjunct | ConjunctId | tuple):
        """Remove a conjunct returned by add_conjunct, or the conjunct with the given id."""
        if self._conjuncts.pop(self._conjunct_id(conjunct), None) is not None:
            logger.debug("Removed conjunct %s", conjunct)

    def clear_conjuncts(self):
        self._conjuncts = {}
        logger.debug("Cleared conjuncts")

    def is_empty(self) -> bool:
        return len(self._conjuncts) == 0

    def each(self, fn: Callable[[Conjunct, ConjunctId], Any]):
        for conjunct_id, conjunct in list(self._conjuncts.items()):
            fn(conjunct, conjunct_id)

    def select(self, resources: Mapping[Any, Any] | Iterable[Any]) -> dict[Any, Any] | list[Any]:
        """Filter resources by this selector.

        A mapping gives back a dict of the matching entries, any other iterable a list.
        """
        if isinstance(resources, Mapping):
            return {name: resource for name, resource in resources.items() if self.matches(resource)}
        return [resource for resource in resources if self.matches(resource)]

    def matches(self, resource: Any) -> bool:
        if resource is None:
            return False
        if self.is_empty():
            return self._empty_selects_all

        labels = labels_of(resource)
        return all(conjunct.matches(labels) for conjunct in self._conjuncts.values())

    def has_conjunct(self, conjunct: Conjunct | ConjunctId | tuple) -> bool:
        return self._conjunct_id(conjunct) in self._conjuncts

    def find_conjuncts_matching(self, operator: Operator | str, key: str) -> dict[ConjunctId, Conjunct]:
        return {cid: c for cid, c in self._conjuncts.items() if c.operator == operator and c.key == key}

    def covers(self, selector: "LabelSelector | Any") -> bool:
        """Test whether this selector covers the given selector.

        A selector covers another when every resource matched by the other one is
        matched by it too. An empty selector is never considered to cover anything.
        """
        if self.is_empty():
            return False

        if not isinstance(selector, LabelSelector):
            selector = LabelSelector(selector, strict=self._strict)

        for conjunct in self._conjuncts.values():
            if not self._is_covered(conjunct, selector):
                logger.debug("Conjunct %s is not covered by %s", conjunct, selector)
                return False
        return True

    @staticmethod
    def _is_covered(conjunct: Conjunct, selector: "LabelSelector") -> bool:
        if selector.has_conjunct(conjunct):
            return True

        match conjunct.operator:
            case Operator.EXISTS:
                # an Exists on the same key would have matched exactly, any In implies existence
                return len(selector.find_conjuncts_matching(Operator.IN, conjunct.key)) > 0
            case Operator.DOES_NOT_EXIST:
                return False
            case Operator.IN:
                # In (A,B,C) covers In (A,B) and In (B,C)
                in_conjuncts = selector.find_conjuncts_matching(Operator.IN, conjunct.key).values()
                allowed = set(conjunct.values)
                return len(in_conjuncts) > 0 and all(set(c.values) <= allowed for c in in_conjuncts)
            case Operator.NOT_IN:
                # NotIn (A,B) covers NotIn (A,B,C) and NotIn (A,B,D)
                not_in_conjuncts = selector.find_conjuncts_matching(Operator.NOT_IN, conjunct.key).values()
                excluded = set(conjunct.values)
                return len(not_in_conjuncts) > 0 and all(excluded <= set(c.values) for c in not_in_conjuncts)

        return True

    def to_model(self) -> V1LabelSelector:
        """The selector in the API format, as matchExpressions only."""
        return V1LabelSelector(
            match_expressions=[
                V1LabelSelectorRequirement(key=c.key, operator=c.operator.to_api(), values=list(c.values))
                for c in self._conjuncts.values()
            ]
        )

    def to_k8s(self) -> K8sV1LabelSelector:
        return to_k8s_label_selector(self.to_model())

    def export_json(self) -> str:
        return self.to_model().model_dump_json(by_alias=True, exclude_none=True)

    def dump_json(self):
        return self.to_model().dump_json()

    def dump_yaml(self):
        return self.to_model().dump_yaml()

    def __len__(self):
        return len(self._conjuncts)

    def __iter__(self) -> Iterator[Conjunct]:
        return iter(list(self._conjuncts.values()))

    def __contains__(self, conjunct: object) -> bool:
        try:
            return self.has_conjunct(conjunct)
        except (TypeError, ValueError):
            return False

    def __str__(self):
        return ", ".join(c.string for c in self._conjuncts.values())

    def __repr__(self):
        return f"LabelSelector({str(self)!r}, empty_selects_all={self._empty_selects_all})"
