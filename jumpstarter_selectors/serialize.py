from collections.abc import Mapping
from typing import Any, Dict

from kubernetes_asyncio.client.models import V1LabelSelector as K8sV1LabelSelector
from kubernetes_asyncio.client.models import V1LabelSelectorRequirement as K8sV1LabelSelectorRequirement

from .json import V1LabelSelector


def is_k8s_obj(value: Any) -> bool:
    """Whether value is a kubernetes_asyncio generated model object."""
    return hasattr(value, "openapi_types") and callable(getattr(value, "to_dict", None))


def k8s_obj_to_dict(value: Any) -> Dict[str, Any]:
    result = value.to_dict(serialize=True)
    return {k: v for k, v in result.items() if v is not None}


def to_k8s_label_selector(selector: V1LabelSelector) -> K8sV1LabelSelector:
    return K8sV1LabelSelector(
        match_labels=selector.match_labels,
        match_expressions=[
            K8sV1LabelSelectorRequirement(key=e.key, operator=e.operator, values=e.values)
            for e in selector.match_expressions
        ]
        if selector.match_expressions is not None
        else None,
    )


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def labels_of(resource: Any) -> Mapping[str, str | None]:
    """Get the labels of a resource.

    Labels are read from ``metadata.labels`` when the resource carries metadata,
    otherwise from a top level ``labels`` field. Both mappings and objects
    (pydantic models, kubernetes_asyncio models such as V1Pod) are accepted.
    """
    metadata = _field(resource, "metadata")
    if metadata is not None:
        labels = _field(metadata, "labels")
    else:
        labels = _field(resource, "labels")
    return labels or {}
