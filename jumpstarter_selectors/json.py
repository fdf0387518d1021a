from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field


class JsonBaseModel(BaseModel):
    """A Pydantic BaseModel with additional Jumpstarter JSON options applied."""

    def dump_json(self):
        return self.model_dump_json(indent=4, by_alias=True, exclude_none=True)

    def dump_yaml(self):
        return yaml.safe_dump(self.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2, sort_keys=False)

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)


class V1LabelSelectorRequirement(JsonBaseModel):
    key: str
    # validated against Operator by the selector, so lenient parsing can skip unknown names
    operator: str
    values: Optional[list[str]] = Field(default=None)


class V1LabelSelector(JsonBaseModel):
    match_labels: Optional[dict[str, str]] = Field(alias="matchLabels", default=None)
    match_expressions: Optional[list[V1LabelSelectorRequirement]] = Field(alias="matchExpressions", default=None)
