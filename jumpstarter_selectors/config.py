import os
from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .selector import LabelSelector


class LabelSelectorConfigV1Alpha1(BaseModel):
    """Options for building label selectors.

    .. code-block:: yaml

        apiVersion: jumpstarter.dev/v1alpha1
        kind: LabelSelectorConfig
        emptySelectsAll: false
        strict: true
    """

    model_config = ConfigDict(populate_by_name=True)

    apiVersion: Literal["jumpstarter.dev/v1alpha1"] = Field(default="jumpstarter.dev/v1alpha1")
    kind: Literal["LabelSelectorConfig"] = Field(default="LabelSelectorConfig")

    empty_selects_all: bool = Field(alias="emptySelectsAll", default=False)
    strict: bool = Field(default=True)

    @classmethod
    def from_str(cls, config: str, path: str | None = None) -> Self:
        try:
            return cls.model_validate(yaml.safe_load(config) or {})
        except (yaml.YAMLError, ValidationError) as e:
            raise ConfigurationError("Invalid label selector config", config_path=path) from e

    @classmethod
    def load(cls, path: str | os.PathLike) -> Self:
        """Load a label selector config from a YAML file."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Label selector config file not found at '{path}'.")

        with open(path) as f:
            return cls.from_str(f.read(), path=str(path))

    @classmethod
    def save(cls, config: Self, path: str | os.PathLike) -> Path:
        """Save a label selector config as YAML."""
        with open(path, "w") as f:
            yaml.safe_dump(config.model_dump(mode="json", by_alias=True), f, sort_keys=False)
        return Path(path)

    def selector(self, selector: Any = None) -> LabelSelector:
        """Build a label selector with these options."""
        return LabelSelector(selector, empty_selects_all=self.empty_selects_all, strict=self.strict)
