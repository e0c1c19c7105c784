# src/purgecss/mapping/core.py
import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Internal element identifier issued by the HandleGenerator. Never the HTML id attribute.
Handle = str

# Attributes that get their own slot on the record and are kept out of `attrs`.
RESERVED_ATTRIBUTES = ("id", "class")

_WHITESPACE = re.compile(r"\s+")


class ElementRecord(BaseModel):
    """
    Everything the map keeps about one element: just enough to decide whether
    a CSS selector could target it.

    Records are read-only. Attributes are stored as name/value pairs and
    exposed through `attrs` as a read-only mapping.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    declared_id: Optional[str] = None
    classes: Tuple[str, ...] = Field(default_factory=tuple)
    attr_items: Tuple[Tuple[str, str], ...] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _collect_attrs(cls, data: Any) -> Any:
        """Accepts `attrs={...}` and stores it as ordered pairs."""
        if isinstance(data, dict) and "attrs" in data:
            data = dict(data)
            data["attr_items"] = tuple(data.pop("attrs").items())
        return data

    @property
    def attrs(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self.attr_items))

    def to_view(self) -> Dict[str, Any]:
        """Plain dictionary form used by the hierarchy views."""
        return {
            "tag": self.tag,
            "declared_id": self.declared_id,
            "classes": self.classes,
            "attrs": dict(self.attr_items),
        }


def normalize_tag(name: str) -> str:
    """Trims and lower-cases a tag name so index keys are stable."""
    return name.strip().lower()


def split_classes(value: str) -> List[str]:
    """
    Splits a class attribute on whitespace.
    Empty tokens are dropped and duplicates are removed, keeping declared order.
    """
    classes: List[str] = []
    for token in _WHITESPACE.split(value):
        if token and token not in classes:
            classes.append(token)
    return classes
