"""
Semantic Data Containers

Minimal property/value containers modelled after Semantic MediaWiki's
`SemanticData`. A container belongs to one subject (page title) and maps
properties to an ordered, duplicate-free list of values.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


# Keys of built-in properties used by the extractor
CATEGORY_PROPERTY = "_INST"
SORTKEY_PROPERTY = "_SKEY"


class DIProperty(BaseModel):
    """
    A property identified by its key. Built-in properties have keys
    starting with an underscore, everything else was declared by authors.
    """
    key: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_user_defined(self) -> bool:
        return not self.key.startswith("_")

    @classmethod
    def from_label(cls, label: str) -> "DIProperty":
        label = label.strip().replace("_", " ")
        return cls(key=label[0].upper() + label[1:])


class SemanticData:
    """
    Property/value set of one subject.
    """

    def __init__(self, subject: str) -> None:
        self.subject = subject
        self._properties: Dict[str, DIProperty] = {}
        self._values: Dict[str, List[Any]] = {}

    def add_property_value(self, prop: DIProperty, value: Any) -> None:
        self._properties.setdefault(prop.key, prop)
        values = self._values.setdefault(prop.key, [])
        if value not in values:
            values.append(value)

    def get_properties(self) -> List[DIProperty]:
        return list(self._properties.values())

    def get_property_values(self, prop: DIProperty) -> List[Any]:
        return list(self._values.get(prop.key, []))

    def has_property(self, prop: DIProperty) -> bool:
        return prop.key in self._properties

    def remove_property(self, prop: DIProperty) -> None:
        self._properties.pop(prop.key, None)
        self._values.pop(prop.key, None)

    def import_data_from(self, other: "SemanticData") -> None:
        """
        Union `other` into this container. The subject of `other` is ignored.
        """
        for prop in other.get_properties():
            for value in other.get_property_values(prop):
                self.add_property_value(prop, value)

    def is_empty(self) -> bool:
        return not self._properties

    def to_dict(self) -> Dict[str, List[Any]]:
        return {key: list(values) for key, values in self._values.items()}

    def __repr__(self) -> str:
        return f"SemanticData(subject={self.subject!r}, data={self.to_dict()!r})"
