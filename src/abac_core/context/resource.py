"""Resource model - WHAT is being acted on.

Every resource carries a "type" discriminant plus arbitrary attributes.
A ResourceMap is the closed set of resource variants an application
knows about, keyed by discriminant value:

    resources = ResourceMap({"doc": Document, "folder": Folder})
    doc = resources.validate({"type": "doc", "ownerId": 5})

Checkers accept either a full resource or a bare type string; see
resource_type_of() and requires_resource() for how the two are told apart.
"""

from __future__ import annotations

__all__ = [
    "BaseResource",
    "ResourceMap",
    "ResourceRef",
    "requires_resource",
    "resource_type_of",
]

from collections.abc import Iterator, Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from abac_core.constants import RESOURCE_TYPE_FIELD


class BaseResource(BaseModel):
    """Base for resource variants (ABAC Resource).

    Subclasses narrow "type" to a single literal and declare their
    attributes. Undeclared attributes are kept, so a plain BaseResource
    works for ad-hoc resources.

    Attributes:
        type: Discriminant naming the variant; fixed for the object's lifetime.
    """

    type: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="allow")


# A full resource (model or mapping carrying "type") or a bare type name
ResourceRef: TypeAlias = "BaseResource | Mapping[str, Any] | str"


def resource_type_of(resource: Any) -> str:
    """Get the resource type of a full resource or bare type string.

    Args:
        resource: Resource model, mapping with "type", or type string.

    Returns:
        The discriminant value.

    Raises:
        TypeError: If resource is none of the accepted forms.
    """
    if isinstance(resource, str):
        return resource
    if isinstance(resource, BaseModel):
        value = getattr(resource, RESOURCE_TYPE_FIELD, None)
    elif isinstance(resource, Mapping):
        value = resource.get(RESOURCE_TYPE_FIELD)
    else:
        raise TypeError(f"Expected a resource or resource type string, got {type(resource).__name__}")

    if not isinstance(value, str):
        raise TypeError(f"Resource is missing a string '{RESOURCE_TYPE_FIELD}' discriminant")
    return value


def requires_resource(resource: Any) -> bool:
    """True for a full resource, False for a bare type string."""
    return not isinstance(resource, str)


class ResourceMap(Mapping[str, type[BaseResource]]):
    """Closed registry of resource variants keyed by discriminant.

    Immutable after construction. Each variant's own "type" default (if it
    declares one) must match its key.
    """

    def __init__(self, variants: Mapping[str, type[BaseResource]]) -> None:
        """Initialize the registry.

        Args:
            variants: Discriminant value → resource model class.

        Raises:
            ValueError: If a key is empty or disagrees with the variant's type.
        """
        for key, model in variants.items():
            if not key:
                raise ValueError("Resource type keys cannot be empty")
            declared = model.model_fields[RESOURCE_TYPE_FIELD].default
            if isinstance(declared, str) and declared != key:
                raise ValueError(f"Resource variant {model.__name__} declares type {declared!r}, registered as {key!r}")
        self._variants = dict(variants)

    def __getitem__(self, key: str) -> type[BaseResource]:
        return self._variants[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variants)

    def __len__(self) -> int:
        return len(self._variants)

    @property
    def types(self) -> tuple[str, ...]:
        """Registered discriminant values, in registration order."""
        return tuple(self._variants)

    def validate(self, raw: BaseResource | Mapping[str, Any]) -> BaseResource:
        """Build the variant matching raw["type"].

        Args:
            raw: Mapping or resource model carrying a "type" discriminant.

        Returns:
            Validated, frozen resource of the registered variant.

        Raises:
            ValueError: If the discriminant is not registered.
            pydantic.ValidationError: If the attributes don't fit the variant.
        """
        resource_type = resource_type_of(raw)
        if resource_type not in self._variants:
            raise ValueError(
                f"Unknown resource type {resource_type!r}; expected one of: {', '.join(self._variants)}"
            )
        model = self._variants[resource_type]
        if isinstance(raw, model):
            return raw
        data = raw.model_dump(by_alias=True) if isinstance(raw, BaseModel) else raw
        return model.model_validate(data)
