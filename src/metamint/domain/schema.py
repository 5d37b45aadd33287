"""Schema descriptors and the registry that merges field values into them.

A descriptor is a JSON-schema-like document: a title, a fixed set of named
fields, and the content address assigned by the last successful content
store write. The set of field names never changes after construction;
:meth:`SchemaRegistry.apply` rejects anything outside it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from metamint.domain.errors import SchemaShapeError, UnknownFieldError
from metamint.domain.status import STATUS_ORDER


class FieldType(StrEnum):
    """Form widget used to edit a field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    NUMBER = "number"


class FieldSpec(BaseModel):
    """One named field of a descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "string"
    field_type: str = Field(default=FieldType.TEXT.value, alias="fieldType")
    description: str = ""
    value: str | None = None
    options: list[str] | None = None


class SchemaDescriptor(BaseModel):
    """Structured description of an asset plus its current values."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    type: Literal["object"] = "object"
    content_address: str | None = Field(
        default=None,
        alias="contentAddress",
        validation_alias=AliasChoices("contentAddress", "content_address", "cid"),
    )
    properties: dict[str, FieldSpec] = Field(default_factory=dict)

    @property
    def status(self) -> str | None:
        """Current value of the ``status`` field, if the schema has one."""
        spec = self.properties.get("status")
        return spec.value if spec is not None else None

    def values(self) -> dict[str, str | None]:
        """Field name -> current value, in display order."""
        return {name: spec.value for name, spec in self.properties.items()}

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-ready dict using the wire (camelCase) field names."""
        return self.model_dump(by_alias=True, mode="json")


def canonical_bytes(descriptor: SchemaDescriptor) -> bytes:
    """Serialize *descriptor* deterministically for content addressing.

    Keys are sorted at every level and separators carry no whitespace, so
    equal descriptors always produce byte-identical output. ``options`` is
    only written for fields that offer choices.
    """
    payload = descriptor.to_json_dict()
    for spec in payload["properties"].values():
        if spec.get("options") is None:
            spec.pop("options", None)
    text = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return text.encode("utf-8")


def default_schema() -> SchemaDescriptor:
    """The insurance policy schema every new session starts from."""
    return SchemaDescriptor(
        title="Asset Metadata",
        properties={
            "name": FieldSpec(
                description="Identifies the asset to which this NFT represents",
            ),
            "description": FieldSpec(
                description="Describes the asset to which this NFT represents",
            ),
            "carrier": FieldSpec(
                description="Describes the carrier which takes the primary risk",
            ),
            "risk": FieldSpec(description="Describes the risk"),
            "parameters": FieldSpec(
                description="Describes further parameters characterizing the risk",
            ),
            "status": FieldSpec(
                field_type=FieldType.SELECT.value,
                description=(
                    "Defines the status of the policy, e.g. Applied, Underwritten, "
                    "Claimed, Paid out, etc."
                ),
                options=list(STATUS_ORDER),
            ),
        },
    )


def coerce_schema(raw: SchemaDescriptor | Mapping[str, Any]) -> SchemaDescriptor:
    """Validate *raw* into a descriptor, raising :class:`SchemaShapeError`."""
    if isinstance(raw, SchemaDescriptor):
        return raw.model_copy(deep=True)
    try:
        return SchemaDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise SchemaShapeError(f"Invalid schema: {exc.error_count()} error(s)", cause=exc) from exc


class SchemaRegistry:
    """Owns one descriptor exclusively and merges submitted values into it."""

    def __init__(self, descriptor: SchemaDescriptor | None = None) -> None:
        self._descriptor = descriptor if descriptor is not None else default_schema()

    @property
    def descriptor(self) -> SchemaDescriptor:
        return self._descriptor

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._descriptor.properties)

    def apply(self, values: Mapping[str, str]) -> SchemaDescriptor:
        """Set ``value`` on every named field, all or nothing.

        Raises:
            UnknownFieldError: on the first key (in submission order) that
                is not a field of the schema. Nothing is modified.
        """
        known = self._descriptor.properties
        for key in values:
            if key not in known:
                raise UnknownFieldError(key)

        for name in self.field_names:
            if name in values:
                known[name].value = values[name]
        return self._descriptor

    def set_schema(self, new_schema: SchemaDescriptor | Mapping[str, Any]) -> SchemaDescriptor:
        """Replace the owned descriptor wholesale."""
        self._descriptor = coerce_schema(new_schema)
        return self._descriptor

    def set_content_address(self, address: str) -> None:
        self._descriptor.content_address = address

    def snapshot(self) -> SchemaDescriptor:
        """Deep copy of the current descriptor."""
        return self._descriptor.model_copy(deep=True)

    def restore(self, snapshot: SchemaDescriptor) -> None:
        """Reinstate a descriptor previously taken with :meth:`snapshot`."""
        self._descriptor = snapshot.model_copy(deep=True)
