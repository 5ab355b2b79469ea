"""Instance tree entities traversed by the reconciliation engine."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Union

from protoc_gen_trans.schema_analysis.plan_models import FieldClassification

TranslationMap = dict[str, str]
MapKey = Union[str, int, bool]
ChildValue = Union[
    None,
    "MessageNode",
    Sequence["MessageNode"],
    Mapping[MapKey, "MessageNode"],
]


@dataclass
class TranslatableSlot:
    """One translatable string position of a message instance.

    ``index`` is None for a singular field and the element position for a
    repeated one. ``key`` stays None until a key has been assigned.
    """

    field_name: str
    index: int | None
    text: str
    key: str | None = None

    @property
    def position(self) -> tuple[str, int | None]:
        return (self.field_name, self.index)


@dataclass
class CompositeChild:
    """Child messages held by one composite field."""

    field_name: str
    classification: FieldClassification
    value: ChildValue = None


@dataclass
class MessageNode:
    """Instance-level view of one message mirroring its plan."""

    type_name: str
    slots: list[TranslatableSlot] = field(default_factory=list)
    children: list[CompositeChild] = field(default_factory=list)

    def slot_by_position(self) -> dict[tuple[str, int | None], TranslatableSlot]:
        return {slot.position: slot for slot in self.slots}

    def child_by_field(self) -> dict[str, CompositeChild]:
        return {child.field_name: child for child in self.children}
