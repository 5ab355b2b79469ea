"""Binding between live protobuf messages and reconciliation message trees."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from google.protobuf.message import Message

from protoc_gen_trans.schema_analysis.plan_models import (
    ClassifiedField,
    FieldClassification,
    MessagePlan,
)

from . import reconciliation_engine
from .key_policies import KeyGetter
from .message_nodes import (
    ChildValue,
    CompositeChild,
    MessageNode,
    TranslatableSlot,
    TranslationMap,
)
from .reconciliation_engine import Lookup, StructuralMismatchError

SlotValue = Callable[[TranslatableSlot], str]


class TranslationBinding:
    """Runs the reconciliation engine against protobuf message instances.

    A live message stores a translatable field's key in the field itself once
    translations have been extracted; the text travels in the translation map.
    """

    def __init__(self, plans: Mapping[str, MessagePlan]) -> None:
        self._plans = {plan.runtime_name: plan for plan in plans.values()}

    @property
    def plans(self) -> Mapping[str, MessagePlan]:
        return self._plans

    def plan_for(self, message: Message) -> MessagePlan:
        """Return the plan registered for the message's type."""
        type_name = message.DESCRIPTOR.full_name
        try:
            return self._plans[type_name]
        except KeyError as exc:
            raise StructuralMismatchError(
                f"No translation plan registered for message type {type_name}."
            ) from exc

    def node_from_message(self, message: Message) -> MessageNode:
        """Build the reconciliation view of one message instance."""
        plan = self.plan_for(message)
        node = MessageNode(type_name=plan.runtime_name)
        for field in plan.translatable_fields:
            value = _field_value(message, field.name)
            if field.repeated:
                node.slots.extend(
                    TranslatableSlot(field.name, position, text, text)
                    for position, text in enumerate(value)
                )
            else:
                node.slots.append(TranslatableSlot(field.name, None, value, value))
        for field in plan.composite_fields:
            node.children.append(
                CompositeChild(field.name, field.classification, self._child_value(message, field))
            )
        return node

    def extract_translations(
        self,
        message: Message,
        previous: Message | None,
        key_getter: KeyGetter,
    ) -> TranslationMap:
        """Replace the message's translatable text with keys and return key to text."""
        current_node = self.node_from_message(message)
        previous_node = self.node_from_message(previous) if previous is not None else None
        translations = reconciliation_engine.extract_translations(
            current_node, previous_node, key_getter
        )
        _write_slots(message, current_node, _slot_key)
        return translations

    def get_translation_keys(self, message: Message) -> list[str]:
        """Return the keys referenced by a message whose translations were extracted."""
        return reconciliation_engine.get_translation_keys(self.node_from_message(message))

    def translate(self, message: Message, lookup: Lookup) -> Message:
        """Return a copy of the message with each key replaced by its translation."""
        translated_node = reconciliation_engine.translate(self.node_from_message(message), lookup)
        translated = type(message)()
        translated.CopyFrom(message)
        _write_slots(translated, translated_node, _slot_text)
        return translated

    def _child_value(self, message: Message, field: ClassifiedField) -> ChildValue:
        value = _field_value(message, field.name)
        if field.classification is FieldClassification.COMPOSITE_SINGULAR:
            try:
                present = message.HasField(field.name)
            except ValueError as exc:
                raise StructuralMismatchError(
                    f"Field '{field.name}' of {message.DESCRIPTOR.full_name} is not a "
                    "singular message field."
                ) from exc
            return self.node_from_message(value) if present else None
        if field.classification is FieldClassification.COMPOSITE_MAP:
            if not _is_map(value):
                raise StructuralMismatchError(
                    f"Field '{field.name}' of {message.DESCRIPTOR.full_name} is not a map field."
                )
            return {map_key: self.node_from_message(entry) for map_key, entry in value.items()}
        if _is_map(value) or isinstance(value, Message):
            raise StructuralMismatchError(
                f"Field '{field.name}' of {message.DESCRIPTOR.full_name} is not a repeated field."
            )
        return [self.node_from_message(element) for element in value]


def _field_value(message: Message, field_name: str) -> Any:
    if field_name not in message.DESCRIPTOR.fields_by_name:
        raise StructuralMismatchError(
            f"Message type {message.DESCRIPTOR.full_name} has no field '{field_name}'."
        )
    return getattr(message, field_name)


def _is_map(value: Any) -> bool:
    return hasattr(value, "items") and not isinstance(value, Message)


def _slot_key(slot: TranslatableSlot) -> str:
    return slot.key or ""


def _slot_text(slot: TranslatableSlot) -> str:
    return slot.text


def _write_slots(message: Message, node: MessageNode, slot_value: SlotValue) -> None:
    for slot in node.slots:
        if slot.index is None:
            setattr(message, slot.field_name, slot_value(slot))
        else:
            getattr(message, slot.field_name)[slot.index] = slot_value(slot)
    for child in node.children:
        for target, child_node in _child_targets(message, child):
            _write_slots(target, child_node, slot_value)


def _child_targets(
    message: Message, child: CompositeChild
) -> Iterator[tuple[Message, MessageNode]]:
    if child.value is None:
        return
    container = getattr(message, child.field_name)
    if child.classification is FieldClassification.COMPOSITE_SINGULAR:
        assert isinstance(child.value, MessageNode)
        yield container, child.value
    elif child.classification is FieldClassification.COMPOSITE_MAP:
        assert isinstance(child.value, Mapping)
        for map_key, entry in child.value.items():
            yield container[map_key], entry
    else:
        assert not isinstance(child.value, MessageNode | Mapping)
        yield from zip(container, child.value, strict=True)
