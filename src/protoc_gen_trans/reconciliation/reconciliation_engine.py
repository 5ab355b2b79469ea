"""Translation extraction, key listing and reapplication over message trees.

All three operations walk a tree in the same order: translatable slots first,
in plan order, then composite children in plan order. Array elements pair by
position and map entries pair by map key; content never decides pairing.

Slots holding empty text are never keyed: their key is set to the empty string,
they contribute nothing to the translation map and nothing to the key list.
This keeps empty positions open for independent translations later on.

Instance trees are always finite, so plain recursion terminates even for
self-referential message types.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import cast

from protoc_gen_trans.schema_analysis.plan_models import FieldClassification

from .key_policies import KeyGetter
from .message_nodes import (
    ChildValue,
    CompositeChild,
    MapKey,
    MessageNode,
    TranslatableSlot,
    TranslationMap,
)

Lookup = Callable[[str], str | None] | Mapping[str, str]


class ReconciliationError(Exception):
    """Raised when a reconciliation operation is used against its contract."""


class StructuralMismatchError(ReconciliationError):
    """Raised when an instance tree does not have the shape its plan declares."""


def extract_translations(
    current: MessageNode,
    previous: MessageNode | None,
    key_getter: KeyGetter,
) -> TranslationMap:
    """Assign keys to every translatable slot of ``current`` and collect their text.

    Keys are stamped onto ``current`` in place. The previous key of each slot
    comes from the slot at the same position of ``previous``, or is empty when
    there is no such slot.

    Returns:
      Mapping from assigned key to the current text.
    """
    translations: TranslationMap = {}
    previous_slots = previous.slot_by_position() if previous is not None else {}
    for slot in current.slots:
        if not slot.text:
            slot.key = ""
            continue
        previous_slot = previous_slots.get(slot.position)
        old_key = (previous_slot.key or "") if previous_slot is not None else ""
        slot.key = key_getter.get_key(old_key, slot.text)
        translations[slot.key] = slot.text

    previous_children = previous.child_by_field() if previous is not None else {}
    for child in current.children:
        previous_child = previous_children.get(child.field_name)
        for current_node, previous_node in _paired_nodes(child, previous_child):
            translations.update(extract_translations(current_node, previous_node, key_getter))
    return translations


def get_translation_keys(node: MessageNode) -> list[str]:
    """Return the keys needed to translate ``node`` into any locale.

    Raises:
      ReconciliationError: If a slot has not been assigned a key.
    """
    keys: list[str] = []
    for slot in node.slots:
        key = _stamped_key(node, slot)
        if key:
            keys.append(key)
    for child in node.children:
        for child_node in _child_nodes(child):
            keys.extend(get_translation_keys(child_node))
    return keys


def translate(node: MessageNode, lookup: Lookup) -> MessageNode:
    """Return a copy of ``node`` with each slot's text looked up by its key.

    Keys without a translation yield empty text. ``node`` is left unchanged.
    """
    resolve = _as_resolver(lookup)
    slots = []
    for slot in node.slots:
        key = _stamped_key(node, slot)
        text = (resolve(key) or "") if key else ""
        slots.append(TranslatableSlot(slot.field_name, slot.index, text, key))
    children = [
        CompositeChild(
            child.field_name,
            child.classification,
            _translate_value(child, lookup),
        )
        for child in node.children
    ]
    return MessageNode(type_name=node.type_name, slots=slots, children=children)


def _translate_value(child: CompositeChild, lookup: Lookup) -> ChildValue:
    value = _checked_value(child)
    if value is None:
        return None
    if child.classification is FieldClassification.COMPOSITE_SINGULAR:
        return translate(cast(MessageNode, value), lookup)
    if child.classification is FieldClassification.COMPOSITE_ARRAY:
        return [translate(element, lookup) for element in cast(Sequence[MessageNode], value)]
    entries = cast(Mapping[MapKey, MessageNode], value)
    return {map_key: translate(entry, lookup) for map_key, entry in entries.items()}


def _paired_nodes(
    current: CompositeChild, previous: CompositeChild | None
) -> Iterator[tuple[MessageNode, MessageNode | None]]:
    value = _checked_value(current)
    previous_value: ChildValue = None
    if previous is not None:
        if previous.classification is not current.classification:
            raise StructuralMismatchError(
                f"Field '{current.field_name}' is {current.classification.value} "
                f"but the previous instance holds {previous.classification.value}."
            )
        previous_value = _checked_value(previous)

    if value is None:
        return
    if current.classification is FieldClassification.COMPOSITE_SINGULAR:
        yield cast(MessageNode, value), cast("MessageNode | None", previous_value)
    elif current.classification is FieldClassification.COMPOSITE_ARRAY:
        previous_elements = cast(Sequence[MessageNode], previous_value or ())
        for position, element in enumerate(cast(Sequence[MessageNode], value)):
            paired = previous_elements[position] if position < len(previous_elements) else None
            yield element, paired
    else:
        previous_entries = cast(Mapping[MapKey, MessageNode], previous_value or {})
        for map_key, entry in cast(Mapping[MapKey, MessageNode], value).items():
            yield entry, previous_entries.get(map_key)


def _child_nodes(child: CompositeChild) -> Iterator[MessageNode]:
    value = _checked_value(child)
    if value is None:
        return
    if child.classification is FieldClassification.COMPOSITE_SINGULAR:
        yield cast(MessageNode, value)
    elif child.classification is FieldClassification.COMPOSITE_ARRAY:
        yield from cast(Sequence[MessageNode], value)
    else:
        yield from cast(Mapping[MapKey, MessageNode], value).values()


def _checked_value(child: CompositeChild) -> ChildValue:
    value = child.value
    if value is None:
        return None
    classification = child.classification
    if classification is FieldClassification.COMPOSITE_SINGULAR:
        valid = isinstance(value, MessageNode)
    elif classification is FieldClassification.COMPOSITE_ARRAY:
        valid = isinstance(value, Sequence) and not isinstance(value, str | MessageNode)
    elif classification is FieldClassification.COMPOSITE_MAP:
        valid = isinstance(value, Mapping)
    else:
        raise StructuralMismatchError(
            f"Field '{child.field_name}' is translatable and cannot hold child messages."
        )
    if not valid:
        raise StructuralMismatchError(
            f"Field '{child.field_name}' is {classification.value} "
            f"but holds {type(value).__name__}."
        )
    return value


def _stamped_key(node: MessageNode, slot: TranslatableSlot) -> str:
    if slot.key is None:
        raise ReconciliationError(
            f"Field '{slot.field_name}' of {node.type_name} has no translation key; "
            "extract translations first."
        )
    return slot.key


def _as_resolver(lookup: Lookup) -> Callable[[str], str | None]:
    if isinstance(lookup, Mapping):
        return lookup.get
    return lookup
