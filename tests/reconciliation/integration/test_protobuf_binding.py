"""Translation binding tests against live protobuf messages."""

from __future__ import annotations

import uuid

import pytest
from google.protobuf import descriptor_pool, message_factory
from google.protobuf.descriptor_pb2 import FieldDescriptorProto, FileDescriptorProto
from protoc_gen_trans.reconciliation import (
    ClassifiedField,
    FieldClassification,
    MessagePlan,
    ReconciliationError,
    ReusingKeyGetter,
    SourceLanguageKeyGetter,
    StructuralMismatchError,
    TranslationBinding,
    mint_key,
)
from protoc_gen_trans.schema_analysis import (
    TranslationAnnotationReader,
    build_file_plans,
    build_type_index,
    map_schema_files,
)

_RECORD_ID = str(uuid.uuid5(uuid.NAMESPACE_URL, "1"))
_OPTIONAL = FieldDescriptorProto.LABEL_OPTIONAL
# FieldOptions carrying extension field 50000 set to true.
_TRANSLATED_TRUE = b"\x80\xb5\x18\x01"


@pytest.fixture(scope="module")
def binding(proto_files) -> TranslationBinding:
    reader = TranslationAnnotationReader.from_file_descriptors(proto_files)
    schema_files = map_schema_files(proto_files, reader)
    index = build_type_index(schema_files)
    messages_file = next(sf for sf in schema_files if sf.name == "transtest/messages.proto")
    return TranslationBinding(build_file_plans(messages_file, index))


def _english_message(classes):
    return classes.TestMessage1(
        id=_RECORD_ID,
        name1="book",
        name2="CONSTANT",
        name3="person",
        array1=["one", "two", "three", "four"],
        msg1=classes.TestMessage2(
            name1="movie",
            name2="CONSTANT",
            name3="dog",
            array1=["blue", "yellow", "green"],
            recursive_msg_array1=[
                classes.TestMessage2(
                    name1="table", name2="CONSTANT", name3="cat", array1=["happy", "sad", "mad"]
                ),
                classes.TestMessage2(
                    name1="chair", name2="CONSTANT", name3="snake", array1=["finger", "hand", "arm"]
                ),
            ],
        ),
        msg2=classes.NestedMessage(name1="backpack"),
        message_map={"1": classes.TestMessage3(name1="who", name2="CONSTANT")},
        scalar_map={"stock": 3},
    )


def _japanese_message(classes):
    return classes.TestMessage1(
        id=_RECORD_ID,
        name1="本",
        name2="CONSTANT",
        name3="人",
        array1=["一", "二", "三", "四"],
        msg1=classes.TestMessage2(
            name1="映画",
            name2="CONSTANT",
            name3="犬",
            array1=["青い", "黄色い", "緑"],
            recursive_msg_array1=[
                classes.TestMessage2(
                    name1="テーブル",
                    name2="CONSTANT",
                    name3="猫",
                    array1=["嬉しい", "悲しい", "怒っている"],
                ),
                classes.TestMessage2(
                    name1="椅子", name2="CONSTANT", name3="蛇", array1=["指", "手", "腕"]
                ),
            ],
        ),
        msg2=classes.NestedMessage(name1="リュックサック"),
        message_map={"1": classes.TestMessage3(name1="だれ", name2="CONSTANT")},
        scalar_map={"stock": 3},
    )


def _copy(message):
    duplicate = type(message)()
    duplicate.CopyFrom(message)
    return duplicate


def test_source_and_secondary_languages_share_keys_and_translate_both_ways(
    binding, message_classes
) -> None:
    english = _english_message(message_classes)
    japanese = _japanese_message(message_classes)
    english_with_keys = _copy(english)
    japanese_with_keys = _copy(japanese)

    english_translations = binding.extract_translations(
        english_with_keys, None, SourceLanguageKeyGetter()
    )
    japanese_translations = binding.extract_translations(
        japanese_with_keys, english_with_keys, ReusingKeyGetter()
    )

    assert binding.get_translation_keys(english_with_keys) == binding.get_translation_keys(
        japanese_with_keys
    )
    assert binding.translate(japanese_with_keys, english_translations) == english
    assert binding.translate(english_with_keys, japanese_translations) == japanese


def test_extraction_replaces_text_with_keys_and_leaves_other_fields(
    binding, message_classes
) -> None:
    message = _english_message(message_classes)

    translations = binding.extract_translations(message, None, SourceLanguageKeyGetter())

    assert message.id == _RECORD_ID
    assert message.name2 == "CONSTANT"
    assert message.name1 == mint_key("book")
    assert list(message.array1) == [mint_key(text) for text in ("one", "two", "three", "four")]
    assert message.msg1.recursive_msg_array1[1].name3 == mint_key("snake")
    assert message.msg2.name1 == mint_key("backpack")
    assert message.message_map["1"].name1 == mint_key("who")
    assert message.scalar_map["stock"] == 3
    assert translations[mint_key("who")] == "who"
    assert len(translations) == 23


def test_translation_keys_follow_traversal_order(binding, message_classes) -> None:
    message = _english_message(message_classes)
    binding.extract_translations(message, None, SourceLanguageKeyGetter())

    keys = binding.get_translation_keys(message)

    expected_texts = ["book", "person", "one", "two", "three", "four", "movie", "dog"]
    assert keys[: len(expected_texts)] == [mint_key(text) for text in expected_texts]
    assert keys[-2:] == [mint_key("backpack"), mint_key("who")]


def test_secondary_language_used_as_its_own_previous_instance(binding, message_classes) -> None:
    japanese = _japanese_message(message_classes)
    japanese_with_keys = _copy(japanese)

    translations = binding.extract_translations(
        japanese_with_keys, japanese_with_keys, ReusingKeyGetter()
    )

    assert binding.translate(japanese_with_keys, translations) == japanese


def test_keys_are_reused_across_fields_with_equal_source_text(binding, message_classes) -> None:
    english = message_classes.TestMessage1(name1="Hello, Goodbye")
    binding.extract_translations(english, None, SourceLanguageKeyGetter())
    japanese = message_classes.TestMessage1(name1="こんにちは、さよなら")
    japanese_translations = binding.extract_translations(japanese, english, ReusingKeyGetter())

    other = message_classes.TestMessage1(name3="Hello, Goodbye")
    binding.extract_translations(other, None, SourceLanguageKeyGetter())
    translated = binding.translate(other, japanese_translations)

    assert translated.name3 == "こんにちは、さよなら"


def test_empty_source_strings_can_be_overridden_by_secondary_language(
    binding, message_classes
) -> None:
    source = message_classes.TestMessage1(array1=["", "", ""])
    source_translations = binding.extract_translations(source, None, SourceLanguageKeyGetter())
    secondary = message_classes.TestMessage1(array1=["abc", "def", "ghi"])
    secondary_with_keys = _copy(secondary)

    translations = binding.extract_translations(secondary_with_keys, source, ReusingKeyGetter())

    assert source_translations == {}
    assert binding.get_translation_keys(source) == []
    assert binding.translate(secondary_with_keys, translations) == secondary


def test_translate_returns_a_copy(binding, message_classes) -> None:
    message = message_classes.TestMessage1(name1="book")
    binding.extract_translations(message, None, SourceLanguageKeyGetter())

    translated = binding.translate(message, {mint_key("book"): "本"})

    assert translated.name1 == "本"
    assert message.name1 == mint_key("book")


def test_lookup_may_be_a_callable(binding, message_classes) -> None:
    message = message_classes.TestMessage1(name1="book", name3="person")
    binding.extract_translations(message, None, SourceLanguageKeyGetter())

    translated = binding.translate(message, lambda key: "本" if key == mint_key("book") else None)

    assert translated.name1 == "本"
    assert translated.name3 == ""


def test_unset_singular_children_stay_unset(binding, message_classes) -> None:
    message = message_classes.TestMessage1(name1="book")
    binding.extract_translations(message, None, SourceLanguageKeyGetter())

    translated = binding.translate(message, {})

    assert not translated.HasField("msg1")
    assert not translated.HasField("msg2")


def test_message_type_without_plan_is_a_structural_mismatch(message_classes) -> None:
    binding = TranslationBinding({})

    with pytest.raises(StructuralMismatchError, match="transtest.TestMessage3"):
        binding.get_translation_keys(message_classes.TestMessage3(name1="who"))


def test_plan_naming_unknown_field_is_a_structural_mismatch(message_classes) -> None:
    plan = MessagePlan(
        type_name=".transtest.TestMessage3",
        fields=(ClassifiedField("title", FieldClassification.TRANSLATABLE_SCALAR),),
    )
    binding = TranslationBinding({plan.type_name: plan})

    with pytest.raises(StructuralMismatchError, match="no field 'title'"):
        binding.extract_translations(
            message_classes.TestMessage3(name1="who"), None, SourceLanguageKeyGetter()
        )


def test_plan_disagreeing_with_field_shape_is_a_structural_mismatch(message_classes) -> None:
    plan = MessagePlan(
        type_name=".transtest.TestMessage3",
        fields=(ClassifiedField("name2", FieldClassification.COMPOSITE_SINGULAR),),
    )
    binding = TranslationBinding({plan.type_name: plan})

    with pytest.raises(StructuralMismatchError, match="not a singular message field"):
        binding.get_translation_keys(message_classes.TestMessage3(name2="x"))


def test_reconciliation_errors_share_a_base_class() -> None:
    assert issubclass(StructuralMismatchError, ReconciliationError)


def _events_file() -> FileDescriptorProto:
    file_descriptor = FileDescriptorProto(
        name="transtest/events.proto",
        package="transtest",
        syntax="proto3",
        dependency=["trans/extensions.proto", "google/protobuf/timestamp.proto"],
    )
    event = file_descriptor.message_type.add(name="Event")
    entry = event.nested_type.add(name="TimesEntry")
    entry.options.map_entry = True
    entry.field.add(
        name="key", number=1, type=FieldDescriptorProto.TYPE_STRING, label=_OPTIONAL
    )
    entry.field.add(
        name="value",
        number=2,
        type=FieldDescriptorProto.TYPE_MESSAGE,
        label=_OPTIONAL,
        type_name=".google.protobuf.Timestamp",
    )
    title = event.field.add(
        name="title", number=1, type=FieldDescriptorProto.TYPE_STRING, label=_OPTIONAL
    )
    title.options.ParseFromString(_TRANSLATED_TRUE)
    event.field.add(
        name="times",
        number=2,
        type=FieldDescriptorProto.TYPE_MESSAGE,
        label=FieldDescriptorProto.LABEL_REPEATED,
        type_name=".transtest.Event.TimesEntry",
    )
    return file_descriptor


def test_map_of_well_known_values_is_left_untouched(proto_files) -> None:
    request_files = (*proto_files, _events_file())
    reader = TranslationAnnotationReader.from_file_descriptors(request_files)
    schema_files = map_schema_files(request_files, reader)
    events_file = next(sf for sf in schema_files if sf.name == "transtest/events.proto")
    binding = TranslationBinding(build_file_plans(events_file, build_type_index(schema_files)))
    pool = descriptor_pool.DescriptorPool()
    for file_descriptor in request_files:
        pool.AddSerializedFile(file_descriptor.SerializeToString())
    event_class = message_factory.GetMessageClass(pool.FindMessageTypeByName("transtest.Event"))
    event = event_class(title="launch")
    event.times["a"].seconds = 5

    translations = binding.extract_translations(event, None, SourceLanguageKeyGetter())

    assert translations == {mint_key("launch"): "launch"}
    assert event.times["a"].seconds == 5
    assert binding.translate(event, translations).times["a"].seconds == 5
