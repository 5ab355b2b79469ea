"""Translation reconciliation exports.

Generated translation modules import their runtime from here.
"""

from protoc_gen_trans.schema_analysis.plan_models import (
    ClassifiedField,
    FieldClassification,
    MessagePlan,
)

from .key_policies import KeyGetter, ReusingKeyGetter, SourceLanguageKeyGetter, mint_key
from .message_nodes import CompositeChild, MessageNode, TranslatableSlot, TranslationMap
from .protobuf_binding import TranslationBinding
from .reconciliation_engine import (
    ReconciliationError,
    StructuralMismatchError,
    extract_translations,
    get_translation_keys,
    translate,
)

__all__ = [
    "ClassifiedField",
    "CompositeChild",
    "FieldClassification",
    "KeyGetter",
    "MessageNode",
    "MessagePlan",
    "ReconciliationError",
    "ReusingKeyGetter",
    "SourceLanguageKeyGetter",
    "StructuralMismatchError",
    "TranslatableSlot",
    "TranslationBinding",
    "TranslationMap",
    "extract_translations",
    "get_translation_keys",
    "mint_key",
    "translate",
]
