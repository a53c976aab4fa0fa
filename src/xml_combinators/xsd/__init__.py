"""XML Schema grammar built on the combinator engine.

Key Components:
    schema: Root rule turning a ``schema`` document into a ``Schema``
    element, complex_type, simple_type, attribute, ...: Rules for single constructs
    model: Frozen dataclasses produced by the rules
"""

from .grammar import (
    attribute,
    attribute_group,
    choice,
    complex_type,
    documentation,
    element,
    max_occurs,
    min_occurs,
    schema,
    sequence,
    simple_type,
)
from .model import (
    AliasType,
    Attribute,
    AttributeGroup,
    AttributeTypeDef,
    AttributeTypeRef,
    Choice,
    ChoiceContent,
    ComplexType,
    Element,
    ElementTypeDef,
    ElementTypeRef,
    EnumRestriction,
    LengthRestriction,
    ListType,
    NoContent,
    Schema,
    Sequence,
    SequenceContent,
    SimpleType,
    UnionType,
)

__all__ = [
    "attribute",
    "attribute_group",
    "choice",
    "complex_type",
    "documentation",
    "element",
    "max_occurs",
    "min_occurs",
    "schema",
    "sequence",
    "simple_type",
    "AliasType",
    "Attribute",
    "AttributeGroup",
    "AttributeTypeDef",
    "AttributeTypeRef",
    "Choice",
    "ChoiceContent",
    "ComplexType",
    "Element",
    "ElementTypeDef",
    "ElementTypeRef",
    "EnumRestriction",
    "LengthRestriction",
    "ListType",
    "NoContent",
    "Schema",
    "Sequence",
    "SequenceContent",
    "SimpleType",
    "UnionType",
]
