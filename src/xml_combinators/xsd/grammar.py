"""Grammar rules for a practical subset of XML Schema.

Each rule takes a ``Scope`` positioned on one schema element and returns the
matching model value. Rules consume everything they understand and leave the
rest, so unsupported schema constructs show up in the failure report.
"""

from typing import Optional

from xml_combinators.engine import Other, Rule, Scope, UnsupportedFeatureError
from xml_combinators.xsd.model import (
    AliasType,
    Attribute,
    AttributeGroup,
    AttributeTypeDef,
    AttributeTypeRef,
    Choice,
    ChoiceContent,
    ComplexContent,
    ComplexType,
    Element,
    ElementTypeDef,
    ElementTypeRef,
    EnumRestriction,
    LengthRestriction,
    ListType,
    NoContent,
    Schema,
    SchemaItem,
    Sequence,
    SequenceContent,
    SimpleType,
    UnionType,
)

UNBOUNDED = "unbounded"

# Schema root attributes that do not affect the model
_IGNORED_SCHEMA_ATTRS = (
    "elementFormDefault",
    "attributeFormDefault",
    "version",
    "id",
    "blockDefault",
    "finalDefault",
)


def _to_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise Other(f"Attribute {key} is not an integer: {value}") from None


# Common pieces


def documentation(scope: Scope) -> str:
    """Text of the optional ``annotation/documentation`` child, or ``""``."""
    def documentation_text(s: Scope) -> str:
        s.match_name("documentation")
        return s.take_text().strip()

    def annotation(s: Scope) -> str:
        s.match_name("annotation")
        return s.child(documentation_text)

    doc = scope.optional_child(annotation)
    return doc if doc is not None else ""


def min_occurs(scope: Scope) -> int:
    value = scope.take_attr_optional("minOccurs")
    return 1 if value is None else _to_int("minOccurs", value)


def max_occurs(scope: Scope) -> Optional[int]:
    """Upper occurrence bound; None means unbounded."""
    value = scope.take_attr_optional("maxOccurs")
    if value is None:
        return 1
    if value == UNBOUNDED:
        return None
    return _to_int("maxOccurs", value)


# Simple types


def _length_facet(facet_name: str) -> Rule[int]:
    def rule(scope: Scope) -> int:
        scope.match_name(facet_name)
        return _to_int("value", scope.take_attr("value"))
    return rule


def _enumeration(scope: Scope) -> str:
    scope.match_name("enumeration")
    return scope.take_attr("value")


def simple_type(scope: Scope) -> SimpleType:
    scope.match_name("simpleType")
    name = scope.take_attr_optional("name")
    doc = documentation(scope)

    def restriction(s: Scope) -> SimpleType:
        s.match_name("restriction")
        base = s.take_attr("base")

        def length_restriction(r: Scope) -> LengthRestriction:
            min_length = r.optional_child(_length_facet("minLength"))
            max_length = r.optional_child(_length_facet("maxLength"))
            if min_length is None and max_length is None:
                raise Other("No length restriction given")
            return LengthRestriction(name, doc, base, min_length, max_length)

        def enum_restriction(r: Scope) -> EnumRestriction:
            return EnumRestriction(name, doc, base, tuple(r.children(_enumeration)))

        return s.one_of(length_restriction, enum_restriction)

    def list_type(s: Scope) -> ListType:
        s.match_name("list")
        return ListType(name, doc, s.take_attr("itemType"))

    def union_type(s: Scope) -> UnionType:
        s.match_name("union")
        return UnionType(name, doc, tuple(s.take_attr("memberTypes").split(" ")))

    def alias(s: Scope) -> AliasType:
        s.match_name("restriction")
        return AliasType(name, doc, s.take_attr("base"))

    return scope.one_of(
        lambda s: s.child(restriction),
        lambda s: s.child(list_type),
        lambda s: s.child(union_type),
        lambda s: s.child(alias),
    )


# Attributes


def attribute(scope: Scope) -> Attribute:
    scope.match_name("attribute")
    # Some schemas put whitespace inside empty attribute declarations
    scope.require_blank_text()
    attr_type = scope.one_of(
        lambda s: AttributeTypeRef(s.take_attr("type")),
        lambda s: AttributeTypeDef(s.child(simple_type)),
    )
    return Attribute(
        scope.take_attr("name"),
        documentation(scope),
        attr_type,
        scope.take_attr_optional("use"),
        scope.take_attr_optional("default"),
    )


def attribute_group(scope: Scope) -> AttributeGroup:
    scope.match_name("attributeGroup")
    return AttributeGroup(scope.take_attr("name"), tuple(scope.children(attribute)))


def _attribute_group_ref(scope: Scope) -> str:
    scope.match_name("attributeGroup")
    return scope.take_attr("ref")


# Elements, sequences and choices


def element(scope: Scope) -> Element:
    scope.match_name("element")
    scope.discard_attr("final")
    scope.discard_attr("fixed")
    if scope.take_attr_optional("nillable") not in ("false", None):
        raise UnsupportedFeatureError("Nillable elements not supported")

    element_type = scope.one_of(
        lambda s: ElementTypeRef(s.take_attr("type")),
        lambda s: ElementTypeDef(s.child(complex_type)),
    )
    return Element(
        scope.take_attr_optional("name"),
        documentation(scope),
        element_type,
        min_occurs(scope),
        max_occurs(scope),
    )


def sequence(scope: Scope) -> Sequence:
    scope.match_name("sequence")
    scope.discard_children_named("any")
    return Sequence(
        documentation(scope),
        min_occurs(scope),
        max_occurs(scope),
        tuple(scope.children(element)),
    )


def choice(scope: Scope) -> Choice:
    scope.match_name("choice")
    return Choice(tuple(scope.children(element)))


# Complex types


def _complex_content(scope: Scope) -> ComplexContent:
    def nothing_left(s: Scope) -> NoContent:
        # Reports the leftovers here instead of as an unmatched variant
        s.check_no_remaining_items()
        return NoContent()

    return scope.one_of(
        lambda s: SequenceContent(s.child(sequence)),
        lambda s: ChoiceContent(s.child(choice)),
        nothing_left,
    )


def complex_type(scope: Scope) -> ComplexType:
    scope.match_name("complexType")
    scope.discard_attr("abstract")
    name = scope.take_attr_optional("name")
    doc = documentation(scope)

    def extension(s: Scope) -> ComplexType:
        s.match_name("extension")
        base = s.take_attr("base")
        group_refs = tuple(s.optional_children(_attribute_group_ref))
        attributes = tuple(s.optional_children(attribute))
        return ComplexType(name, doc, base, group_refs, attributes, _complex_content(s))

    def complex_content(s: Scope) -> ComplexType:
        s.match_name("complexContent")
        return s.child(extension)

    def plain(s: Scope) -> ComplexType:
        group_refs = tuple(s.optional_children(_attribute_group_ref))
        attributes = tuple(s.optional_children(attribute))
        s.discard_children_named("anyAttribute")
        return ComplexType(name, doc, None, group_refs, attributes, _complex_content(s))

    return scope.one_of(
        lambda s: s.child(complex_content),
        plain,
    )


# Whole documents


def _schema_item(scope: Scope) -> SchemaItem:
    return scope.one_of(element, complex_type, simple_type, attribute_group, attribute)


def schema(scope: Scope) -> Schema:
    """Root rule for a whole ``schema`` document."""
    scope.match_name("schema")
    for key in _IGNORED_SCHEMA_ATTRS:
        scope.discard_attr(key)
    target_namespace = scope.take_attr_optional("targetNamespace")
    doc = documentation(scope)
    for name in ("annotation", "import", "include"):
        scope.discard_children_named(name)
    items = tuple(scope.optional_children(_schema_item))
    return Schema(target_namespace, doc, items)
