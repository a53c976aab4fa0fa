"""Typed values produced by the XSD grammar.

Sum types are small families of frozen dataclasses; ``kind`` names the
variant in serialised output.
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


def _dump(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    return value


@dataclass(frozen=True)
class _Model:
    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            result[f.name] = _dump(getattr(self, f.name))
        return result


# Simple types


@dataclass(frozen=True)
class SimpleType(_Model):
    name: Optional[str]
    doc: str


@dataclass(frozen=True)
class LengthRestriction(SimpleType):
    kind: ClassVar[str] = "length_restriction"

    base: str
    min_length: Optional[int]
    max_length: Optional[int]


@dataclass(frozen=True)
class EnumRestriction(SimpleType):
    kind: ClassVar[str] = "enum_restriction"

    base: str
    allowed_values: Tuple[str, ...]


@dataclass(frozen=True)
class ListType(SimpleType):
    kind: ClassVar[str] = "list"

    item_type: str


@dataclass(frozen=True)
class UnionType(SimpleType):
    kind: ClassVar[str] = "union"

    member_types: Tuple[str, ...]


@dataclass(frozen=True)
class AliasType(SimpleType):
    kind: ClassVar[str] = "alias"

    aliased_type: str


# Attributes


@dataclass(frozen=True)
class AttributeTypeRef(_Model):
    kind: ClassVar[str] = "ref"

    name: str


@dataclass(frozen=True)
class AttributeTypeDef(_Model):
    kind: ClassVar[str] = "def"

    simple_type: SimpleType


@dataclass(frozen=True)
class Attribute(_Model):
    kind: ClassVar[str] = "attribute"

    name: str
    doc: str
    type: Union[AttributeTypeRef, AttributeTypeDef]
    use: Optional[str]
    default: Optional[str]


@dataclass(frozen=True)
class AttributeGroup(_Model):
    kind: ClassVar[str] = "attribute_group"

    name: str
    attributes: Tuple[Attribute, ...]


# Elements and complex types


@dataclass(frozen=True)
class ElementTypeRef(_Model):
    kind: ClassVar[str] = "ref"

    name: str


@dataclass(frozen=True)
class ElementTypeDef(_Model):
    kind: ClassVar[str] = "def"

    complex_type: "ComplexType"


@dataclass(frozen=True)
class Element(_Model):
    kind: ClassVar[str] = "element"

    name: Optional[str]
    doc: str
    type: Union[ElementTypeRef, ElementTypeDef]
    min_occurs: int
    # None means unbounded
    max_occurs: Optional[int]


@dataclass(frozen=True)
class Sequence(_Model):
    kind: ClassVar[str] = "sequence"

    doc: str
    min_occurs: int
    max_occurs: Optional[int]
    elements: Tuple[Element, ...]


@dataclass(frozen=True)
class Choice(_Model):
    kind: ClassVar[str] = "choice"

    elements: Tuple[Element, ...]


@dataclass(frozen=True)
class SequenceContent(_Model):
    kind: ClassVar[str] = "sequence_content"

    sequence: Sequence


@dataclass(frozen=True)
class ChoiceContent(_Model):
    kind: ClassVar[str] = "choice_content"

    choice: Choice


@dataclass(frozen=True)
class NoContent(_Model):
    kind: ClassVar[str] = "no_content"


ComplexContent = Union[SequenceContent, ChoiceContent, NoContent]


@dataclass(frozen=True)
class ComplexType(_Model):
    kind: ClassVar[str] = "complex_type"

    name: Optional[str]
    doc: str
    base: Optional[str]
    attribute_group_refs: Tuple[str, ...]
    attributes: Tuple[Attribute, ...]
    content: ComplexContent


SchemaItem = Union[Element, ComplexType, SimpleType, AttributeGroup, Attribute]


@dataclass(frozen=True)
class Schema(_Model):
    kind: ClassVar[str] = "schema"

    target_namespace: Optional[str]
    doc: str
    items: Tuple[SchemaItem, ...] = field(default_factory=tuple)

    def items_of(self, item_type: type) -> List[SchemaItem]:
        """Top-level items of one model class, in document order."""
        return [item for item in self.items if isinstance(item, item_type)]
