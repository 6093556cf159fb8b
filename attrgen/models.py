"""Data models for attribute catalogues."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal


class Category(Enum):
    """Closed set of attribute categories."""

    ENUM = "EnumAttr"
    TYPE = "TypeAttr"
    INT = "IntAttr"
    CONSTANT_RANGE = "ConstantRangeAttr"
    CONSTANT_RANGE_LIST = "ConstantRangeListAttr"
    STR_BOOL = "StrBoolAttr"
    COMPLEX_STR = "ComplexStrAttr"

    @property
    def code_bearing(self) -> bool:
        return self in CODE_BEARING


# Order expected by the consumer's three-way attribute comparison.
CODE_BEARING: tuple[Category, ...] = (
    Category.ENUM,
    Category.TYPE,
    Category.INT,
    Category.CONSTANT_RANGE,
    Category.CONSTANT_RANGE_LIST,
)

# Property tags that may only be attached to one category.
RESTRICTED_PROPERTIES: dict[str, Category] = {
    "IntersectAnd": Category.ENUM,
    "IntersectMin": Category.INT,
}


@dataclass(frozen=True)
class PropertyTag:
    name: str
    value: int


@dataclass(frozen=True)
class AttributeDef:
    """One attribute definition from the catalogue."""

    name: str
    category: Category
    display_string: str
    properties: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompatRule:
    compat_func: str
    attr_name: str | None = None


@dataclass(frozen=True)
class MergeRule:
    merge_func: str


@dataclass(frozen=True)
class GeneratorConfig:
    """Symbols used in the generated text."""

    names_toggle: str = "GET_ATTR_NAMES"
    enum_toggle: str = "GET_ATTR_ENUM"
    compat_toggle: str = "GET_ATTR_COMPAT_FUNC"
    prop_table_toggle: str = "GET_ATTR_PROP_TABLE"
    compat_func_name: str = "hasCompatibleFnAttrs"
    merge_func_name: str = "mergeFnAttrs"
    function_type: str = "Function"
    prop_table_name: str = "AttrPropTable"


@dataclass(frozen=True)
class Catalogue:
    """Immutable definition database.

    Attributes keep their declaration order; `by_category` never re-sorts.
    """

    catalogue_id: str
    version: int
    attributes: tuple[AttributeDef, ...] = ()
    properties: tuple[PropertyTag, ...] = ()
    compat_rules: tuple[CompatRule, ...] = ()
    merge_rules: tuple[MergeRule, ...] = ()
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    description: str | None = None
    path: Path | None = None

    def by_category(self, category: Category) -> list[AttributeDef]:
        """All definitions of `category` in declaration order."""
        return [a for a in self.attributes if a.category is category]

    def property_value(self, name: str) -> int:
        for tag in self.properties:
            if tag.name == name:
                return tag.value
        raise KeyError(name)


@dataclass
class Diagnostic:
    """A single catalogue finding."""

    level: Literal["error", "warning"]
    rule: str
    attribute: str
    message: str

    def __str__(self) -> str:
        return f"{self.level.upper()}: [{self.rule}] {self.attribute} - {self.message}"
