"""Name table and enum value emission."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TextIO

from ..models import CODE_BEARING, Catalogue, Category

logger = logging.getLogger(__name__)

# Value 0 is AttrKind::None.
FIRST_CODE = 1

NAME_GROUPS: list[tuple[str, tuple[Category, ...]]] = [
    ("ATTRIBUTE_ENUM", CODE_BEARING),
    ("ATTRIBUTE_STRBOOL", (Category.STR_BOOL,)),
    ("ATTRIBUTE_COMPLEXSTR", (Category.COMPLEX_STR,)),
]


@dataclass(frozen=True)
class CodeRange:
    """Codes assigned to one category.

    An empty category has `last == first - 1`.
    """

    category: Category
    first: int
    last: int
    names: tuple[str, ...] = ()

    def __contains__(self, code: int) -> bool:
        return self.first <= code <= self.last

    @property
    def empty(self) -> bool:
        return self.last < self.first


@dataclass
class CodeAssignment:
    ranges: list[CodeRange] = field(default_factory=list)
    codes: dict[str, int] = field(default_factory=dict)

    def range_for(self, category: Category) -> CodeRange:
        for r in self.ranges:
            if r.category is category:
                return r
        raise KeyError(category.value)


def assign_codes(catalogue: Catalogue) -> CodeAssignment:
    """Assign sequential codes to every code-bearing definition."""
    result = CodeAssignment()
    value = FIRST_CODE
    for category in CODE_BEARING:
        first = value
        names: list[str] = []
        for attr in catalogue.by_category(category):
            result.codes[attr.name] = value
            names.append(attr.name)
            value += 1
        result.ranges.append(CodeRange(category=category, first=first, last=value - 1, names=tuple(names)))
        logger.debug("%s: codes %d..%d (%d attributes)", category.value, first, value - 1, len(names))
    return result


def emit_names(catalogue: Catalogue, out: TextIO) -> None:
    """Emit the (name, spelling) tables, one callback macro per group."""
    toggle = catalogue.config.names_toggle
    out.write(f"#ifdef {toggle}\n")
    out.write(f"#undef {toggle}\n")

    out.write("#ifndef ATTRIBUTE_ALL\n")
    out.write("#define ATTRIBUTE_ALL(FIRST, SECOND)\n")
    out.write("#endif\n\n")

    for macro, categories in NAME_GROUPS:
        out.write(f"#ifndef {macro}\n")
        out.write(f"#define {macro}(FIRST, SECOND) ATTRIBUTE_ALL(FIRST, SECOND)\n")
        out.write("#endif\n\n")
        for category in categories:
            for attr in catalogue.by_category(category):
                out.write(f"{macro}({attr.name},{attr.display_string})\n")
        out.write(f"#undef {macro}\n\n")

    out.write("#undef ATTRIBUTE_ALL\n")
    out.write("#endif\n\n")


def emit_enum(catalogue: Catalogue, out: TextIO) -> None:
    """Emit enumerator assignments bracketed by First/Last markers per category."""
    assignment = assign_codes(catalogue)
    toggle = catalogue.config.enum_toggle
    out.write(f"#ifdef {toggle}\n")
    out.write(f"#undef {toggle}\n")
    for r in assignment.ranges:
        out.write(f"First{r.category.value} = {r.first},\n")
        for name in r.names:
            out.write(f"{name} = {assignment.codes[name]},\n")
        out.write(f"Last{r.category.value} = {r.last},\n")
    out.write("#endif\n\n")
