"""Attribute catalogue loader: TOML in, immutable Catalogue out."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from ..errors import CatalogueError
from ..models import (
    CODE_BEARING,
    AttributeDef,
    Catalogue,
    Category,
    CompatRule,
    GeneratorConfig,
    MergeRule,
    PropertyTag,
)

logger = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# One byte per table entry.
MAX_IMPLICIT_PROPERTIES = 8

# Names the enum block emits around each code-bearing category.
CATEGORY_MARKERS = frozenset(f"{edge}{c.value}" for c in CODE_BEARING for edge in ("First", "Last"))

TOGGLE_SETTINGS = ("names_toggle", "enum_toggle", "compat_toggle", "prop_table_toggle")

# Characters that cannot appear unescaped inside a C string literal.
UNSAFE_LITERAL = re.compile(r'["\\\x00-\x1f\x7f]')


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_list(value: Any, what: str, path: Path | None) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise CatalogueError(f"'{what}' must be an array", path=path)
    return value


def _required_str(raw: dict[str, Any], key: str, *, path: Path | None, entry: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CatalogueError(f"missing required field '{key}'", path=path, entry=entry)
    return value.strip()


def load_catalogue(path: Path) -> Catalogue:
    """
    Load an attribute catalogue from TOML.

    The catalogue is the whole definition database for one run: property
    tags, attribute definitions, compat/merge rules and generator settings.
    """
    if not path.exists():
        raise CatalogueError(f"Catalogue not found: {path}", path=path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogueError(f"Failed to read catalogue: {e}", path=path) from e
    return loads_catalogue(text, path=path)


def loads_catalogue(text: str, *, path: Path | None = None) -> Catalogue:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise CatalogueError(f"Failed to parse catalogue TOML: {e}", path=path) from e

    catalogue_id = str(data.get("catalogue_id", "")).strip()
    if not catalogue_id:
        raise CatalogueError("catalogue_id is required", path=path)

    version = data.get("version", 0)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise CatalogueError("version must be a positive integer", path=path)

    properties = _load_properties(_coerce_list(data.get("properties"), "properties", path), path)
    declared = {tag.name for tag in properties}
    attributes = _load_attributes(_coerce_list(data.get("attributes"), "attributes", path), declared, path)

    compat_rules: list[CompatRule] = []
    for i, raw in enumerate(_coerce_list(data.get("compat_rules"), "compat_rules", path)):
        entry = f"compat_rules[{i}]"
        raw = _coerce_dict(raw)
        func = _required_str(raw, "func", path=path, entry=entry)
        attr = raw.get("attr")
        if attr is not None and not isinstance(attr, str):
            raise CatalogueError("'attr' must be a string", path=path, entry=entry)
        if attr and UNSAFE_LITERAL.search(attr):
            raise CatalogueError(
                "'attr' cannot contain quotes, backslashes or control characters", path=path, entry=entry
            )
        compat_rules.append(CompatRule(compat_func=func, attr_name=attr or None))

    merge_rules: list[MergeRule] = []
    for i, raw in enumerate(_coerce_list(data.get("merge_rules"), "merge_rules", path)):
        func = _required_str(_coerce_dict(raw), "func", path=path, entry=f"merge_rules[{i}]")
        merge_rules.append(MergeRule(merge_func=func))

    description = data.get("description")

    catalogue = Catalogue(
        catalogue_id=catalogue_id,
        version=version,
        attributes=tuple(attributes),
        properties=tuple(properties),
        compat_rules=tuple(compat_rules),
        merge_rules=tuple(merge_rules),
        config=_load_config(data.get("generator"), path),
        description=description if isinstance(description, str) else None,
        path=path,
    )
    logger.debug(
        "loaded catalogue %s v%d: %d attributes, %d properties, %d compat rules, %d merge rules",
        catalogue_id,
        version,
        len(catalogue.attributes),
        len(catalogue.properties),
        len(catalogue.compat_rules),
        len(catalogue.merge_rules),
    )
    return catalogue


def _load_properties(raw_list: list[Any], path: Path | None) -> list[PropertyTag]:
    tags: list[PropertyTag] = []
    seen: set[str] = set()
    implicit = 0
    for i, raw in enumerate(raw_list):
        entry = f"properties[{i}]"
        raw = _coerce_dict(raw)
        name = _required_str(raw, "name", path=path, entry=entry)
        if not IDENTIFIER.match(name):
            raise CatalogueError(f"invalid property name {name!r}", path=path, entry=entry)
        if name in seen:
            raise CatalogueError(f"duplicate property '{name}'", path=path, entry=entry)
        seen.add(name)

        value = raw.get("value")
        if value is None:
            if implicit >= MAX_IMPLICIT_PROPERTIES:
                raise CatalogueError(
                    f"too many properties for a one-byte table (max {MAX_IMPLICIT_PROPERTIES})",
                    path=path,
                    entry=entry,
                )
            value = 1 << implicit
            implicit += 1
        elif not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 0xFF:
            raise CatalogueError("property value must be an integer in 0..255", path=path, entry=entry)

        tags.append(PropertyTag(name=name, value=value))
    return tags


def _load_attributes(raw_list: list[Any], declared: set[str], path: Path | None) -> list[AttributeDef]:
    attributes: list[AttributeDef] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_list):
        raw = _coerce_dict(raw)
        entry = f"attributes[{i}]"
        name = _required_str(raw, "name", path=path, entry=entry)
        entry = f"attribute '{name}'"
        if not IDENTIFIER.match(name):
            raise CatalogueError("name is not a valid identifier", path=path, entry=entry)
        if name in CATEGORY_MARKERS:
            raise CatalogueError("name collides with a category marker", path=path, entry=entry)
        if name in seen:
            raise CatalogueError("duplicate attribute name", path=path, entry=entry)
        seen.add(name)

        category_name = _required_str(raw, "category", path=path, entry=entry)
        try:
            category = Category(category_name)
        except ValueError:
            raise CatalogueError(f"unknown category {category_name!r}", path=path, entry=entry) from None

        spelling = _required_str(raw, "spelling", path=path, entry=entry)

        props = raw.get("properties", [])
        if not isinstance(props, list) or not all(isinstance(p, str) for p in props):
            raise CatalogueError("'properties' must be an array of strings", path=path, entry=entry)
        if props and not category.code_bearing:
            raise CatalogueError(f"{category.value} definitions cannot carry properties", path=path, entry=entry)
        for prop in props:
            if prop not in declared:
                raise CatalogueError(f"undeclared property '{prop}'", path=path, entry=entry)

        attributes.append(
            AttributeDef(
                name=name,
                category=category,
                display_string=spelling,
                properties=tuple(props),
            )
        )
    return attributes


def _load_config(raw: Any, path: Path | None) -> GeneratorConfig:
    if raw is None:
        return GeneratorConfig()
    if not isinstance(raw, dict):
        raise CatalogueError("'generator' must be a table", path=path)

    known = {f.name for f in fields(GeneratorConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise CatalogueError(f"unknown generator settings: {', '.join(unknown)}", path=path, entry="generator")

    for key, value in raw.items():
        if not isinstance(value, str) or not IDENTIFIER.match(value):
            raise CatalogueError(f"'{key}' must be a C identifier", path=path, entry="generator")

    config = GeneratorConfig(**raw)
    used_by: dict[str, str] = {}
    for key in TOGGLE_SETTINGS:
        toggle = getattr(config, key)
        if toggle in used_by:
            raise CatalogueError(
                f"toggle '{toggle}' used by {used_by[toggle]} and {key}", path=path, entry="generator"
            )
        used_by[toggle] = key
    return config
