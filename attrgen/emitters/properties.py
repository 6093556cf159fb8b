"""Per-attribute property table emission."""

from __future__ import annotations

import logging
from typing import TextIO

from ..errors import PropertyConstraintError
from ..models import CODE_BEARING, RESTRICTED_PROPERTIES, AttributeDef, Catalogue, Diagnostic

logger = logging.getLogger(__name__)


def _restriction_violation(attr: AttributeDef, prop: str) -> PropertyConstraintError | None:
    required = RESTRICTED_PROPERTIES.get(prop)
    if required is None or attr.category is required:
        return None
    return PropertyConstraintError(prop, required.value, attr.name, attr.category.value)


def property_mask(catalogue: Catalogue, attr: AttributeDef) -> int:
    """OR together the flag values of `attr`'s properties.

    Raises PropertyConstraintError on the first restricted tag used outside
    its category.
    """
    mask = 0
    for prop in attr.properties:
        error = _restriction_violation(attr, prop)
        if error is not None:
            raise error
        mask |= catalogue.property_value(prop)
    return mask


def property_table(catalogue: Catalogue) -> list[int]:
    """Masks in code order: entry i belongs to the attribute with code i + 1."""
    return [property_mask(catalogue, attr) for category in CODE_BEARING for attr in catalogue.by_category(category)]


def check_property_constraints(catalogue: Catalogue) -> list[Diagnostic]:
    """Collect every restricted-tag violation instead of stopping at the first."""
    results: list[Diagnostic] = []
    for category in CODE_BEARING:
        for attr in catalogue.by_category(category):
            for prop in attr.properties:
                error = _restriction_violation(attr, prop)
                if error is None:
                    continue
                results.append(
                    Diagnostic(
                        level="error",
                        rule="restricted-property",
                        attribute=attr.name,
                        message=str(error),
                    )
                )
    return results


def emit_property_table(catalogue: Catalogue, out: TextIO) -> None:
    # Build the whole table first so a violation leaves `out` untouched.
    table = property_table(catalogue)
    logger.debug("property table: %d entries", len(table))

    config = catalogue.config
    out.write(f"#ifdef {config.prop_table_toggle}\n")
    out.write(f"#undef {config.prop_table_toggle}\n")
    for tag in catalogue.properties:
        out.write(f"// AttributeProperty::{tag.name} = 0x{tag.value:02x}\n")
    out.write(f"static const uint8_t {config.prop_table_name}[] = {{\n")
    for mask in table:
        out.write(f"{mask},\n")
    out.write("};\n")
    out.write("#endif\n")
