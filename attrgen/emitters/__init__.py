"""Section emitters and the generation driver."""

from __future__ import annotations

import io

from ..models import Catalogue
from .compat import emit_compat_funcs
from .names import assign_codes, emit_enum, emit_names
from .properties import check_property_constraints, emit_property_table

__all__ = [
    "assign_codes",
    "check_property_constraints",
    "emit_compat_funcs",
    "emit_enum",
    "emit_names",
    "emit_property_table",
    "generate",
]

SECTIONS = (emit_names, emit_enum, emit_compat_funcs, emit_property_table)


def _banner(catalogue: Catalogue) -> str:
    return (
        "// Attribute tables\n"
        "// Automatically generated file, do not edit!\n"
        f"// Source: {catalogue.catalogue_id} v{catalogue.version}\n\n"
    )


def generate(catalogue: Catalogue) -> str:
    """Run every section emitter into one buffer and return the text.

    Any GenerationError propagates before the caller sees partial output.
    """
    buf = io.StringIO()
    buf.write(_banner(catalogue))
    for emit in SECTIONS:
        emit(catalogue, buf)
    return buf.getvalue()
