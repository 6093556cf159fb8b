"""Caller/callee compatibility check and merge function emission."""

from __future__ import annotations

import logging
from typing import TextIO

from ..models import Catalogue, CompatRule

logger = logging.getLogger(__name__)


def _signature(prefix: str, params: str, continuation: str) -> str:
    # Second parameter aligned under the first, as clang-format would.
    head = f"{prefix}("
    return f"{head}{params}\n{' ' * len(head)}{continuation}) {{\n"


def _compat_call(rule: CompatRule) -> str:
    args = "Caller, Callee"
    if rule.attr_name:
        args += f', "{rule.attr_name}"'
    return f"  Ret &= {rule.compat_func}({args});\n"


def emit_compat_funcs(catalogue: Catalogue, out: TextIO) -> None:
    """Emit the compatibility check and merge functions.

    The check is a plain AND-fold: every rule runs even after one fails.
    Merge calls run in declaration order.
    """
    config = catalogue.config
    fn = config.function_type
    logger.debug(
        "compat rules: %d, merge rules: %d",
        len(catalogue.compat_rules),
        len(catalogue.merge_rules),
    )

    out.write(f"#ifdef {config.compat_toggle}\n")
    out.write(f"#undef {config.compat_toggle}\n")

    out.write(
        _signature(
            f"static inline bool {config.compat_func_name}",
            f"const {fn} &Caller,",
            f"const {fn} &Callee",
        )
    )
    out.write("  bool Ret = true;\n\n")
    for rule in catalogue.compat_rules:
        out.write(_compat_call(rule))
    out.write("\n")
    out.write("  return Ret;\n")
    out.write("}\n\n")

    out.write(
        _signature(
            f"static inline void {config.merge_func_name}",
            f"{fn} &Caller,",
            f"const {fn} &Callee",
        )
    )
    for rule in catalogue.merge_rules:
        out.write(f"  {rule.merge_func}(Caller, Callee);\n")
    out.write("}\n\n")

    out.write("#endif\n\n")
