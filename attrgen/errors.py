"""Exceptions raised while loading a catalogue or generating output."""

from __future__ import annotations

from pathlib import Path


class GenerationError(Exception):
    """Base class for failures that abort a generation run."""


class CatalogueError(GenerationError, ValueError):
    """The catalogue file is malformed or incomplete."""

    def __init__(self, message: str, *, path: Path | None = None, entry: str | None = None):
        self.path = path
        self.entry = entry
        self.detail = message
        super().__init__(self._format())

    def _format(self) -> str:
        loc = ""
        if self.path is not None:
            loc = f"{self.path.name}: "
        if self.entry:
            loc += f"{self.entry}: "
        return f"{loc}{self.detail}"


class PropertyConstraintError(GenerationError):
    """A category-restricted property tag was attached to the wrong category."""

    def __init__(self, tag: str, required: str, attribute: str, category: str):
        self.tag = tag
        self.required = required
        self.attribute = attribute
        self.category = category
        super().__init__(
            f"'{tag}' only compatible with '{required}' (attribute '{attribute}' is '{category}')"
        )
