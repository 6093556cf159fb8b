"""
Plan/result types for the build command.

Generation is split into a compute phase, which produces the full text in
memory, and a write phase, which publishes it. Nothing is written unless the
compute phase succeeded.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class BasePlan(ABC):
    """Base class for operation plans (diagnostic output)."""
    catalogue_path: Path

    @abstractmethod
    def summary(self) -> str:
        """Human-readable summary of what would be done."""
        ...


@dataclass
class BaseResult:
    """Base class for operation results (action output)."""
    success: bool = True
    error: str | None = None


@dataclass
class BuildPlan(BasePlan):
    """Plan for a generation run."""
    catalogue_id: str
    version: int
    content: str = ""
    target_path: Path | None = None
    existing_content: str | None = None
    attribute_count: int = 0
    table_entries: int = 0
    compat_rules: int = 0
    merge_rules: int = 0

    @property
    def unchanged(self) -> bool:
        return self.existing_content is not None and self.existing_content == self.content

    def summary(self) -> str:
        lines = [
            "Attribute Build Plan",
            f"  Catalogue: {self.catalogue_id} v{self.version} ({self.catalogue_path})",
            f"  Target: {self.target_path or 'stdout'}",
            f"  Attributes: {self.attribute_count} ({self.table_entries} with codes)",
            f"  Compat rules: {self.compat_rules}",
            f"  Merge rules: {self.merge_rules}",
        ]
        if self.existing_content is not None:
            existing_len = len(self.existing_content.encode("utf-8"))
            updated_len = len(self.content.encode("utf-8"))
            if self.unchanged:
                lines.append("  Target is up to date")
            else:
                lines.append(f"  Size change: {existing_len} -> {updated_len} bytes")
        return "\n".join(lines)


@dataclass
class BuildResult(BaseResult):
    """Result of publishing a build plan."""
    output_path: Path | None = None
    bytes_written: int = 0
