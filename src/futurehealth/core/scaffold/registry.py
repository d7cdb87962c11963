"""Scaffold registry: in-memory index for loaded scaffolds."""

from __future__ import annotations

from futurehealth.core.scaffold.models import Scaffold


class ScaffoldNotFoundError(KeyError):
    """Raised when a required scaffold id is not registered."""


class ScaffoldRegistry:
    """In-memory registry of all loaded scaffold definitions."""

    def __init__(self) -> None:
        self._scaffolds: dict[str, Scaffold] = {}
        self._by_tool: dict[str, list[str]] = {}

    def register(self, scaffold: Scaffold) -> None:
        """Add a scaffold to all indexes."""
        if scaffold.id in self._scaffolds:
            raise ValueError(f"Duplicate scaffold id registered: {scaffold.id!r}")
        self._scaffolds[scaffold.id] = scaffold

        for tool in scaffold.applicability.tools:
            ids = self._by_tool.setdefault(tool, [])
            if scaffold.id not in ids:
                ids.append(scaffold.id)

    def get(self, scaffold_id: str) -> Scaffold | None:
        """Look up a scaffold by ID."""
        return self._scaffolds.get(scaffold_id)

    def require(self, scaffold_id: str) -> Scaffold:
        scaffold = self._scaffolds.get(scaffold_id)
        if scaffold is None:
            raise ScaffoldNotFoundError(f"No scaffold registered with id {scaffold_id!r}")
        return scaffold

    def find_by_tool(self, tool_name: str) -> list[Scaffold]:
        """Find scaffolds applicable to a given tool name."""
        ids = self._by_tool.get(tool_name, [])
        return [self._scaffolds[sid] for sid in ids]

    def all(self) -> list[Scaffold]:
        """Return all registered scaffolds."""
        return list(self._scaffolds.values())
