"""
Field naming policies.

A naming policy decides, from a field key alone, whether a resolved field
starts out disabled, hidden or omitted. User customization still wins.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NamingPolicy(BaseModel):
    """Key sets that mark fields disabled, hidden or omitted by default."""

    disabled: frozenset[str] = frozenset()
    hidden: frozenset[str] = frozenset()
    omitted: frozenset[str] = frozenset()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def conventional(cls) -> NamingPolicy:
        """Identifier and soft-delete flags disabled, timestamps omitted."""
        return cls(
            disabled=frozenset({"id", "deleted", "inactive"}),
            omitted=frozenset({"inserted_at", "updated_at"}),
        )

    def is_disabled(self, key: str) -> bool:
        return key in self.disabled

    def is_hidden(self, key: str) -> bool:
        return key in self.hidden

    def is_omitted(self, key: str) -> bool:
        return key in self.omitted

    def extend(
        self,
        disabled: list[str] | None = None,
        hidden: list[str] | None = None,
        omitted: list[str] | None = None,
    ) -> NamingPolicy:
        """Return a policy with extra keys added to each set."""
        return NamingPolicy(
            disabled=self.disabled | frozenset(disabled or ()),
            hidden=self.hidden | frozenset(hidden or ()),
            omitted=self.omitted | frozenset(omitted or ()),
        )
