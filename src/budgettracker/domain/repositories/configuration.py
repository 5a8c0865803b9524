"""Configuration store protocol."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from ...models.configuration import UserConfiguration

ConfigurationMutator = Callable[[UserConfiguration, bool], None]


class ConfigurationRepository(Protocol):
    """One-to-one configuration rows keyed by user."""

    def get_by_user(self, user_id: int) -> Optional[UserConfiguration]:
        ...

    def upsert(
        self, user_id: int, mutate: ConfigurationMutator
    ) -> tuple[UserConfiguration, bool]:
        """Find-or-create the user's row, apply ``mutate(row, created)`` and save.

        Both steps run in one transaction. Returns the row and whether it was created.
        """
        ...
