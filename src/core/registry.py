"""
Sheet To-Do Bot — User Registry.

Maps a mention, alias or the caller's own Telegram handle to a registered
Identity. The set of identities is plain configuration data: production uses
DEFAULT_IDENTITIES, tests pass their own.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from src.core.errors import UnknownIdentityError
from src.data.models import HeaderSearch, Identity

logger = logging.getLogger(__name__)

DEFAULT_IDENTITIES: tuple[Identity, ...] = (
    Identity(username="hesong07", location=HeaderSearch(start=1, end=20), aliases=("he",)),
    Identity(username="boewu28", location=HeaderSearch(start=15, end=35), aliases=("aaron",)),
)


class Registry:
    """Closed set of registered identities and their shortcut aliases."""

    def __init__(self, identities: Iterable[Identity] = DEFAULT_IDENTITIES) -> None:
        self._identities: dict[str, Identity] = {}
        self._aliases: dict[str, Identity] = {}
        for identity in identities:
            if identity.username in self._identities:
                raise ValueError(f"duplicate identity: {identity.username}")
            self._identities[identity.username] = identity
            for alias in identity.aliases:
                key = alias.lower()
                if key in self._aliases:
                    raise ValueError(f"duplicate alias: {alias}")
                self._aliases[key] = identity

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._identities.values())

    def __len__(self) -> int:
        return len(self._identities)

    def get(self, username: str) -> Identity | None:
        return self._identities.get(username)

    def others(self, identity: Identity) -> list[Identity]:
        return [i for i in self._identities.values() if i.username != identity.username]

    def alias_commands(self) -> list[tuple[str, Identity]]:
        """(alias, identity) pairs, one per shortcut command."""
        return [(alias, identity) for identity in self for alias in identity.aliases]

    def describe_options(self) -> str:
        """Human-readable list of valid usernames and aliases."""
        users = ", ".join(f"@{u}" for u in self._identities)
        aliases = ", ".join(self._aliases)
        if aliases:
            return f"{users}, or shortcuts: {aliases}"
        return users

    def options(self) -> list[str]:
        return [f"@{u}" for u in self._identities] + list(self._aliases)

    def resolve(self, token: str) -> Identity:
        """Resolve an explicit mention or alias.

        Order: exact username, alias (any case), username (any case).
        """
        name = token.lstrip("@").strip()
        if name in self._identities:
            return self._identities[name]

        lowered = name.lower()
        if lowered in self._aliases:
            return self._aliases[lowered]

        for username, identity in self._identities.items():
            if username.lower() == lowered:
                return identity

        logger.info("Unknown identity requested: %r", token)
        raise UnknownIdentityError(
            f"Unknown username: @{name}\nSupported: {self.describe_options()}",
            options=self.options(),
        )

    def resolve_caller(self, handle: str | None) -> Identity:
        """Resolve the sender's own Telegram username for self-referential commands."""
        if not handle:
            raise UnknownIdentityError(
                "Could not determine your username. Please mention a username explicitly.",
                options=self.options(),
            )
        if handle in self._identities:
            return self._identities[handle]
        lowered = handle.lower()
        for username, identity in self._identities.items():
            if username.lower() == lowered:
                return identity
        raise UnknownIdentityError(
            f"Your username @{handle} is not registered. "
            f"Supported: {self.describe_options()}",
            options=self.options(),
        )
