"""Permission values for gated store fields.

A permission is one of four literals. Read access is granted when the
literal contains the read indicator ``r``; write access when it contains
the write indicator ``w``.

Example
-------
>>> Permission.parse("read-write")
<Permission.READ_WRITE: 'rw'>
>>> Permission.READ.grants_write
False
"""
from __future__ import annotations

from enum import Enum

from aumos_permission_store.errors import InvalidPermissionError

READ_INDICATOR: str = "r"
WRITE_INDICATOR: str = "w"


class Permission(str, Enum):
    """Access granted on a top-level store field."""

    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"
    NONE = "none"

    @property
    def grants_read(self) -> bool:
        """Return True when this permission contains the read indicator."""
        return READ_INDICATOR in self.value

    @property
    def grants_write(self) -> bool:
        """Return True when this permission contains the write indicator."""
        return WRITE_INDICATOR in self.value

    @classmethod
    def parse(cls, raw: Permission | str) -> Permission:
        """Coerce a short or long spelling into a :class:`Permission`.

        Parameters
        ----------
        raw:
            A ``Permission`` or one of ``"r"``, ``"w"``, ``"rw"``, ``"none"``,
            ``"read"``, ``"write"``, ``"read-write"`` (case-insensitive).

        Returns
        -------
        Permission

        Raises
        ------
        InvalidPermissionError
            If the literal is not a known permission.
        """
        if isinstance(raw, Permission):
            return raw
        if not isinstance(raw, str):
            raise InvalidPermissionError(raw)
        normalised = raw.strip().lower()
        resolved = _ALIASES.get(normalised)
        if resolved is None:
            raise InvalidPermissionError(raw)
        return resolved

    def __str__(self) -> str:
        return self.value


_ALIASES: dict[str, Permission] = {
    "r": Permission.READ,
    "read": Permission.READ,
    "w": Permission.WRITE,
    "write": Permission.WRITE,
    "rw": Permission.READ_WRITE,
    "read-write": Permission.READ_WRITE,
    "none": Permission.NONE,
}
