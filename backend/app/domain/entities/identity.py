"""Authenticated principal, resolved before any use case runs."""

from dataclasses import dataclass, field

_ROLE_PREFIX = "ROLE_"


def _normalize_role(role: str) -> str:
    role = role.strip().upper()
    if role.startswith(_ROLE_PREFIX):
        role = role[len(_ROLE_PREFIX):]
    return role


@dataclass(frozen=True)
class Identity:
    """Username and role set of the caller.

    Passed explicitly into every service call. Role checks ignore case and
    an optional ``ROLE_`` prefix, so ``admin``, ``ADMIN`` and ``ROLE_ADMIN``
    are the same role.
    """

    username: str
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        wanted = _normalize_role(role)
        return any(_normalize_role(r) == wanted for r in self.roles)

    def has_any_role(self, *roles: str) -> bool:
        return any(self.has_role(role) for role in roles)
