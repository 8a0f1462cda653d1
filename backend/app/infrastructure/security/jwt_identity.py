"""Bearer token verification: turns a JWT into a domain Identity.

Tokens are verified with PyJWT, either against a shared secret (HS*) or
against the signing keys published at a JWKS endpoint (RS*/ES*). Roles are
collected from the Keycloak-style ``realm_access.roles`` and
``resource_access.<client>.roles`` claims, plus a flat ``roles`` claim when
present.
"""

import logging
from collections.abc import Iterable
from typing import Any

import jwt
from jwt import PyJWKClient

from app.config import Settings
from app.domain.entities import Identity
from app.domain.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

_REALM_ACCESS_CLAIM = "realm_access"
_RESOURCE_ACCESS_CLAIM = "resource_access"
_ROLES_CLAIM = "roles"


class JWTIdentityProvider:
    """Verifies bearer tokens and extracts the caller's username and roles."""

    def __init__(
        self,
        *,
        secret: str = "",
        jwks_url: str = "",
        algorithms: Iterable[str] = ("HS256",),
        audience: str | None = None,
        issuer: str | None = None,
        username_claim: str = "preferred_username",
    ):
        if not secret and not jwks_url:
            logger.warning(
                "Neither JWT_SECRET nor JWT_JWKS_URL is configured; every bearer token will be rejected."
            )
        self._secret = secret
        self._jwks_client = PyJWKClient(jwks_url) if jwks_url else None
        self._algorithms = list(algorithms)
        self._audience = audience
        self._issuer = issuer
        self._username_claim = username_claim

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTIdentityProvider":
        return cls(
            secret=settings.jwt_secret,
            jwks_url=settings.jwt_jwks_url,
            algorithms=settings.jwt_algorithms,
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            username_claim=settings.jwt_username_claim,
        )

    def identify(self, token: str) -> Identity:
        """Verify ``token`` and return the principal it carries.

        Raises UnauthenticatedError on any verification failure.
        """
        claims = self._decode(token)

        username = claims.get(self._username_claim) or claims.get("sub")
        if not isinstance(username, str) or not username.strip():
            logger.warning("Bearer token has no usable '%s' claim", self._username_claim)
            raise UnauthenticatedError("Token does not identify a user")

        return Identity(username=username.strip(), roles=extract_roles(claims))

    def _decode(self, token: str) -> dict[str, Any]:
        options = {"verify_aud": self._audience is not None, "require": ["exp"]}
        try:
            key = self._signing_key(token)
            return jwt.decode(
                token,
                key,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options=options,
            )
        except jwt.PyJWTError as exc:
            logger.info("Bearer token rejected: %s", exc)
            raise UnauthenticatedError("Invalid or expired token") from exc

    def _signing_key(self, token: str) -> Any:
        if self._jwks_client is not None:
            return self._jwks_client.get_signing_key_from_jwt(token).key
        if not self._secret:
            raise jwt.InvalidKeyError("No verification key configured")
        return self._secret


def extract_roles(claims: dict[str, Any]) -> frozenset[str]:
    """Collect realm, client and flat roles from decoded token claims."""
    roles: set[str] = set()

    realm_access = claims.get(_REALM_ACCESS_CLAIM)
    if isinstance(realm_access, dict):
        roles.update(_string_list(realm_access.get(_ROLES_CLAIM)))

    resource_access = claims.get(_RESOURCE_ACCESS_CLAIM)
    if isinstance(resource_access, dict):
        for client in resource_access.values():
            if isinstance(client, dict):
                roles.update(_string_list(client.get(_ROLES_CLAIM)))

    roles.update(_string_list(claims.get(_ROLES_CLAIM)))
    return frozenset(roles)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
