from .jwt_identity import JWTIdentityProvider, extract_roles

__all__ = [
    "JWTIdentityProvider",
    "extract_roles",
]
