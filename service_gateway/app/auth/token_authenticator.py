"""
Bearer token authentication against a shared HMAC signing key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from jose import jws, jwt
from jose.exceptions import JWSError, JWTClaimsError, JWTError

from shared.errors import ConfigurationError
MIN_KEY_BYTES = 32

ROLE_CLAIM_URI = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"
SUBJECT_CLAIMS = ("sub", "unique_name", "name")
ROLE_CLAIMS = ("role", ROLE_CLAIM_URI)


class SigningKey:
    """Symmetric key material shared by every validation in the process."""

    __slots__ = ("_material",)

    def __init__(self, material: bytes) -> None:
        if len(material) < MIN_KEY_BYTES:
            raise ConfigurationError(
                f"Signing key must be at least {MIN_KEY_BYTES} bytes"
            )
        object.__setattr__(self, "_material", bytes(material))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("SigningKey is immutable")

    @classmethod
    def from_secret(cls, secret: Optional[str]) -> "SigningKey":
        if not secret:
            raise ConfigurationError("Signing key is not configured")
        return cls(secret.encode("utf-8"))

    @property
    def material(self) -> bytes:
        return self._material

    def __repr__(self) -> str:
        return "SigningKey(<redacted>)"

    __str__ = __repr__


class AuthenticationFailure(str, Enum):
    """Internal reason a credential was rejected. Never sent to the caller."""

    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_TOKEN = "malformed_token"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"
    INVALID_CLAIMS = "invalid_claims"


@dataclass(frozen=True)
class Principal:
    """Identity established by a validated bearer token."""

    subject: str
    role: str
    claims: Mapping[str, str]
    expires_at: datetime


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of one validation: a principal, or the reason there is none."""

    principal: Optional[Principal] = None
    failure: Optional[AuthenticationFailure] = None
    detail: Optional[str] = field(default=None, compare=False)

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    @property
    def outcome(self) -> str:
        return "success" if self.failure is None else self.failure.value

    @classmethod
    def success(cls, principal: Principal) -> "AuthenticationResult":
        return cls(principal=principal)

    @classmethod
    def rejected(cls, failure: AuthenticationFailure, detail: Optional[str] = None) -> "AuthenticationResult":
        return cls(failure=failure, detail=detail)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stringify(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


class TokenAuthenticator:
    """Validate ``Authorization: Bearer <jwt>`` values.

    Validation depends only on the token, the signing key and the clock. It
    never raises for a bad credential; callers get an AuthenticationResult
    and decide how to reject.
    """

    def __init__(
        self,
        signing_key: SigningKey,
        *,
        algorithms: Sequence[str] = ("HS256", "HS384", "HS512"),
        validate_issuer: bool = False,
        issuer: Optional[str] = None,
        validate_audience: bool = False,
        audience: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not algorithms or any(not alg.upper().startswith("HS") for alg in algorithms):
            raise ConfigurationError("Only HMAC token algorithms are supported")
        if validate_issuer and not issuer:
            raise ConfigurationError("Issuer validation is enabled but no issuer is configured")
        if validate_audience and not audience:
            raise ConfigurationError("Audience validation is enabled but no audience is configured")

        self._key = signing_key
        self.algorithms = [alg.upper() for alg in algorithms]
        self.validate_issuer = validate_issuer
        self.issuer = issuer
        self.validate_audience = validate_audience
        self.audience = audience
        self._clock = clock

    def authenticate(self, authorization: Optional[str]) -> AuthenticationResult:
        """Validate the raw Authorization header value."""
        token = self._extract_bearer(authorization)
        if token is None:
            return AuthenticationResult.rejected(AuthenticationFailure.MISSING_CREDENTIAL)
        return self.validate(token)

    def validate(self, token: str) -> AuthenticationResult:
        """Validate a bare token string."""
        # Once structure and alg are known good, jws.verify can only fail on the signature.
        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, str(exc))
        if header.get("alg") not in self.algorithms:
            return AuthenticationResult.rejected(
                AuthenticationFailure.MALFORMED_TOKEN, "algorithm not allowed"
            )

        try:
            jws.verify(token, self._key.material, algorithms=self.algorithms)
        except JWSError:
            return AuthenticationResult.rejected(AuthenticationFailure.SIGNATURE_MISMATCH)

        try:
            claims = jwt.decode(
                token,
                self._key.material,
                algorithms=self.algorithms,
                audience=self.audience if self.validate_audience else None,
                issuer=self.issuer if self.validate_issuer else None,
                options={
                    "verify_exp": False,
                    "verify_aud": self.validate_audience,
                    "verify_iss": self.validate_issuer,
                    "leeway": 0,
                },
            )
        except JWTClaimsError as exc:
            return AuthenticationResult.rejected(AuthenticationFailure.INVALID_CLAIMS, str(exc))
        except JWTError as exc:
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, str(exc))
        except (TypeError, ValueError, OverflowError) as exc:
            # jose converts iat/nbf with int() and lets non-numeric values escape.
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, str(exc))

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, "exp claim missing")
        try:
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, "exp claim out of range")
        # Zero tolerance: a token expiring exactly now is already expired.
        if expires_at <= self._clock():
            return AuthenticationResult.rejected(AuthenticationFailure.EXPIRED)

        subject = self._first_claim(claims, SUBJECT_CLAIMS)
        if not subject:
            return AuthenticationResult.rejected(AuthenticationFailure.MALFORMED_TOKEN, "subject claim missing")

        principal = Principal(
            subject=subject,
            role=self._extract_role(claims),
            claims=MappingProxyType({name: _stringify(value) for name, value in claims.items()}),
            expires_at=expires_at,
        )
        return AuthenticationResult.success(principal)

    @staticmethod
    def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
        if not authorization:
            return None
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer":
            return None
        token = token.strip()
        return token or None

    @staticmethod
    def _first_claim(claims: Dict[str, Any], names: Sequence[str]) -> Optional[str]:
        for name in names:
            value = claims.get(name)
            if isinstance(value, str) and value:
                return value
        return None

    def _extract_role(self, claims: Dict[str, Any]) -> str:
        role = self._first_claim(claims, ROLE_CLAIMS)
        if role:
            return role
        roles = claims.get("roles")
        if isinstance(roles, list) and roles and isinstance(roles[0], str):
            return roles[0]
        return ""
