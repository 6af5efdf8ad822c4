"""Caller identity from bearer tokens.

One contract: the transport hands over the Authorization header and gets back
a verified ``CallerIdentity`` or ``None``. Signature checks are PyJWT's job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import jwt

from ..core.constants import MAX_EXTERNAL_ID_LENGTH
from ..core.enums import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    """Verified principal as delivered by the identity provider."""

    external_id: str
    role: Optional[Role] = None
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Caller:
    """Identity resolved to a stored worker; what the access policy sees."""

    worker_id: int
    role: Role


class AuthVerifier(Protocol):
    def verify(self, authorization: Optional[str]) -> Optional[CallerIdentity]:
        raise NotImplementedError


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class JWTAuthVerifier(AuthVerifier):
    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        role_claim: str = "role",
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience
        self._issuer = issuer
        self._role_claim = role_claim

    def verify(self, authorization: Optional[str]) -> Optional[CallerIdentity]:
        token = bearer_token(authorization)
        if token is None or not self._secret:
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["sub"], "verify_aud": self._audience is not None},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid token: %s", e)
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            return None
        if len(subject.strip()) > MAX_EXTERNAL_ID_LENGTH:
            # workers.external_id is VARCHAR(191)
            logger.info("Rejected token: subject longer than %d characters", MAX_EXTERNAL_ID_LENGTH)
            return None

        return CallerIdentity(
            external_id=subject.strip(),
            role=self._parse_role(payload.get(self._role_claim)),
            email=payload.get("email") or None,
            name=payload.get("name") or None,
        )

    @staticmethod
    def _parse_role(value) -> Optional[Role]:
        if isinstance(value, list):
            # some providers send a list of roles; MANAGER wins
            upper = {str(v).upper() for v in value}
            if Role.MANAGER.value in upper:
                return Role.MANAGER
            return Role.CAREWORKER if Role.CAREWORKER.value in upper else None
        if isinstance(value, str):
            try:
                return Role(value.upper())
            except ValueError:
                return None
        return None
