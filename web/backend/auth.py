#!/usr/bin/env python3
"""
Identity and feature gating seams.

Authentication and tenant resolution belong to the surrounding platform.
The engine only depends on two small interfaces:

- SessionResolver: request -> SessionUser (or None when unauthenticated)
- FeatureGate: (tenant, feature) -> enabled?

The defaults trust headers set by the upstream auth gateway and the
tenant's `features` list.
"""

import hmac
import uuid
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Any

from fastapi import Request
from sqlalchemy.orm import Session

from database.models import Tenant

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
TENANT_ID_HEADER = "X-Tenant-Id"
ROLE_HEADER = "X-User-Role"

SCHEDULE_FEATURE = "matchEngineSchedule"
ADMIN_FEATURE = "matchEngineAdmin"
ATTRACTIVENESS_FEATURE = "matchEngineAttractive"

ADMIN_ROLES = {"admin", "system_admin", "educational_admin"}


@dataclass(frozen=True)
class SessionUser:
    user_id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    role: str = "student"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class SessionResolver(ABC):
    @abstractmethod
    def resolve(self, request: Request) -> Optional[SessionUser]:
        """Return the authenticated user, or None."""


class HeaderSessionResolver(SessionResolver):
    """Reads identity headers injected by the auth gateway."""

    def resolve(self, request: Request) -> Optional[SessionUser]:
        raw_user = request.headers.get(USER_ID_HEADER)
        if not raw_user:
            return None
        try:
            user_id = uuid.UUID(raw_user)
        except ValueError:
            logger.warning(f"Rejecting malformed {USER_ID_HEADER} header")
            return None

        tenant_id = None
        raw_tenant = request.headers.get(TENANT_ID_HEADER)
        if raw_tenant:
            try:
                tenant_id = uuid.UUID(raw_tenant)
            except ValueError:
                logger.warning(f"Ignoring malformed {TENANT_ID_HEADER} header")

        role = (request.headers.get(ROLE_HEADER) or "student").strip().lower()
        return SessionUser(user_id=user_id, tenant_id=tenant_id, role=role)


class FeatureGate(ABC):
    @abstractmethod
    def is_enabled(self, tenant_id: Optional[Any], feature: str) -> bool:
        """Whether the feature is on for the tenant."""


class TenantFeatureGate(FeatureGate):
    """
    Checks the tenant's `features` list.

    Requests without a tenant (the platform's own domain) are allowed.
    """

    def __init__(self, db: Session):
        self.db = db

    def is_enabled(self, tenant_id: Optional[Any], feature: str) -> bool:
        if tenant_id is None:
            return True
        tenant = self.db.get(Tenant, tenant_id)
        if tenant is None:
            return False
        return feature in (tenant.features or [])


def secrets_match(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; an unset expected secret never matches."""
    if not expected or provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()
