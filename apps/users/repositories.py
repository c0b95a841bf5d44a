"""Read access to users for the billing core.

Handlers receive a ``UserSnapshot`` instead of a model instance, so no
lazy relation is ever followed from inside a payment transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.exceptions import NotFoundError
from shared.infrastructure.db import lock_queryset_if_possible

from .models import CustomUser


@dataclass(frozen=True)
class UserSnapshot:
    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""

    @property
    def gateway_first_name(self) -> str:
        return self.first_name or self.email.split("@")[0]


class DjangoUserRepository:
    def get(self, user_id, lock: bool = False) -> UserSnapshot:
        """
        ``lock=True`` inside a unit of work holds the user row until commit,
        which serializes subscription changes for that user.
        """
        queryset = CustomUser.objects.filter(pk=user_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        user = queryset.first()
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return UserSnapshot(
            id=user.pk,
            email=user.email,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            phone=user.phone or "",
        )
