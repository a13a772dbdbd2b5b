"""BaseService — foundation for the CLI-facing property services.

Every service receives a :class:`PropertyStore` at construction time
and reports outcomes as :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roperty.domain.errors import (
    MalformedDomainKey,
    PersistenceUnavailable,
    RopertyError,
    TypeMismatch,
)
from roperty.services.result import ServiceResult

if TYPE_CHECKING:
    from roperty.services.store import PropertyStore

logger = logging.getLogger(__name__)

ERROR_CODES: dict[type[RopertyError], str] = {
    MalformedDomainKey: "MALFORMED_DOMAIN_KEY",
    TypeMismatch: "TYPE_MISMATCH",
    PersistenceUnavailable: "PERSISTENCE_UNAVAILABLE",
}


class BaseService:
    """Base for service-layer classes operating on one store.

    Usage::

        class PropertyService(BaseService):
            def get_value(self, key: str, ...) -> ServiceResult:
                value = self._store.get(key, resolver)
                ...
    """

    def __init__(self, store: PropertyStore) -> None:
        self._store = store

    @staticmethod
    def _error_result(op: str, exc: RopertyError) -> ServiceResult:
        """Translate a roperty error into a failed ServiceResult."""
        code = "ERROR"
        for error_type, error_code in ERROR_CODES.items():
            if isinstance(exc, error_type):
                code = error_code
                break
        logger.debug("%s failed: %s", op, exc)
        return ServiceResult.failure(op, code, str(exc))
