"""roperty — domain-specific property resolution.

A property key holds a default value plus overrides scoped to domain
patterns. Callers supply a resolver for the current domain values and
get back the most specific matching value.
"""

from __future__ import annotations

__version__ = "0.3.0"

from roperty.domain.errors import (
    MalformedDomainKey,
    PersistenceUnavailable,
    RopertyError,
    TypeMismatch,
)
from roperty.domain.record import PropertyRecord
from roperty.domain.resolver import DomainResolver, MappingResolver
from roperty.domain.vector import DomainVector
from roperty.services.registry import StoreRegistry
from roperty.services.store import PropertyStore

__all__ = [
    "DomainResolver",
    "DomainVector",
    "MalformedDomainKey",
    "MappingResolver",
    "PersistenceUnavailable",
    "PropertyRecord",
    "PropertyStore",
    "RopertyError",
    "StoreRegistry",
    "TypeMismatch",
    "__version__",
]
