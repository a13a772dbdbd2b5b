"""Legacy domain descriptor codec.

The relational store keys each override by a single descriptor string
such as ``PARTNER_103_de_AT``. The prefix names the most specific axis
the override targets; the payload carries the axis values, with the
country always taken from the locale's suffix.

Decoded vectors are laid out over the legacy axis order::

    container, country, locale, orientation, partner

The container slot is not part of the descriptor; callers pass it in.

Pure functions, no infrastructure dependencies.
"""

from __future__ import annotations

from roperty.domain.errors import MalformedDomainKey
from roperty.domain.vector import WILDCARD, DomainVector, Slot

LEGACY_AXES: tuple[str, ...] = ("container", "country", "locale", "orientation", "partner")

COUNTRY = "COUNTRY"
LOCALE = "LOCALE"
ORIENTATION = "ORIENTATION"
PARTNER = "PARTNER"

# Payload token count per prefix.
_ARITY: dict[str, int] = {
    COUNTRY: 1,
    LOCALE: 2,
    ORIENTATION: 3,
    PARTNER: 3,
}


def prefix(descriptor: str) -> str:
    """Axis-kind prefix of a descriptor.

    Examples:
        >>> prefix("LOCALE_de_DE")
        'LOCALE'
    """
    return descriptor.partition("_")[0]


def strip_prefix(descriptor: str) -> str:
    """Payload of a descriptor, without its prefix.

    Examples:
        >>> strip_prefix("COUNTRY_DE")
        'DE'
        >>> strip_prefix("LOCALE_de_DE")
        'de_DE'
    """
    return descriptor.partition("_")[2]


def suffix(descriptor: str) -> str:
    """Last underscore-separated token of a descriptor.

    Examples:
        >>> suffix("LOCALE_de_DE")
        'DE'
    """
    return descriptor.rpartition("_")[2]


def _payload_tokens(descriptor: str, kind: str) -> list[str]:
    payload = strip_prefix(descriptor)
    tokens = payload.split("_") if payload else []
    expected = _ARITY[kind]
    if len(tokens) != expected:
        raise MalformedDomainKey(
            descriptor,
            f"{kind} expects {expected} payload token(s), got {len(tokens)}",
        )
    if any(not token for token in tokens):
        raise MalformedDomainKey(descriptor, "empty payload token")
    return tokens


def decode_domain_key(descriptor: str, container: str) -> DomainVector:
    """Decode a legacy descriptor into a domain vector.

    Orientation is a wildcard for partner descriptors: they skip that
    axis but still address the partner axis after it. Axes after the
    last addressed one are unaddressed.

    Examples:
        >>> decode_domain_key("LOCALE_de_DE", "shop").to_values()
        ['shop', 'DE', 'de_DE']
        >>> decode_domain_key("PARTNER_103_de_AT", "shop").to_values()
        ['shop', 'AT', 'de_AT', '*', '103']

    Raises:
        MalformedDomainKey: If the prefix is unknown or the payload has
            the wrong number of tokens.
    """
    if not container:
        raise MalformedDomainKey(descriptor, "container name is required")

    kind = prefix(descriptor)
    if kind not in _ARITY:
        raise MalformedDomainKey(descriptor, f"unknown prefix {kind!r}")

    tokens = _payload_tokens(descriptor, kind)
    slots = [Slot.constrained(container)]

    if kind == COUNTRY:
        slots.append(Slot.constrained(tokens[0]))
        return DomainVector(slots)

    # Remaining kinds end in a <lang>_<cc> locale payload.
    locale = "_".join(tokens[-2:])
    country = tokens[-1]
    slots.append(Slot.constrained(country))
    slots.append(Slot.constrained(locale))

    if kind == ORIENTATION:
        slots.append(Slot.constrained(tokens[0]))
    elif kind == PARTNER:
        slots.append(WILDCARD)
        slots.append(Slot.constrained(tokens[0]))
    return DomainVector(slots)


def encode_domain_key(vector: DomainVector, container: str) -> str:
    """Encode a vector back into its legacy descriptor.

    Only the four shapes produced by :func:`decode_domain_key` have a
    spelling; the result always decodes back to *vector*.

    Raises:
        MalformedDomainKey: If the vector has no legacy spelling or is
            scoped to a different container.
    """
    rendered = str(vector)
    first = vector.slot(0)
    if not first.is_constrained or first.value != container:
        raise MalformedDomainKey(rendered, f"container slot must be {container!r}")

    values = vector.to_values()
    if vector.length == 2:
        descriptor = f"{COUNTRY}_{values[1]}"
    elif vector.length == 3:
        descriptor = f"{LOCALE}_{values[2]}"
    elif vector.length == 4:
        descriptor = f"{ORIENTATION}_{values[3]}_{values[2]}"
    elif vector.length == 5:
        descriptor = f"{PARTNER}_{values[4]}_{values[2]}"
    else:
        raise MalformedDomainKey(rendered, "no descriptor for this many axes")

    try:
        decoded = decode_domain_key(descriptor, container)
    except MalformedDomainKey as exc:
        raise MalformedDomainKey(rendered, exc.reason) from exc
    if decoded != vector:
        raise MalformedDomainKey(rendered, "vector does not follow the legacy layout")
    return descriptor
