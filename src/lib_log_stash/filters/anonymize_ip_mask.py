"""Mask the host part of IP addresses stored in event fields."""

from __future__ import annotations

import ipaddress
from typing import Any, Mapping

from ..domain.utf8 import utf8
from .base import Event, Filter


class AnonymizeIPMask(Filter):
    """Replace IP addresses by their network prefix.

    ``field_spec`` maps source fields to target fields (use the same name to
    anonymise in place). Values that are not IP addresses are ignored; lists
    keep only their anonymisable entries. IPv4 addresses, including
    IPv4-mapped and IPv4-compatible IPv6 ones, keep ``ipv4_mask`` bits;
    other IPv6 addresses keep ``ipv6_mask`` bits.

    Examples
    --------
    >>> AnonymizeIPMask({'ip': 'ip'})({'ip': '192.168.42.17'})
    {'ip': '192.0.0.0'}
    >>> AnonymizeIPMask({'ip': 'net'}, ipv6_mask=32)({'ip': ['2001:db8:85a3::8a2e:370:7334', 'junk']})['net']
    ['2001:db8::']
    """

    def __init__(self, field_spec: Mapping[Any, Any], *, ipv4_mask: int = 8, ipv6_mask: int = 80, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.fields = {utf8(source): utf8(target) for source, target in dict(field_spec).items()}
        self.ipv4_mask = int(ipv4_mask)
        if not 1 <= self.ipv4_mask <= 32:
            raise ValueError("ipv4_mask must be between 1 and 32 bits")
        self.ipv6_mask = int(ipv6_mask)
        if not 1 <= self.ipv6_mask <= 128:
            raise ValueError("ipv6_mask must be between 1 and 128 bits")

    def apply(self, event: Event) -> Event:
        for source, target in self.fields.items():
            value = self.anonymize(event.get(source))
            if value is not None:
                event[target] = value
        return event

    def anonymize(self, value: Any) -> Any:
        """Return the anonymised address (or list of addresses), ``None`` if none."""

        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return [masked for masked in (self._anonymize_value(item) for item in value) if masked is not None]
        return self._anonymize_value(value)

    def _anonymize_value(self, value: Any) -> str | None:
        try:
            address = ipaddress.ip_address(utf8(value).strip())
        except ValueError:
            return None
        if address.version == 4:
            return str(ipaddress.ip_network(f"{address}/{self.ipv4_mask}", strict=False).network_address)
        mapped = address.ipv4_mapped
        if mapped is not None:
            prefix = 96 + self.ipv4_mask
        elif int(address) >> 32 == 0 and int(address) > 1:
            # IPv4-compatible, but not "::" or "::1"
            prefix = 96 + self.ipv4_mask
        else:
            prefix = self.ipv6_mask
        return str(ipaddress.ip_network(f"{address}/{prefix}", strict=False).network_address)


__all__ = ["AnonymizeIPMask"]
