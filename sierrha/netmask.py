# File: sierrha/netmask.py
"""sierrha.netmask: Сравнение адреса клиента с маской адресов разработчиков."""

from __future__ import annotations

import ipaddress
from typing import List, Sequence

from sierrha.logger import logger

__all__: Sequence[str] = ("split_mask", "match_ip")


def split_mask(mask: str) -> List[str]:
    """Разбивает ``"127.0.0.1, 10.0.*.*"`` на непустые элементы."""
    return [part.strip() for part in mask.split(",") if part.strip()]


def _match_wildcard(address: ipaddress.IPv4Address, pattern: str) -> bool:
    octets = pattern.split(".")
    if len(octets) != 4:
        return False
    for actual, expected in zip(str(address).split("."), octets):
        if expected != "*" and expected != actual:
            return False
    return True


def _match_one(address: ipaddress.IPv4Address | ipaddress.IPv6Address, pattern: str) -> bool:
    if pattern == "*":
        return True
    if "*" in pattern:
        return isinstance(address, ipaddress.IPv4Address) and _match_wildcard(address, pattern)
    try:
        network = ipaddress.ip_network(pattern, strict=False)
    except ValueError:
        logger.warning("Ignoring invalid entry %r in developer IP mask", pattern)
        return False
    return network.version == address.version and address in network


def match_ip(remote_addr: str, mask: str) -> bool:
    """True, если *remote_addr* подходит под один из элементов *mask*.

    Поддерживаются ``*``, точные адреса, шаблоны ``192.168.*.*`` и CIDR.
    """
    if not remote_addr:
        return False
    try:
        address = ipaddress.ip_address(remote_addr.strip())
    except ValueError:
        logger.debug("Remote address %r is not an IP address", remote_addr)
        return False
    return any(_match_one(address, pattern) for pattern in split_mask(mask))
