"""Wrapper around dnspython's async query functions.

Why a wrapper:
- Standardizes transport, port and timeout handling for the probe and the
  lookup adapter.
- Easy to replace in tests (monkeypatch `dns.asyncquery.udp` / `tcp`).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import dns.asyncquery
import dns.flags
import dns.message

from core.domain.transport import Transport

logger = logging.getLogger(__name__)

NameserverPicker = Callable[[], Optional[str]]


def _dial_target(nameserver: NameserverPicker) -> str:
    where = nameserver()
    if not where:
        raise ValueError("no resolver address available")
    return where


async def exchange(
    query: dns.message.Message,
    *,
    nameserver: NameserverPicker,
    transport: Transport,
    port: int,
    timeout: float | None,
) -> dns.message.Message:
    """Send `query` and return the response.

    `nameserver` is called once per connection attempt, so a UDP answer that
    comes back truncated is retried over TCP against a freshly drawn address.
    """

    where = _dial_target(nameserver)
    if transport.is_tcp:
        return await dns.asyncquery.tcp(query, where, timeout=timeout, port=port)

    response = await dns.asyncquery.udp(query, where, timeout=timeout, port=port)
    if response.flags & dns.flags.TC:
        where = _dial_target(nameserver)
        logger.debug("Truncated UDP answer, retrying over TCP via %s", where)
        response = await dns.asyncquery.tcp(query, where, timeout=timeout, port=port)
    return response
