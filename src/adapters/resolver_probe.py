"""Resolver health check.

A candidate is usable iff it answers one forward lookup of a well-known name
within a fixed half-second budget. Failure causes are not distinguished.
"""

from __future__ import annotations

import asyncio
import logging

import dns.exception
import dns.message
import dns.rcode
import dns.rdatatype

from adapters.dns_client import exchange
from core.config import AppSettings
from core.domain.transport import Transport
from core.interfaces.resolver import ResolverProbe

logger = logging.getLogger(__name__)

PROBE_HOSTNAME = "google.com."
PROBE_TIMEOUT_SECONDS = 0.5


class DnsProbe(ResolverProbe):
    """Checks a candidate with a bounded `A` query sent straight to it."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        hostname: str = PROBE_HOSTNAME,
        timeout: float = PROBE_TIMEOUT_SECONDS,
    ) -> None:
        settings = settings or AppSettings()
        self._transport: Transport = settings.protocol
        self._port = settings.port
        self._hostname = hostname
        self._timeout = timeout

    async def check(self, address: str) -> bool:
        query = dns.message.make_query(self._hostname, dns.rdatatype.A)
        try:
            response = await asyncio.wait_for(
                exchange(
                    query,
                    nameserver=lambda: address,
                    transport=self._transport,
                    port=self._port,
                    timeout=self._timeout,
                ),
                timeout=self._timeout,
            )
            if response.rcode() != dns.rcode.NOERROR:
                logger.debug("Probe of %s answered %s", address, dns.rcode.to_text(response.rcode()))
                return False
            return response.resolve_chaining().answer is not None
        except (asyncio.TimeoutError, dns.exception.DNSException, OSError, EOFError, ValueError) as exc:
            logger.debug("Probe of %s failed: %s", address, str(exc) or type(exc).__name__)
            return False
