"""Reverse (PTR) lookups through the resolver pool.

Two paths:
- explicit resolvers (validated pool or single fallback): the PTR query is
  sent by `adapters.dns_client`, drawing a resolver per connection attempt;
- nothing configured: dnspython's resolver built from the system configuration.
"""

from __future__ import annotations

import asyncio
import logging

import dns.asyncresolver
import dns.exception
import dns.message
import dns.rcode
import dns.rdatatype
import dns.reversename

from adapters.dns_client import exchange
from core.config import AppSettings
from core.domain.errors import LookupFailedError
from core.interfaces.resolver import ReverseLookup
from core.services.resolver_pool import ResolverPool

logger = logging.getLogger(__name__)

_FAILURES = (asyncio.TimeoutError, dns.exception.DNSException, OSError, EOFError, ValueError)


class PtrLookup(ReverseLookup):
    """Resolves an IP address to every name its PTR records point at."""

    def __init__(self, *, pool: ResolverPool, settings: AppSettings | None = None) -> None:
        self._pool = pool
        self._settings = settings or AppSettings()
        self._system: dns.asyncresolver.Resolver | None = None
        if pool.uses_system_resolver:
            # Reads /etc/resolv.conf (or the platform equivalent) once.
            self._system = dns.asyncresolver.Resolver()

    async def lookup(self, ip: str) -> list[str]:
        target = ip.strip()
        try:
            if self._system is not None:
                names = await self._lookup_system(target)
            else:
                names = await asyncio.wait_for(
                    self._lookup_pool(target),
                    timeout=self._settings.lookup_timeout,
                )
        except _FAILURES as exc:
            raise LookupFailedError(ip, str(exc) or type(exc).__name__) from exc

        if not names:
            raise LookupFailedError(ip, "no PTR records")
        return names

    async def _lookup_system(self, target: str) -> list[str]:
        assert self._system is not None
        answer = await self._system.resolve_address(
            target,
            tcp=self._settings.protocol.is_tcp,
            lifetime=self._settings.lookup_timeout,
        )
        return [rdata.target.to_text() for rdata in answer]

    async def _lookup_pool(self, target: str) -> list[str]:
        qname = dns.reversename.from_address(target)
        query = dns.message.make_query(qname, dns.rdatatype.PTR)
        response = await exchange(
            query,
            nameserver=self._pool.select,
            transport=self._settings.protocol,
            port=self._settings.port,
            timeout=self._settings.lookup_timeout,
        )

        rcode = response.rcode()
        if rcode != dns.rcode.NOERROR:
            raise LookupFailedError(target, dns.rcode.to_text(rcode))

        # Follows CNAMEs inside the answer (RFC 2317 classless delegation).
        chain = response.resolve_chaining()
        if chain.answer is None:
            return []
        return [rdata.target.to_text() for rdata in chain.answer]
