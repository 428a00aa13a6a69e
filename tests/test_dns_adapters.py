from __future__ import annotations

import asyncio

import dns.asyncquery
import dns.asyncresolver
import dns.exception
import dns.flags
import dns.message
import dns.name
import dns.rcode
import dns.rdata
import dns.rdataclass
import dns.rdatatype
import pytest

from adapters.dns_client import exchange
from adapters.ptr_lookup import PtrLookup
from adapters.resolver_probe import DnsProbe
from core.config import AppSettings
from core.domain.errors import LookupFailedError
from core.domain.transport import Transport
from core.services.resolver_pool import ResolverPool


def _add_answer(response, name, rdtype: str, *values: str) -> None:
    rrset = response.find_rrset(
        response.answer, name, dns.rdataclass.IN, dns.rdatatype.from_text(rdtype), create=True
    )
    rrset.update_ttl(300)
    for value in values:
        rrset.add(dns.rdata.from_text(dns.rdataclass.IN, rdtype, value))


def _response(query, rdtype: str = "PTR", *values: str, rcode: int = dns.rcode.NOERROR, truncated: bool = False):
    response = dns.message.make_response(query)
    response.set_rcode(rcode)
    if values:
        _add_answer(response, query.question[0].name, rdtype, *values)
    if truncated:
        response.flags |= dns.flags.TC
    return response


class Wire:
    """Stands in for dns.asyncquery.udp/tcp and records (transport, where, port)."""

    def __init__(self, responder) -> None:
        self.responder = responder
        self.sent: list[tuple[str, str, int]] = []

    def install(self, monkeypatch) -> "Wire":
        async def udp(query, where, timeout=None, port=53, **kwargs):
            self.sent.append(("udp", where, port))
            return self._over_the_wire(self.responder("udp", query, where))

        async def tcp(query, where, timeout=None, port=53, **kwargs):
            self.sent.append(("tcp", where, port))
            return self._over_the_wire(self.responder("tcp", query, where))

        monkeypatch.setattr(dns.asyncquery, "udp", udp)
        monkeypatch.setattr(dns.asyncquery, "tcp", tcp)
        return self

    @staticmethod
    def _over_the_wire(response):
        # parsed back like a real reply, so section indexes and chaining work
        return dns.message.from_wire(response.to_wire())


def test_ptr_lookup_returns_absolute_names(monkeypatch):
    wire = Wire(lambda proto, q, where: _response(q, "PTR", "dns.google.")).install(monkeypatch)
    lookup = PtrLookup(pool=ResolverPool(fallback="9.9.9.9"), settings=AppSettings(port=5353))

    names = asyncio.run(lookup.lookup("8.8.8.8"))

    assert names == ["dns.google."]
    assert wire.sent == [("udp", "9.9.9.9", 5353)]


def test_ptr_lookup_over_tcp(monkeypatch):
    wire = Wire(lambda proto, q, where: _response(q, "PTR", "dns.google.")).install(monkeypatch)
    settings = AppSettings(protocol=Transport.TCP)
    lookup = PtrLookup(pool=ResolverPool(["1.1.1.1"]), settings=settings)

    asyncio.run(lookup.lookup("8.8.8.8"))

    assert wire.sent == [("tcp", "1.1.1.1", 53)]


def test_truncated_udp_answer_is_retried_over_tcp_with_a_fresh_draw(monkeypatch):
    def responder(proto, q, where):
        if proto == "udp":
            return _response(q, truncated=True)
        return _response(q, "PTR", "a.example.", "b.example.")

    wire = Wire(responder).install(monkeypatch)
    draws = iter(["1.1.1.1", "9.9.9.9"])

    class ScriptedPool(ResolverPool):
        def select(self):
            return next(draws)

    lookup = PtrLookup(pool=ScriptedPool(["1.1.1.1", "9.9.9.9"]), settings=AppSettings())

    names = asyncio.run(lookup.lookup("192.0.2.1"))

    assert sorted(names) == ["a.example.", "b.example."]
    assert wire.sent == [("udp", "1.1.1.1", 53), ("tcp", "9.9.9.9", 53)]


def test_ptr_lookup_follows_classless_delegation_cname(monkeypatch):
    def responder(proto, q, where):
        response = dns.message.make_response(q)
        qname = q.question[0].name
        target = dns.name.from_text("10.0-25.2.0.192.in-addr.arpa.")
        _add_answer(response, qname, "CNAME", target.to_text())
        _add_answer(response, target, "PTR", "host.example.")
        return response

    Wire(responder).install(monkeypatch)
    lookup = PtrLookup(pool=ResolverPool(["1.1.1.1"]), settings=AppSettings())

    assert asyncio.run(lookup.lookup("192.0.2.10")) == ["host.example."]


@pytest.mark.parametrize(
    "responder",
    [
        lambda proto, q, where: _response(q, rcode=dns.rcode.NXDOMAIN),
        lambda proto, q, where: _response(q, rcode=dns.rcode.SERVFAIL),
        lambda proto, q, where: _response(q),
    ],
    ids=["nxdomain", "servfail", "empty-answer"],
)
def test_ptr_lookup_failures_raise_lookup_failed(monkeypatch, responder):
    Wire(responder).install(monkeypatch)
    lookup = PtrLookup(pool=ResolverPool(["1.1.1.1"]), settings=AppSettings())

    with pytest.raises(LookupFailedError):
        asyncio.run(lookup.lookup("0.0.0.0"))


def test_transport_errors_become_lookup_failed(monkeypatch):
    def responder(proto, q, where):
        raise dns.exception.Timeout()

    Wire(responder).install(monkeypatch)
    lookup = PtrLookup(pool=ResolverPool(["1.1.1.1"]), settings=AppSettings())

    with pytest.raises(LookupFailedError):
        asyncio.run(lookup.lookup("8.8.8.8"))


def test_malformed_target_fails_without_touching_the_network(monkeypatch):
    wire = Wire(lambda proto, q, where: _response(q, "PTR", "x.example.")).install(monkeypatch)
    lookup = PtrLookup(pool=ResolverPool(["1.1.1.1"]), settings=AppSettings())

    with pytest.raises(LookupFailedError) as excinfo:
        asyncio.run(lookup.lookup("not-an-ip"))

    assert excinfo.value.target == "not-an-ip"
    assert wire.sent == []


def test_system_resolver_is_used_when_nothing_is_configured(monkeypatch):
    calls: list[dict] = []

    class FakeSystemResolver:
        async def resolve_address(self, ip, **kwargs):
            calls.append({"ip": ip, **kwargs})
            return [dns.rdata.from_text("IN", "PTR", "dns.google.")]

    monkeypatch.setattr(dns.asyncresolver, "Resolver", FakeSystemResolver)
    lookup = PtrLookup(pool=ResolverPool(), settings=AppSettings(lookup_timeout=2.0))

    assert asyncio.run(lookup.lookup(" 8.8.8.8 ")) == ["dns.google."]
    assert calls == [{"ip": "8.8.8.8", "tcp": False, "lifetime": 2.0}]


def test_exchange_requires_an_address():
    query = dns.message.make_query("example.com.", "A")

    with pytest.raises(ValueError):
        asyncio.run(exchange(query, nameserver=lambda: None, transport=Transport.UDP, port=53, timeout=1.0))


def test_probe_accepts_a_resolver_that_answers(monkeypatch):
    wire = Wire(lambda proto, q, where: _response(q, "A", "142.250.74.14")).install(monkeypatch)

    assert asyncio.run(DnsProbe(AppSettings(port=5300)).check("1.1.1.1")) is True
    assert wire.sent == [("udp", "1.1.1.1", 5300)]


@pytest.mark.parametrize(
    "responder",
    [
        lambda proto, q, where: _response(q, rcode=dns.rcode.REFUSED),
        lambda proto, q, where: _response(q),
    ],
    ids=["refused", "no-answer"],
)
def test_probe_rejects_bad_answers(monkeypatch, responder):
    Wire(responder).install(monkeypatch)

    assert asyncio.run(DnsProbe(AppSettings()).check("192.0.2.1")) is False


@pytest.mark.parametrize("error", [dns.exception.Timeout(), ConnectionRefusedError(), ValueError("bad address")])
def test_probe_treats_errors_as_unusable(monkeypatch, error):
    def responder(proto, q, where):
        raise error

    Wire(responder).install(monkeypatch)

    assert asyncio.run(DnsProbe(AppSettings()).check("192.0.2.1")) is False


def test_probe_is_bounded_by_its_timeout(monkeypatch):
    async def slow_udp(query, where, timeout=None, port=53, **kwargs):
        await asyncio.sleep(5)

    monkeypatch.setattr(dns.asyncquery, "udp", slow_udp)
    probe = DnsProbe(AppSettings(), timeout=0.05)

    assert asyncio.run(probe.check("192.0.2.1")) is False
