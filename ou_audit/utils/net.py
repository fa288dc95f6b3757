from __future__ import annotations

import ipaddress
import logging

import dns.exception
import dns.resolver

log = logging.getLogger(__name__)


def looks_like_ip(s: str) -> bool:
    try:
        ipaddress.ip_address((s or "").strip())
        return True
    except ValueError:
        return False


def _resolver(dns_server: str, timeout_s: float) -> dns.resolver.Resolver:
    if dns_server:
        r = dns.resolver.Resolver(configure=False)
        r.nameservers = [dns_server]
    else:
        r = dns.resolver.Resolver()
    r.timeout = float(timeout_s)
    r.lifetime = float(timeout_s)
    return r


def discover_domain_controllers(domain: str, dns_server: str = "", timeout_s: float = 3.0) -> list[str]:
    """Find DC host names via the _ldap._tcp.dc._msdcs.<domain> SRV record.

    Ordered by SRV priority, then weight (higher first). Returns [] if nothing
    could be resolved.
    """
    domain = (domain or "").strip().strip(".")
    if not domain:
        return []

    qname = f"_ldap._tcp.dc._msdcs.{domain}"
    try:
        answers = _resolver(dns_server, timeout_s).resolve(qname, "SRV")
    except dns.resolver.NXDOMAIN:
        log.warning("SRV-запись %s не найдена", qname)
        return []
    except dns.resolver.NoAnswer:
        log.warning("DNS не вернул SRV-записи для %s", qname)
        return []
    except dns.resolver.NoNameservers:
        log.warning("Все DNS-серверы вернули ошибку для %s", qname)
        return []
    except dns.exception.Timeout:
        log.warning("Таймаут DNS-запроса %s", qname)
        return []

    records = sorted(answers, key=lambda rr: (rr.priority, -rr.weight))
    return [str(rr.target).rstrip(".") for rr in records]
