from __future__ import annotations


def escape_ldap_filter_value(value: str, keep_wildcards: bool = False) -> str:
    """RFC 4515 escaping for LDAP filter values.

    With keep_wildcards=True a literal '*' stays a substring wildcard.
    """
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("*" if keep_wildcards else "\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def build_ou_filter(name_pattern: str) -> str:
    """LDAP filter for OUs whose name matches a '*' wildcard pattern."""
    p = (name_pattern or "").strip() or "*"
    # "**" is not a valid substring filter
    while "**" in p:
        p = p.replace("**", "*")
    return f"(&(objectClass=organizationalUnit)(name={escape_ldap_filter_value(p, keep_wildcards=True)}))"


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().strip(".")
    if not domain or "." not in domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def guess_netbios(domain_suffix: str) -> str:
    d = (domain_suffix or "").strip()
    if not d:
        return ""
    return d.split(".")[0].upper()


def ntlm_principal(username: str, domain: str) -> str:
    """Return DOMAIN\\user as required by ldap3 NTLM bind."""
    u = (username or "").strip()
    if not u:
        return ""

    if "\\" in u:
        return u

    if "@" in u:
        # UPN
        usr, dom = u.split("@", 1)
        return f"{dom.strip()}\\{usr.strip()}"

    d = (domain or "").strip().strip(".")
    return f"{d}\\{u}" if d else u
