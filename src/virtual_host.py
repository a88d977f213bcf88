FORGE_SEPARATOR = "\0"
TCPSHIELD_SEPARATOR = "///"


def clear_virtual_host(host: str | None) -> str:
    """
    Strip the decorations a client or upstream proxy adds to the virtual host
    (Forge marker, TCPShield payload, port, trailing dot) and lower-case it.
    Returns an empty string when nothing usable is left.
    """
    if not host:
        return ""

    host = host.split(FORGE_SEPARATOR, 1)[0]
    host = host.split(TCPSHIELD_SEPARATOR, 1)[0]
    host = host.strip()

    # Bracketed IPv6 literal, with or without a port.
    if host.startswith("["):
        end = host.find("]")
        if end != -1:
            return host[1:end].lower()

    # A single colon is a port; more than one is a bare IPv6 literal.
    if host.count(":") == 1:
        host = host.split(":", 1)[0]

    return host.rstrip(".").lower()
