import os


# Read a setting from the environment; blank values fall back to the default.
def load_env(name, default=None, sanitize=lambda x: x, valid_values=None, convert=lambda x: x):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raw = default
    value = sanitize(raw)
    if valid_values is not None and value not in valid_values:
        raise ValueError(f"Invalid {name}: {value!r} (expected one of: {', '.join(valid_values)})")
    return convert(value)


def parse_server_list(value: str) -> dict[str, str]:
    # "lobby=10.0.0.5:25565,survival=10.0.0.6:25565" -> {name: address}
    servers: dict[str, str] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, address = item.partition("=")
        if not sep or not name.strip() or not address.strip():
            raise ValueError(f"Invalid server entry: {item}")
        servers[name.strip()] = address.strip()
    return servers


# Configuration
LOG_LEVEL = load_env(
    name='LOG_LEVEL',
    default='WARNING',
    valid_values=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
    sanitize=lambda x: x.upper()
)
HTTP_TIMEOUT_SECONDS = load_env(
    name='HTTP_TIMEOUT_SECONDS',
    default='30',
    convert=lambda x: float(x)
)
HOSTREDIRECT_URL = load_env(
    name='HOSTREDIRECT_URL',
    default='',
    sanitize=lambda x: x.strip().rstrip('/') if x else x
)
HOSTREDIRECT_CLIENTID = load_env(
    name='HOSTREDIRECT_CLIENTID',
    default=''
)
HOSTREDIRECT_CLIENTSECRET = load_env(
    name='HOSTREDIRECT_CLIENTSECRET',
    default=''
)
HOSTREDIRECT_DOMAIN = load_env(
    name='HOSTREDIRECT_DOMAIN',
    default='',
    sanitize=lambda x: x.strip().strip('.').lower() if x else x
)
HOSTREDIRECT_MODE = load_env(
    name='HOSTREDIRECT_MODE',
    default='auto',
    valid_values=['auto', 'dynamic', 'suffix', 'first_label'],
    sanitize=lambda x: x.strip().lower()
)
HOSTREDIRECT_FETCH_CONCURRENCY = load_env(
    name='HOSTREDIRECT_FETCH_CONCURRENCY',
    default='8',
    convert=lambda x: max(1, int(x))
)
HOSTREDIRECT_TOKEN_EXPIRY_MARGIN_SECONDS = load_env(
    name='HOSTREDIRECT_TOKEN_EXPIRY_MARGIN_SECONDS',
    default='0',
    convert=lambda x: max(0.0, float(x))
)
HOSTREDIRECT_RESOLUTION_TIMEOUT_SECONDS = load_env(
    name='HOSTREDIRECT_RESOLUTION_TIMEOUT_SECONDS',
    default='0',  # 0 disables the per-resolution timeout
    convert=lambda x: float(x) if float(x) > 0 else None
)
HOSTREDIRECT_SERVERS = load_env(
    name='HOSTREDIRECT_SERVERS',
    default='',
    sanitize=lambda x: x.strip() if x else x,
    convert=lambda value: parse_server_list(value) if value else {}
)
