# Management API paths and keys.
TOKEN_PATH = "/oauth2/token"
SERVERS_PATH = "/api/servers"
SERVER_DATA_PATH = "/api/servers/{server_id}/data"
DOMAIN_DATA_KEY = "gate.hostredirect.domain"

# Resolver selection values for HOSTREDIRECT_MODE.
MODE_AUTO = "auto"
MODE_DYNAMIC = "dynamic"
MODE_SUFFIX = "suffix"
MODE_FIRST_LABEL = "first_label"

# Disconnect notices shown to the player.
DISCONNECT_NO_MAPPING = "No server mapping for host: {key}"
DISCONNECT_UNREGISTERED = "Server for this address is not available: {key}"
DISCONNECT_NO_SPLIT = "No server name in host: {key}"
DISCONNECT_UNKNOWN_SERVER = "Unknown server: {key}"
DISCONNECT_RESOLVER_ERROR = "Unable to route connection for host: {key}"
