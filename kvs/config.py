"""
Configurações para o nó KVS.
"""
from common.utils import get_env_int, get_env_str, get_env_float


# Informações do nó
NODE_ID = get_env_str("NODE_ID", "kvs-1")

# Configurações do servidor
HOST = get_env_str("HOST", "0.0.0.0")
PORT = get_env_int("PORT", 8090)

# Encaminhamento (host:port do nó upstream; ausente = modo standalone)
FORWARDING_ADDRESS = get_env_str("FORWARDING_ADDRESS")
FORWARD_TIMEOUT = get_env_float("FORWARD_TIMEOUT", 30.0)  # segundos

# Validação
MAX_KEY_LENGTH = get_env_int("MAX_KEY_LENGTH", 50)  # em caracteres
