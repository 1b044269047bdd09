import logging
import os
import time
from typing import Any, Optional

logger = logging.getLogger(__name__)

def get_env_var(var_name: str, default: Any = None) -> Any:
    """
    Obtém uma variável de ambiente, com valor padrão opcional.

    Args:
        var_name: Nome da variável de ambiente
        default: Valor padrão caso a variável não exista

    Returns:
        Valor da variável de ambiente ou o valor padrão
    """
    return os.environ.get(var_name, default)

def get_env_str(var_name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Obtém uma variável de ambiente como string.

    Valores vazios (ou apenas com espaços) são tratados como ausentes.
    """
    value = get_env_var(var_name)
    if value is None or not value.strip():
        return default
    return value.strip()

def get_env_int(var_name: str, default: int) -> int:
    """
    Obtém uma variável de ambiente como inteiro.

    Args:
        var_name: Nome da variável de ambiente
        default: Valor padrão caso a variável não exista ou seja inválida

    Returns:
        int: Valor convertido
    """
    value = get_env_str(var_name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Valor inválido para {var_name}: {value!r}. Usando padrão {default}")
        return default

def get_env_float(var_name: str, default: float) -> float:
    """
    Obtém uma variável de ambiente como float.

    Args:
        var_name: Nome da variável de ambiente
        default: Valor padrão caso a variável não exista ou seja inválida

    Returns:
        float: Valor convertido
    """
    value = get_env_str(var_name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Valor inválido para {var_name}: {value!r}. Usando padrão {default}")
        return default

def get_env_bool(var_name: str, default: bool = False) -> bool:
    value = get_env_str(var_name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")

def get_debug_mode() -> bool:
    """
    Verifica se o modo de depuração está ativado.

    Returns:
        bool: True se o modo de depuração estiver ativado, False caso contrário
    """
    return get_env_bool("DEBUG", False)

def current_timestamp() -> int:
    """
    Obtém o timestamp atual em milissegundos.

    Returns:
        int: Timestamp atual em milissegundos
    """
    return int(time.time() * 1000)
