"""
File: common/logging.py
Sistema de logging unificado para os nós KVS.
Níveis de debug configuráveis e saída estruturada em JSON.
"""
import os
import sys
import json
import time
import logging
import datetime
from typing import Dict, Any, List, Optional
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from collections import deque

from common.utils import get_env_str, get_debug_mode

# Configuração com suporte a múltiplos níveis de debug
DEBUG = get_debug_mode()
DEBUG_LEVEL = get_env_str("DEBUG_LEVEL", "basic").lower()  # Níveis: basic, advanced, trace
LOG_DIR = get_env_str("LOG_DIR")  # Sem diretório: apenas console

# Níveis de log
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "IMPORTANT": 25,  # Nível customizado entre INFO e WARNING
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL
}

# Registra o nível IMPORTANT
logging.addLevelName(LEVELS["IMPORTANT"], "IMPORTANT")


def _important(self, message, *args, **kwargs):
    if self.isEnabledFor(LEVELS["IMPORTANT"]):
        self._log(LEVELS["IMPORTANT"], message, args, **kwargs)


logging.Logger.important = _important

# Buffer circular para logs em memória
log_buffer: Dict[str, deque] = {}  # component -> deque(log entries)
log_buffer_size = 1000  # Tamanho máximo do buffer por componente

# Timestamp de início para cálculo de uptime
start_time = time.time()

def setup_logging(component_name: str, debug: Optional[bool] = None, debug_level: Optional[str] = None,
                  log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configura o sistema de logging para um componente.

    Args:
        component_name: Nome do componente
        debug: Se True, habilita logs de DEBUG (sobrescreve variável de ambiente)
        debug_level: Nível de debug (basic, advanced, trace) (sobrescreve variável de ambiente)
        log_dir: Diretório para salvar logs (sobrescreve variável de ambiente)

    Returns:
        logging.Logger: Logger do componente
    """
    global DEBUG, DEBUG_LEVEL

    # Usa valores de parâmetros ou fallback para variáveis de ambiente
    debug_enabled = debug if debug is not None else DEBUG
    debug_level_value = (debug_level or DEBUG_LEVEL).lower()
    logs_directory = log_dir if log_dir is not None else LOG_DIR

    DEBUG = debug_enabled
    DEBUG_LEVEL = debug_level_value
    level = logging.DEBUG if debug_enabled else logging.INFO

    # Configura logger raiz
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove handlers existentes
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    detailed = debug_enabled and debug_level_value in ("advanced", "trace")

    # Adiciona handler para console
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(JsonFormatter(component_name, detailed=detailed))
    root_logger.addHandler(console_handler)

    if logs_directory:
        os.makedirs(logs_directory, exist_ok=True)

        # Arquivo completo (todos os logs), sempre detalhado
        all_log_file = os.path.join(logs_directory, f"{component_name}_all.log")
        file_handler = RotatingFileHandler(
            all_log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonFormatter(component_name, detailed=True))
        root_logger.addHandler(file_handler)

        # Arquivo de logs importantes (IMPORTANT e acima)
        important_log_file = os.path.join(logs_directory, f"{component_name}_important.log")
        important_handler = TimedRotatingFileHandler(
            important_log_file,
            when="midnight",
            interval=1,
            backupCount=7
        )
        important_handler.setLevel(LEVELS["IMPORTANT"])
        important_handler.setFormatter(JsonFormatter(component_name, detailed=True))
        root_logger.addHandler(important_handler)

    # Inicializa buffer para este componente
    log_buffer[component_name] = deque(maxlen=log_buffer_size)
    buffer_handler = BufferHandler(component_name)
    buffer_handler.setLevel(level)
    root_logger.addHandler(buffer_handler)

    logger = logging.getLogger(component_name)
    logger.info(f"Logging inicializado para {component_name}. Debug: {debug_enabled}, Nível: {debug_level_value}")

    if detailed:
        logger.debug(f"Configuração detalhada de logging: dir={logs_directory}, buffer_size={log_buffer_size}")

    return logger

def add_to_buffer(component: str, record: logging.LogRecord):
    """
    Adiciona um registro de log ao buffer circular.

    Args:
        component: Nome do componente
        record: Registro de log
    """
    if component not in log_buffer:
        log_buffer[component] = deque(maxlen=log_buffer_size)

    log_entry = {
        "timestamp": int(record.created * 1000),  # milissegundos
        "level": record.levelname,
        "component": component,
        "logger": record.name,
        "message": record.getMessage(),
        "module": record.module,
        "lineno": record.lineno,
        "function": record.funcName,
        "context": getattr(record, "context", None)
    }

    log_buffer[component].append(log_entry)

def get_log_entries(component: str, level: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
    """
    Obtém registros de log do buffer, mais recentes primeiro.

    Args:
        component: Nome do componente
        level: Filtro opcional por nível de log
        limit: Número máximo de registros a retornar

    Returns:
        List[Dict[str, Any]]: Lista de registros de log
    """
    if component not in log_buffer:
        return []

    entries = list(log_buffer[component])

    if level:
        entries = [e for e in entries if e["level"] == level.upper()]

    entries.reverse()

    return entries[:limit]

def get_uptime() -> float:
    """
    Retorna o tempo de execução em segundos.
    """
    return time.time() - start_time

def get_debug_state() -> Dict[str, Any]:
    return {"enabled": DEBUG, "level": DEBUG_LEVEL}


class BufferHandler(logging.Handler):
    """
    Handler que copia os registros para o buffer circular do componente.
    """

    def __init__(self, component: str):
        super().__init__()
        self.component = component

    def emit(self, record: logging.LogRecord) -> None:
        add_to_buffer(self.component, record)


class JsonFormatter(logging.Formatter):
    """
    Formatador que converte logs para formato JSON.
    """

    def __init__(self, component: str, detailed: bool = False):
        """
        Inicializa o formatador.

        Args:
            component: Nome do componente
            detailed: Se True, inclui campos adicionais no log
        """
        super().__init__()
        self.component = component
        self.detailed = detailed

    def format(self, record: logging.LogRecord) -> str:
        """
        Formata um registro de log como JSON.

        Args:
            record: Registro de log

        Returns:
            str: JSON formatado
        """
        log_data = {
            "timestamp": int(record.created * 1000),  # milissegundos
            "datetime": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": self.component,
            "logger": record.name,
            "message": record.getMessage()
        }

        if self.detailed:
            log_data.update({
                "module": record.module,
                "function": record.funcName,
                "lineno": record.lineno,
                "thread": record.thread,
                "process": record.process
            })

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str)
