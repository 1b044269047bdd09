"""
Armazenamento chave-valor em memória do nó KVS.
"""
import logging
import threading
from typing import Any, Dict, Tuple

from common.models import OperationResult

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Mapeamento em memória de chaves (str) para valores JSON arbitrários.

    Toda operação executa numa única seção crítica protegida por um lock
    global do armazenamento, sem distinção entre leitura e escrita. Nenhuma
    operação observa um PUT ou DELETE parcialmente aplicado.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Any) -> OperationResult:
        """
        Insere ou substitui o valor de uma chave.

        Args:
            key: Chave
            value: Valor JSON (substitui o anterior por completo)

        Returns:
            OperationResult: CREATED se a chave não existia, REPLACED caso contrário
        """
        with self._lock:
            existed = key in self._data
            self._data[key] = value
            size = len(self._data)

        logger.debug(f"PUT {key!r}: {'substituído' if existed else 'criado'} ({size} chaves)")
        return OperationResult.REPLACED if existed else OperationResult.CREATED

    def get(self, key: str) -> Tuple[OperationResult, Any]:
        """
        Obtém o valor de uma chave.

        Returns:
            Tuple[OperationResult, Any]: (FOUND, valor) ou (NOT_FOUND, None)
        """
        with self._lock:
            if key in self._data:
                return OperationResult.FOUND, self._data[key]
        return OperationResult.NOT_FOUND, None

    def delete(self, key: str) -> OperationResult:
        """
        Remove uma chave.

        Returns:
            OperationResult: DELETED se a chave existia, NOT_FOUND caso contrário
        """
        with self._lock:
            if key not in self._data:
                return OperationResult.NOT_FOUND
            del self._data[key]
            size = len(self._data)

        logger.debug(f"DELETE {key!r}: removido ({size} chaves)")
        return OperationResult.DELETED

    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def snapshot(self) -> Dict[str, Any]:
        """Cópia rasa do conteúdo atual, para logs de depuração."""
        with self._lock:
            return dict(self._data)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data
