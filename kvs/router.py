"""
Roteamento das operações do nó KVS: execução local ou encaminhamento.

Ordem de validação de um PUT:
1. presença do corpo (sempre local, em qualquer modo)
2. encaminhamento, se houver relay configurado
3. tamanho da chave (apenas no modo local)
"""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from common.logging import get_debug_state
from common.metrics import kvs_metrics, record_request
from common.models import (
    DeleteResponse,
    ErrorMessage,
    ErrorResponse,
    GetResponse,
    KeyValueRequest,
    NodeMode,
    OperationResult,
    PutResponse,
)
from kvs.relay import ForwardingError, Relay, kvs_path
from kvs.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEY_LENGTH = 50


@dataclass
class RouterResponse:
    """Status HTTP e conteúdo JSON a devolver ao cliente."""
    status_code: int
    content: Any


def _error(status_code: int, message: str) -> RouterResponse:
    return RouterResponse(status_code, ErrorResponse(error=message).model_dump())


def _result(status_code: int, model) -> RouterResponse:
    return RouterResponse(status_code, model.model_dump(mode="json"))


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


class RequestRouter:
    """
    Decide, para cada operação, entre o armazenamento local e o upstream.

    O modo é fixado na construção: com um relay, toda operação é encaminhada
    e o armazenamento local nunca é tocado.
    """

    def __init__(self, store: KeyValueStore, relay: Optional[Relay] = None,
                 max_key_length: int = DEFAULT_MAX_KEY_LENGTH, node_id: str = "kvs"):
        """
        Inicializa o roteador.

        Args:
            store: Armazenamento local
            relay: Relay para o upstream (None = modo standalone)
            max_key_length: Tamanho máximo da chave, em caracteres
            node_id: ID do nó, usado em logs e métricas
        """
        self.store = store
        self.relay = relay
        self.max_key_length = max_key_length
        self.node_id = node_id

    @property
    def forwarding(self) -> bool:
        return self.relay is not None

    @property
    def mode(self) -> NodeMode:
        return NodeMode.FORWARDING if self.forwarding else NodeMode.STANDALONE

    async def put(self, key: str, body: Optional[bytes]) -> RouterResponse:
        """
        Processa um PUT /kvs/{key}.

        Args:
            key: Chave
            body: Corpo bruto da requisição (None ou vazio se ausente)
        """
        start = time.time()
        logger.info(f"PUT request for key: {key}")

        value_request = self._parse_value(body)
        if value_request is None:
            response = _error(400, ErrorMessage.MISSING_VALUE.value)
        elif self.forwarding:
            response = await self._forward("PUT", key, body)
        elif len(key) > self.max_key_length:
            response = _error(400, ErrorMessage.KEY_TOO_LONG.value)
        else:
            result = self.store.put(key, value_request.value)
            self._trace_store("após PUT")
            status_code = 201 if result is OperationResult.CREATED else 200
            response = _result(status_code, PutResponse(result=result))

        self._record("PUT", response, start)
        return response

    async def get(self, key: str) -> RouterResponse:
        """Processa um GET /kvs/{key}."""
        start = time.time()
        logger.info(f"GET request for key: {key}")

        if self.forwarding:
            response = await self._forward("GET", key)
        else:
            result, value = self.store.get(key)
            if result is OperationResult.FOUND:
                response = _result(200, GetResponse(value=value))
            else:
                response = _error(404, ErrorMessage.KEY_NOT_FOUND.value)

        self._record("GET", response, start)
        return response

    async def delete(self, key: str) -> RouterResponse:
        """Processa um DELETE /kvs/{key}."""
        start = time.time()
        logger.info(f"DELETE request for key: {key}")

        if self.forwarding:
            response = await self._forward("DELETE", key)
        else:
            result = self.store.delete(key)
            self._trace_store("após DELETE")
            if result is OperationResult.DELETED:
                response = _result(200, DeleteResponse())
            else:
                response = _error(404, ErrorMessage.KEY_NOT_FOUND.value)

        self._record("DELETE", response, start)
        return response

    async def _forward(self, method: str, key: str, body: Optional[bytes] = None) -> RouterResponse:
        """
        Encaminha a operação ao upstream e devolve status e corpo inalterados.

        Returns:
            RouterResponse: Resposta do upstream, 503 se o encaminhamento
            falhou ou 500 se o corpo do upstream não é JSON
        """
        try:
            relayed = await self.relay.send(method, kvs_path(key), body)
        except ForwardingError as e:
            logger.error(f"Não foi possível encaminhar {method} {key}: {e}")
            kvs_metrics["forward_failures"].labels(node_id=self.node_id, reason="unreachable").inc()
            return _error(503, ErrorMessage.CANNOT_FORWARD.value)

        try:
            content = json.loads(relayed.body, parse_constant=_reject_constant)
        except ValueError as e:
            logger.error(f"Resposta do upstream para {method} {key} não é JSON: {e}")
            kvs_metrics["forward_failures"].labels(node_id=self.node_id, reason="decode").inc()
            return _error(500, f"{ErrorMessage.UPSTREAM_PARSE.value}: {e}")

        return RouterResponse(relayed.status_code, content)

    @staticmethod
    def _parse_value(body: Optional[bytes]) -> Optional[KeyValueRequest]:
        if not body:
            return None
        try:
            return KeyValueRequest.model_validate_json(body)
        except ValidationError as e:
            logger.debug(f"Corpo do PUT inválido: {e.errors()}")
            return None

    def _trace_store(self, label: str) -> None:
        debug_state = get_debug_state()
        if debug_state["enabled"] and debug_state["level"] == "trace":
            logger.debug(f"Armazenamento {label}: {self.store.snapshot()}")

    def _record(self, method: str, response: RouterResponse, start: float) -> None:
        record_request(self.node_id, method, self.mode.value, response.status_code, time.time() - start)
        if not self.forwarding:
            kvs_metrics["keys"].labels(node_id=self.node_id).set(self.store.size())
