"""
Configuração global para testes.
Contém fixtures compartilhadas entre testes unitários e de integração.
"""
import logging
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from kvs.api import create_api
from kvs.relay import RelayResponse
from kvs.router import RequestRouter
from kvs.store import KeyValueStore

# Configurar logging para testes
logging.basicConfig(level=logging.INFO)


class FakeRelay:
    """
    Relay em memória: registra as chamadas e devolve uma resposta fixa
    (ou levanta o erro configurado).
    """

    def __init__(self, status_code: int = 200, body: bytes = b'{"result":"found","value":1}',
                 error: Optional[Exception] = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.calls: List[Tuple[str, str, Optional[bytes]]] = []
        self.closed = False

    async def send(self, method: str, path: str, body: Optional[bytes] = None) -> RelayResponse:
        self.calls.append((method, path, body))
        if self.error is not None:
            raise self.error
        return RelayResponse(status_code=self.status_code, body=self.body)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def store():
    """Armazenamento vazio e independente por teste."""
    return KeyValueStore()


@pytest.fixture
def fake_relay():
    return FakeRelay()


@pytest.fixture
def router(store):
    """Roteador em modo standalone."""
    return RequestRouter(store, node_id="test-node")


@pytest.fixture
def forwarding_router(store, fake_relay):
    """Roteador em modo de encaminhamento com relay falso."""
    return RequestRouter(store, fake_relay, node_id="test-forwarder")


@pytest.fixture
def api_client(router):
    """Cliente de teste para a API de um nó standalone."""
    app = create_api(router, node_id="test-node")
    return TestClient(app)
