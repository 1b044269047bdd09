"""
Encaminhamento de requisições para um nó upstream.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote

import httpx

from common.communication import HttpClient

logger = logging.getLogger(__name__)


class ForwardingError(Exception):
    """A requisição encaminhada não pôde ser completada (conexão, timeout, DNS)."""


@dataclass
class RelayResponse:
    """Status e corpo bruto devolvidos pelo upstream."""
    status_code: int
    body: bytes


class Relay(Protocol):
    """
    Capacidade de reenviar uma requisição a outro nó.

    Implementações devolvem o status e o corpo exatamente como recebidos e
    levantam ForwardingError quando a requisição não chega ao fim.
    """

    async def send(self, method: str, path: str, body: Optional[bytes] = None) -> RelayResponse:
        ...

    async def close(self) -> None:
        ...


def kvs_path(key: str) -> str:
    """Caminho /kvs/{key}, com a chave codificada como um único segmento."""
    return f"/kvs/{quote(key, safe='')}"


class HttpRelay:
    """
    Relay HTTP para o endereço de encaminhamento configurado.
    """

    def __init__(self, forwarding_address: str, http_client: Optional[HttpClient] = None,
                 timeout: float = 30.0):
        """
        Inicializa o relay.

        Args:
            forwarding_address: host:port do nó upstream
            http_client: Cliente HTTP compartilhado (criado se omitido)
            timeout: Timeout de cada requisição encaminhada em segundos
        """
        self.forwarding_address = forwarding_address
        self.http_client = http_client or HttpClient(timeout=timeout)

    def url_for(self, path: str) -> str:
        return f"http://{self.forwarding_address}{path}"

    async def send(self, method: str, path: str, body: Optional[bytes] = None) -> RelayResponse:
        """
        Reenvia a requisição e devolve a resposta do upstream sem interpretá-la.

        Args:
            method: Método HTTP original
            path: Caminho original (ex.: /kvs/foo)
            body: Corpo JSON bruto original, se houver

        Returns:
            RelayResponse: Status e corpo do upstream

        Raises:
            ForwardingError: Se a requisição não puder ser completada
        """
        url = self.url_for(path)
        headers = {"Content-Type": "application/json"} if body is not None else None

        try:
            response = await self.http_client.request(method, url, content=body, headers=headers)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning(f"Falha ao encaminhar {method} {url}: {type(e).__name__}: {e}")
            raise ForwardingError(f"{type(e).__name__}: {e}") from e

        logger.debug(f"Resposta do upstream para {method} {url}: {response.status_code}")
        return RelayResponse(status_code=response.status_code, body=response.content)

    async def close(self) -> None:
        await self.http_client.close()
