"""
Módulo de comunicação HTTP compartilhado entre os nós.
"""
import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger("communication")

class HttpClient:
    """
    Cliente HTTP para comunicação entre nós.

    Características:
    1. Suporte a timeouts configuráveis
    2. Gerenciamento de conexões keep-alive
    3. Respostas devolvidas sem interpretação do status
    """

    def __init__(self, timeout: float = 30.0, max_connections: int = 100,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Inicializa o cliente HTTP.

        Args:
            timeout: Timeout padrão para requisições em segundos
            max_connections: Número máximo de conexões concorrentes
            transport: Transporte alternativo (usado nos testes)
        """
        self.timeout = timeout
        self.limits = httpx.Limits(max_connections=max_connections)
        self.transport = transport
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Obtém o cliente HTTP assíncrono, criando-o se necessário.

        Returns:
            httpx.AsyncClient: Cliente HTTP assíncrono
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self.limits,
                transport=self.transport
            )
        return self._client

    async def close(self):
        """Fecha o cliente HTTP."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, url: str, content: Optional[bytes] = None,
                      headers: Optional[Dict[str, str]] = None,
                      timeout: Optional[float] = None) -> httpx.Response:
        """
        Faz uma requisição HTTP arbitrária.

        Args:
            method: Método HTTP
            url: URL para requisição
            content: Corpo bruto a ser enviado
            headers: Cabeçalhos HTTP
            timeout: Timeout para esta requisição específica (sobrescreve o padrão)

        Returns:
            httpx.Response: Resposta completa, qualquer que seja o status

        Raises:
            httpx.RequestError: Se a requisição não puder ser completada
        """
        logger.debug(f"{method} {url}")
        return await self.client.request(
            method,
            url,
            content=content,
            headers=headers,
            timeout=timeout or self.timeout
        )
