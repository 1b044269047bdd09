"""
File: kvs/api.py
REST API do nó KVS.
"""
import time
import logging
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from common.logging import get_debug_state, get_log_entries, get_uptime
from common.models import HealthResponse, StatusResponse
from common.utils import current_timestamp
from kvs.router import RequestRouter, RouterResponse

logger = logging.getLogger("kvs.api")


def _json(response: RouterResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.content)


def create_api(router: RequestRouter, node_id: str = "kvs", forwarding_address: Optional[str] = None) -> FastAPI:
    """
    Cria a aplicação FastAPI do nó KVS.

    Args:
        router: Roteador já configurado com o armazenamento e o relay
        node_id: ID do nó (também o nome do componente de logging)
        forwarding_address: Endereço do upstream, exibido em /status

    Returns:
        FastAPI: Aplicação configurada
    """
    app = FastAPI(title="KVS Node API", description="Key-value store with optional request forwarding")
    app.state.router = router

    # Middleware para logging de requisições
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        logger.debug(f"Requisição recebida: {request.method} {request.url.path}")

        response = await call_next(request)

        duration_ms = (time.time() - start) * 1000
        logger.debug(f"Resposta enviada: {response.status_code} ({duration_ms:.1f} ms)")
        return response

    @app.put("/kvs/{key}")
    async def put_key(key: str, request: Request):
        body = await request.body()
        return _json(await router.put(key, body or None))

    @app.get("/kvs/{key}")
    async def get_key(key: str):
        return _json(await router.get(key))

    @app.delete("/kvs/{key}")
    async def delete_key(key: str):
        return _json(await router.delete(key))

    @app.get("/health", response_model=HealthResponse)
    async def health_check(debug_state: Dict = Depends(get_debug_state)):
        return {
            "status": "healthy",
            "timestamp": current_timestamp(),
            "debug_enabled": debug_state["enabled"],
            "debug_level": debug_state["level"]
        }

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        return {
            "node_id": node_id,
            "mode": router.mode,
            "forwarding_address": forwarding_address,
            "keys": 0 if router.forwarding else router.store.size(),
            "uptime": get_uptime()
        }

    @app.get("/metrics")
    async def metrics():
        """Expose Prometheus metrics"""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/logs")
    async def get_logs(limit: int = Query(100, ge=1, le=1000), level: Optional[str] = None):
        """Últimos registros de log do nó, mais recentes primeiro."""
        return {"logs": get_log_entries(node_id, level=level, limit=limit)}

    return app
