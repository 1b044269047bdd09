#!/usr/bin/env python3
"""
File: kvs/main.py
Ponto de entrada do nó KVS.
Lê a configuração, monta armazenamento, relay e API e inicia o servidor HTTP.
"""
import argparse
import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from common.communication import HttpClient
from common.logging import setup_logging
from common.utils import get_debug_mode
from kvs import config
from kvs.api import create_api
from kvs.relay import HttpRelay
from kvs.router import RequestRouter
from kvs.store import KeyValueStore

logger = logging.getLogger("kvs")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='KVS - key-value store node with optional forwarding')
    parser.add_argument('--host', type=str, default=config.HOST, help='Address to bind the server to')
    parser.add_argument('--port', type=int, default=config.PORT, help='Port to run the server on')
    parser.add_argument('--node-id', type=str, default=config.NODE_ID, help='Unique ID for this node')
    parser.add_argument('--forwarding-address', type=str, default=config.FORWARDING_ADDRESS,
                        help='host:port of the upstream node; enables forwarding mode')
    parser.add_argument('--debug', action='store_true', default=get_debug_mode(), help='Enable debug mode')
    return parser.parse_args(argv)


def build_app(node_id: str, forwarding_address: Optional[str] = None,
              forward_timeout: float = config.FORWARD_TIMEOUT,
              max_key_length: int = config.MAX_KEY_LENGTH) -> FastAPI:
    """
    Monta o nó: armazenamento, relay (se houver encaminhamento), roteador e API.

    Args:
        node_id: ID do nó
        forwarding_address: host:port do upstream (None = standalone)
        forward_timeout: Timeout das requisições encaminhadas
        max_key_length: Tamanho máximo da chave

    Returns:
        FastAPI: Aplicação pronta para o uvicorn
    """
    store = KeyValueStore()
    relay = None
    if forwarding_address:
        relay = HttpRelay(forwarding_address, HttpClient(timeout=forward_timeout))

    router = RequestRouter(store, relay, max_key_length=max_key_length, node_id=node_id)
    app = create_api(router, node_id=node_id, forwarding_address=forwarding_address)

    @app.on_event("shutdown")
    async def on_shutdown():
        if relay is not None:
            await relay.close()
        logger.important(f"Nó {node_id} finalizado")

    return app


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    setup_logging(args.node_id, debug=args.debug)

    if args.forwarding_address:
        logger.important(f"Iniciando nó {args.node_id} em modo de encaminhamento para {args.forwarding_address}")
    else:
        logger.important(f"Iniciando nó {args.node_id} em modo standalone")

    app = build_app(args.node_id, args.forwarding_address)

    logger.important(f"Nó {args.node_id} escutando em {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.debug else "info")


if __name__ == "__main__":
    main()
