"""
Configuração de métricas Prometheus para os nós KVS.
"""
from prometheus_client import Counter, Histogram, Gauge


# Métricas do nó KVS
kvs_metrics = {
    "requests": Counter(
        "kvs_requests_total",
        "Número total de operações processadas",
        ["node_id", "method", "mode", "status"]
    ),
    "request_duration": Histogram(
        "kvs_request_duration_seconds",
        "Duração do processamento de uma operação",
        ["node_id", "method", "mode"]
    ),
    "forward_failures": Counter(
        "kvs_forward_failures_total",
        "Número de encaminhamentos que falharam",
        ["node_id", "reason"]
    ),
    "keys": Gauge(
        "kvs_keys",
        "Número de chaves no armazenamento local",
        ["node_id"]
    )
}


def record_request(node_id: str, method: str, mode: str, status: int, duration: float) -> None:
    """
    Registra uma operação concluída.

    Args:
        node_id: ID do nó
        method: Método HTTP da operação
        mode: "standalone" ou "forwarding"
        status: Código de status devolvido ao cliente
        duration: Duração em segundos
    """
    kvs_metrics["requests"].labels(node_id=node_id, method=method, mode=mode, status=str(status)).inc()
    kvs_metrics["request_duration"].labels(node_id=node_id, method=method, mode=mode).observe(duration)
