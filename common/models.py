"""
Modelos de dados comuns para os nós KVS.
"""
import math
from typing import Any, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class OperationResult(str, Enum):
    """
    Resultados possíveis de uma operação no armazenamento.

    NOT_FOUND é apenas interno: as respostas 404 usam ErrorMessage.KEY_NOT_FOUND.
    """
    CREATED = "created"
    REPLACED = "replaced"
    FOUND = "found"
    DELETED = "deleted"
    NOT_FOUND = "not_found"


class ErrorMessage(str, Enum):
    """Mensagens de erro devolvidas aos clientes."""
    KEY_TOO_LONG = "Key is too long"
    MISSING_VALUE = "PUT request does not specify a value"
    KEY_NOT_FOUND = "Key does not exist"
    CANNOT_FORWARD = "Cannot forward request"
    UPSTREAM_PARSE = "Failed to parse JSON response"


class NodeMode(str, Enum):
    """Modo de operação do nó, decidido na inicialização."""
    STANDALONE = "standalone"
    FORWARDING = "forwarding"


def is_finite_json(value: Any) -> bool:
    """False se o valor contém NaN ou Infinity em qualquer nível."""
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(is_finite_json(v) for v in value.values())
    if isinstance(value, list):
        return all(is_finite_json(v) for v in value)
    return True


class KeyValueRequest(BaseModel):
    """Corpo de uma requisição PUT. Qualquer valor JSON, inclusive null."""
    value: Any

    @field_validator("value")
    @classmethod
    def reject_non_finite(cls, value: Any) -> Any:
        # NaN e Infinity não são JSON válido
        if not is_finite_json(value):
            raise ValueError("value contains a non-finite number")
        return value


class PutResponse(BaseModel):
    result: OperationResult


class GetResponse(BaseModel):
    result: OperationResult = OperationResult.FOUND
    value: Any


class DeleteResponse(BaseModel):
    result: OperationResult = OperationResult.DELETED


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = Field(..., description="Health status of the service")
    timestamp: int = Field(..., description="Current timestamp")
    debug_enabled: bool = Field(..., description="Debug mode status")
    debug_level: str = Field(..., description="Current debug level")


class StatusResponse(BaseModel):
    node_id: str = Field(..., description="ID of this node")
    mode: NodeMode = Field(..., description="standalone or forwarding")
    forwarding_address: Optional[str] = Field(None, description="Upstream address in forwarding mode")
    keys: int = Field(..., description="Number of keys in the local store")
    uptime: float = Field(..., description="Time running in seconds")
