"""API request and response models."""

from api.models.requests import VerifyRequest
from api.models.responses import (
    HealthResponse,
    InstanceInfo,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "VerifyRequest",
    "HealthResponse",
    "InstanceInfo",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
