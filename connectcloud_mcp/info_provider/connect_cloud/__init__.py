"""Connect Cloud API client and request models.

Exposes a thin HTTP client for the CData Connect Cloud REST API together with
its request DTOs and error type.
"""

from .client import ConnectCloudApiClient
from .errors import ConnectCloudApiError
from .models import BatchRequest, ExecRequest, QueryLogListRequest, QueryRequest

__all__ = [
    "ConnectCloudApiClient",
    "ConnectCloudApiError",
    "BatchRequest",
    "ExecRequest",
    "QueryLogListRequest",
    "QueryRequest",
]
