from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client

__all__ = ["SharedHttpClient", "get_shared_http_client", "shutdown_shared_http_client"]
