from .status_endpoints import StatusEndpoints, create_status_endpoints

__all__ = ["StatusEndpoints", "create_status_endpoints"]
