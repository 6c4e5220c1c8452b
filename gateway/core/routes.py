"""Route prefixes the pipeline stages key their behavior on."""

API_PREFIX = "/api"
NETSUITE_PREFIX = f"{API_PREFIX}/netsuite"
HEALTH_PATH = f"{NETSUITE_PREFIX}/health"

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def is_protected_path(path: str) -> bool:
    """Whether the path is served by the NetSuite router."""
    return path == NETSUITE_PREFIX or path.startswith(f"{NETSUITE_PREFIX}/")


def is_health_path(path: str) -> bool:
    """Whether the path is the health check endpoint."""
    return path.rstrip("/") == HEALTH_PATH
