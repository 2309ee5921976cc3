"""
Exception hierarchy for the gym route catalog.

    CatalogError (base)
    ├── RouteValidationError   → 422 (domain rule or persistence rejection)
    │   └── BatchTooLargeError → 422 (batch exceeds BATCH_MAX_SIZE)
    └── NotFoundError          → 404
        ├── GymNotFoundError
        ├── SectorNotFoundError
        └── RouteNotFoundError

Handlers registered in main.py translate these into JSON responses.
"""
from typing import Any, Dict, List, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog errors.

    Attributes:
        message: Human-readable description
        details: Extra context (safe to return to the client)
    """

    def __init__(self, message: str = "Catalog error", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RouteValidationError(CatalogError):
    """
    Raised when a route update or state transition is rejected.

    `errors` maps a field name to its list of messages, e.g.
    {"dismounted_at": ["must be on or after opened_at"]}. The "base" key
    holds errors not tied to a single field.
    """

    def __init__(self, errors: Dict[str, List[str]], route_id: Optional[int] = None):
        self.errors = errors
        self.route_id = route_id
        super().__init__(
            message="Route validation failed",
            details={"route_id": route_id, "errors": errors},
        )


class BatchTooLargeError(RouteValidationError):
    """Raised when a batch transition names more routes than allowed."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__({"route_ids": [f"at most {limit} routes per batch (got {size})"]})


class NotFoundError(CatalogError):
    """Raised when a referenced entity does not exist."""

    resource = "resource"

    def __init__(self, resource_id: Any):
        self.resource_id = resource_id
        super().__init__(
            message=f"{self.resource} with ID '{resource_id}' was not found",
            details={"resource": self.resource, "resource_id": resource_id},
        )


class GymNotFoundError(NotFoundError):
    resource = "gym"


class SectorNotFoundError(NotFoundError):
    resource = "gym_sector"


class RouteNotFoundError(NotFoundError):
    resource = "gym_route"
