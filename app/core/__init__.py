"""
Core Application - Infrastructure & Base Classes

This app holds the infrastructure the domain apps build on. It contains no
domain logic of its own.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - SoftDeleteMixin: Tombstone support (is_deleted, deleted_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling
    - ErrorCode: Machine-readable failure codes

Views (import from core.views):
    - service_error_response: ServiceResult failure -> DRF Response
    - health_check: Liveness probe for load balancers

Usage:
    from core.models import BaseModel
    from core.model_mixins import SoftDeleteMixin
    from core.services import BaseService, ErrorCode, ServiceResult

    class Message(SoftDeleteMixin, BaseModel):
        content = models.TextField()

Note:
    Models and mixins are not re-exported here to avoid AppRegistryNotReady
    errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ErrorCode, ServiceResult

__all__ = [
    "BaseService",
    "ErrorCode",
    "ServiceResult",
]
