"""
Common service types.
Status taxonomy and the structured result returned to collaborators.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from errors import LedgerError, NotFoundError, StoreError, ValidationError


class ServiceStatus(Enum):
    """Outcome of a service request, valued by its HTTP status code."""
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    VALIDATION_ERROR = 400
    NOT_FOUND = 404
    INTERNAL_ERROR = 500


_ERROR_STATUS = {
    ValidationError: ServiceStatus.VALIDATION_ERROR,
    NotFoundError: ServiceStatus.NOT_FOUND,
    StoreError: ServiceStatus.INTERNAL_ERROR,
}


@dataclass
class ServiceResult:
    """
    Result of a service request.
    Errors map field names to a single message each.
    """
    status: ServiceStatus
    data: Any = None
    errors: Optional[Dict[str, str]] = None
    message: str = ""

    @property
    def code(self) -> int:
        return self.status.value

    @property
    def success(self) -> bool:
        return self.code < 400

    @classmethod
    def ok(cls, data: Any) -> "ServiceResult":
        return cls(ServiceStatus.OK, data=data)

    @classmethod
    def created(cls, data: Any) -> "ServiceResult":
        return cls(ServiceStatus.CREATED, data=data)

    @classmethod
    def no_content(cls) -> "ServiceResult":
        return cls(ServiceStatus.NO_CONTENT)

    @classmethod
    def from_error(cls, error: LedgerError) -> "ServiceResult":
        """
        Convert a ledger error into a result.
        Store errors are reduced to an opaque message with no storage details.
        """
        status = _ERROR_STATUS.get(type(error), ServiceStatus.INTERNAL_ERROR)
        if status is ServiceStatus.INTERNAL_ERROR:
            return cls(status, errors={"server": "An unexpected error occurred"}, message="Internal Server Error")
        return cls(status, errors=dict(error.errors), message=error.message)
