"""Record models for external and internal CRM data."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime


class RecordType(str, Enum):
    """Kind of record handled by the dry run."""
    CONTACT = "contact"
    JOB = "job"


@dataclass
class ExternalRecord:
    """A raw record fetched from an external CRM, in the provider's native shape."""
    id: str
    source_service: str
    entity: str  # contacts, jobs
    data: Dict[str, Any]
    extracted_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "source_service": self.source_service,
            "entity": self.entity,
            "data": self.data,
            "extracted_at": self.extracted_at.isoformat(),
        }

    def get_field(self, path: str, default: Any = None) -> Any:
        """Get a field value by dot-notation path (e.g., 'address.street')."""
        parts = path.split(".")
        value = self.data
        for part in parts:
            if isinstance(value, dict):
                value = value.get(part)
            elif isinstance(value, list) and part.isdigit():
                idx = int(part)
                value = value[idx] if idx < len(value) else None
            else:
                return default
            if value is None:
                return default
        return value


@dataclass
class CanonicalContact:
    """Provider-agnostic contact derived from an ExternalRecord."""
    external_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    raw: Optional[ExternalRecord] = None
    # Joined provider name before the sentinel default; None when not normalized
    raw_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "external_id": self.external_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
        }


@dataclass
class CanonicalJob:
    """Provider-agnostic job derived from an ExternalRecord."""
    external_id: str
    name: str
    status: Optional[str] = None
    address: Optional[str] = None
    raw: Optional[ExternalRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "external_id": self.external_id,
            "name": self.name,
            "status": self.status,
            "address": self.address,
        }


@dataclass(frozen=True)
class InternalContact:
    """Read-only view of a contact already stored internally."""
    id: str
    org_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_dict(cls, org_id: str, data: Dict[str, Any]) -> "InternalContact":
        return cls(
            id=str(data["id"]),
            org_id=org_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
        )


@dataclass(frozen=True)
class InternalJob:
    """Read-only view of a job already stored internally."""
    id: str
    org_id: str
    name: Optional[str] = None
    property_address: Optional[str] = None

    @classmethod
    def from_dict(cls, org_id: str, data: Dict[str, Any]) -> "InternalJob":
        return cls(
            id=str(data["id"]),
            org_id=org_id,
            name=data.get("name"),
            property_address=data.get("property_address"),
        )
