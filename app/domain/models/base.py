"""
Base entity and shared exceptions for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime
from typing import Optional, Any, Dict, List, TYPE_CHECKING
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
import uuid

if TYPE_CHECKING:
    from app.domain.events.base import DomainEvent


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid.uuid4())


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """
    
    id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    
    # Domain events
    _events: List["DomainEvent"] = field(default_factory=list, init=False, repr=False, compare=False)
    
    def __post_init__(self):
        """Initialize entity after creation."""
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at
    
    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id
    
    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))
    
    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.utcnow()
    
    def add_event(self, event: "DomainEvent") -> None:
        """Add a domain event."""
        self._events.append(event)
    
    def pull_events(self) -> List["DomainEvent"]:
        """Get and clear all domain events."""
        events = self._events.copy()
        self._events.clear()
        return events
    
    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation."""
        data = {}
        for key, value in self.__dict__.items():
            if key.startswith('_'):
                continue
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, BaseEntity):
                data[key] = value.to_dict()
            elif isinstance(value, list):
                data[key] = [
                    item.to_dict() if hasattr(item, "to_dict") else item
                    for item in value
                ]
            else:
                data[key] = value
        return data


@dataclass(eq=False)
class AggregateRoot(BaseEntity):
    """
    Base class for aggregate roots.
    Aggregate roots are the entry points to aggregates and handle domain events.
    """
    
    version: int = field(default=1)
    
    def increment_version(self) -> None:
        """Increment the aggregate version for optimistic locking."""
        self.version += 1
        self.mark_as_updated()


class DomainException(Exception):
    """Base exception for domain errors."""
    
    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when entity validation fails."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolation(DomainException):
    """Exception raised when a business rule is violated."""
    
    def __init__(self, message: str):
        super().__init__(message, "BUSINESS_RULE_VIOLATION")


class PermissionDeniedError(DomainException):
    """Exception raised when the acting user may not perform an operation."""
    
    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message, "PERMISSION_DENIED")


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""
    
    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityError(DomainException):
    """Exception raised when trying to create a duplicate entity."""
    
    def __init__(self, entity_type: str, field: str, value: Any):
        message = f"{entity_type} with {field}='{value}' already exists"
        super().__init__(message, "DUPLICATE_ENTITY")
        self.entity_type = entity_type
        self.field = field
        self.value = value
