"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass
from datetime import datetime

from app.domain.events.base import DomainEvent, EventOutbox, publish_events
from app.domain.models.base import (
    BaseEntity, DomainException, ValidationError, BusinessRuleViolation, PermissionDeniedError
)


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""
    
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    
    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)
    
    @classmethod
    def error_result(
        cls, 
        error: str, 
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False, 
            error=error, 
            error_code=error_code,
            metadata=metadata
        )
    
    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, ValidationError):
            result = cls.error_result(exc.message, "VALIDATION_ERROR")
            if exc.field:
                result.metadata = {"field": exc.field}
            return result
        elif isinstance(exc, BusinessRuleViolation):
            return cls.error_result(exc.message, "BUSINESS_RULE_VIOLATION")
        elif isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        else:
            return cls.error_result(str(exc), "UNKNOWN_ERROR")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """
    
    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None
    
    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = datetime.utcnow()
        
        try:
            # Validate input
            await self._validate_request(request)
            
            # Execute business logic
            result = await self._execute_business_logic(request)
            
            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()
            
            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )
        
        except Exception as exc:
            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()
            
            if isinstance(exc, DomainException):
                logger.info(f"{type(self).__name__} rejected: {exc.message}")
            else:
                logger.exception(f"{type(self).__name__} failed unexpectedly")
            
            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                **(error_result.metadata or {}),
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }
            
            return error_result
    
    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if hasattr(request, 'model_validate'):
            # Pydantic models
            request.model_validate(request.model_dump())
    
    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Domain events raised by the touched entities are published after the command succeeds,
    or handed to an outbox that publishes them once the unit of work has committed.
    """
    
    def __init__(self):
        super().__init__()
        self.events: List[DomainEvent] = []
        self.outbox: Optional[EventOutbox] = None
    
    def defer_events(self, outbox: EventOutbox) -> "CommandUseCase[T, R]":
        """Hold the events in the outbox instead of publishing them on success."""
        self.outbox = outbox
        return self
    
    async def _execute_business_logic(self, request: T) -> R:
        try:
            result = await self._execute_command_logic(request)
            await self._publish_events()
            return result
        except Exception:
            self.events.clear()
            raise
    
    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass
    
    def _collect_events(self, *entities: BaseEntity) -> None:
        """Take the pending domain events of the given entities."""
        for entity in entities:
            self.events.extend(entity.pull_events())
    
    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        events = list(self.events)
        self.events.clear()
        if self.outbox is not None:
            self.outbox.add(events)
            return
        await publish_events(events)


class PaginatedQueryUseCase(QueryUseCase[T, R]):
    """
    Base class for paginated query use cases.
    """
    
    def __init__(self, default_page_size: int = 20, max_page_size: int = 100):
        super().__init__()
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
    
    async def _validate_request(self, request: T) -> None:
        """Validate paginated request."""
        await super()._validate_request(request)
        
        if hasattr(request, 'page_size'):
            if request.page_size > self.max_page_size:
                raise ValidationError(f"Page size cannot exceed {self.max_page_size}")
            if request.page_size < 1:
                raise ValidationError("Page size must be positive")


# Specific use case patterns
class CreateUseCase(CommandUseCase[T, R]):
    """Base class for entity creation use cases."""
    pass


class UpdateUseCase(CommandUseCase[T, R]):
    """Base class for entity update use cases."""
    pass


class DeleteUseCase(CommandUseCase[T, R]):
    """Base class for entity deletion use cases."""
    pass


# Authorization mixin
class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases that require authorization.
    """
    
    def __init__(self):
        super().__init__()
        self.current_user_id: Optional[str] = None
        self.current_user_roles: List[str] = []
    
    def set_current_user(self, user_id: str, roles: List[str]):
        """Set the current user context."""
        self.current_user_id = user_id
        self.current_user_roles = roles
        return self
    
    @property
    def is_admin(self) -> bool:
        return "admin" in self.current_user_roles
    
    async def _validate_request(self, request: T) -> None:
        """Validate request with authorization check."""
        await super()._validate_request(request)
        
        if not self.current_user_id:
            raise PermissionDeniedError("User authentication required")
        
        await self._check_authorization(request)
    
    async def _check_authorization(self, request: T) -> None:
        """Check if the current user is authorized. Override in subclasses."""
        pass
    
    def _require_role(self, required_role: str) -> None:
        """Check if user has required role."""
        if required_role not in self.current_user_roles:
            raise PermissionDeniedError(f"Role '{required_role}' required")
    
    def _require_owner_or_role(self, resource_owner_id: str, required_role: str) -> None:
        """Check if user is owner or has required role."""
        if self.current_user_id != resource_owner_id and required_role not in self.current_user_roles:
            raise PermissionDeniedError("Insufficient permissions")
