"""
Dependency Injection Container

Manages service lifecycles and dependency resolution. Every long-lived
handle (Redis pool, repositories, storage client) is built once at process
start and registered here instead of living in module-level globals.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when attempting to resolve an unregistered dependency."""
    pass


class DependencyContainer:
    """
    Dependency injection container for managing service lifecycles.

    Supports singleton (single instance) and transient (factory-created)
    registration patterns. Thread-safe for concurrent access.
    """

    def __init__(self):
        """Initialize the dependency container."""
        self._singletons: Dict[Type, Any] = {}
        self._transients: Dict[Type, Callable[[], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

        logger.debug("DependencyContainer initialized")

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register a singleton service (single instance shared across all resolutions).

        Args:
            interface: The interface or class type to register
            implementation: The concrete instance to use

        Example:
            container.register_singleton(ShareLinkManager, share_link_manager)
        """
        with self._lock:
            self._singletons[interface] = implementation
        logger.debug(f"Registered singleton: {interface.__name__}")

    def register_transient(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """
        Register a transient service (new instance created on each resolution).

        Args:
            interface: The interface or class type to register
            factory: A callable that creates new instances
        """
        with self._lock:
            self._transients[interface] = factory
        logger.debug(f"Registered transient: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a registered service.

        Args:
            interface: The interface or class type to resolve

        Returns:
            The resolved service instance

        Raises:
            DependencyNotFoundError: If the interface is not registered
        """
        with self._lock:
            # Overrides first (for testing)
            if interface in self._overrides:
                return self._overrides[interface]

            if interface in self._singletons:
                return self._singletons[interface]

            factory = self._transients.get(interface)
            if factory is None:
                raise DependencyNotFoundError(
                    f"No registration found for type: {interface.__name__}"
                )

        # Call factory outside the lock to allow nested resolve calls
        return factory()

    def override(self, interface: Type[T], implementation: T) -> None:
        """
        Override a registered service (primarily for testing).

        Overrides take precedence over both singleton and transient registrations.
        """
        with self._lock:
            self._overrides[interface] = implementation
        logger.debug(f"Overridden: {interface.__name__}")

    def clear_overrides(self) -> None:
        """Clear all overrides."""
        with self._lock:
            self._overrides.clear()

    def is_registered(self, interface: Type) -> bool:
        """
        Check if an interface is registered.

        Returns:
            True if registered (singleton, transient, or override)
        """
        with self._lock:
            return (
                interface in self._singletons or
                interface in self._transients or
                interface in self._overrides
            )

    def setup_event_handlers(
        self,
        event_publisher,
        event_handler_classes: Optional[List[Type]] = None,
        logger_name: str = "cloudpix",
    ) -> None:
        """
        Subscribe infrastructure event handlers to every domain event.

        Args:
            event_publisher: EventPublisher instance to subscribe handlers to
            event_handler_classes: Handler classes taking a logger; defaults
                to LoggingEventHandler
            logger_name: Name of the logger handed to each handler
        """
        from cloudpix.domain.events import DomainEvent
        from cloudpix.infrastructure.event_handlers.logging_handler import (
            LoggingEventHandler,
        )

        if event_handler_classes is None:
            event_handler_classes = [LoggingEventHandler]

        handler_logger = logging.getLogger(logger_name)
        for handler_class in event_handler_classes:
            handler = handler_class(handler_logger)
            event_publisher.subscribe(DomainEvent, handler.handle)
            logger.debug(f"Registered event handler: {handler_class.__name__}")
