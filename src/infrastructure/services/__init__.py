"""Infrastructure Services.

Concrete implementations of domain service interfaces that deal with
technical concerns.

Service Categories:
- Events: Domain event publishing and handling
"""

from .event_publisher import InMemoryEventPublisher

__all__ = ["InMemoryEventPublisher"]
