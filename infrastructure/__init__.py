"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - persistence: Document persistence abstraction (database, in-memory)
    - notifications: Customer notification abstraction (email, mock)
    - storage: Durable key-value storage abstraction (Django cache, in-memory)

This package enables:
    - Easy testing with mock implementations
    - Switching between providers without code changes
    - Loose coupling between business logic and infrastructure
"""
