"""
Client Layer

This package contains low-level client wrappers for external services.
Clients handle communication with external systems but contain no business logic.

Modules:
- neo4j_client: Neo4j graph database client
"""

from .neo4j_client import Neo4jClient

__all__ = [
    'Neo4jClient',
]
