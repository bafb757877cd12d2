#!/usr/bin/env python3
"""
Neo4j Database Client

A low-level client wrapper for Neo4j graph database operations.
Handles connection management and query execution.

This client is pure infrastructure - it contains no business logic.
SysML element and diagram semantics live in the services layer.
"""

import logging
from typing import Any

from neo4j import GraphDatabase

from ..core.config import neo4j_config

logger = logging.getLogger(__name__)


class Neo4jClient:
    """
    Neo4j database client with connection pooling.

    Example:
        ```python
        client = Neo4jClient()
        rows = client.query("MATCH (n:SysMLElement) RETURN n.id AS id LIMIT 10")
        client.close()
        ```

    Environment Variables:
        - NEO4J_URI: Database connection URI (default: bolt://localhost:7687)
        - NEO4J_USER: Authentication username (default: neo4j)
        - NEO4J_PASSWORD: Authentication password (default: password)
        - NEO4J_DATABASE: Target database name (default: neo4j)
    """

    def __init__(self, uri: str = None, user: str = None, password: str = None, database: str = None):
        """
        Initialize Neo4j client with connection parameters.

        Args:
            uri: Database connection URI. If None, uses Neo4jConfig.URI.
            user: Authentication username. If None, uses Neo4jConfig.USER.
            password: Authentication password. If None, uses Neo4jConfig.PASSWORD.
            database: Database to open sessions against. If None, uses Neo4jConfig.DATABASE.
        """
        self.uri = uri or neo4j_config.URI
        self.user = user or neo4j_config.USER
        self.password = password or neo4j_config.PASSWORD
        self.database = database or neo4j_config.DATABASE
        self.driver = GraphDatabase.driver(
            self.uri,
            auth=(self.user, self.password),
            **neo4j_config.driver_options(),
        )

    def query(self, cypher_query: str, parameters: dict | None = None) -> list[dict[str, Any]]:
        """
        Execute a Cypher query and return raw record data.

        Args:
            cypher_query: Cypher query string to execute
            parameters: Optional query parameters for parameterized queries

        Returns:
            List of dictionaries, one per record, mapping column names to values.

        Example:
            ```python
            rows = client.query(
                "MATCH (n:SysMLElement {id: $id}) RETURN n.name AS name",
                parameters={"id": "engine"}
            )
            # Returns: [{"name": "Engine"}]
            ```

        Raises:
            neo4j.exceptions.CypherSyntaxError: If query syntax is invalid
            neo4j.exceptions.ClientError: If query execution fails
        """
        with self.driver.session(database=self.database) as session:
            result = session.run(cypher_query, parameters or {})
            return [record.data() for record in result]

    def verify_connectivity(self) -> None:
        """
        Check that the database is reachable.

        Raises:
            neo4j.exceptions.ServiceUnavailable: If the server cannot be reached
        """
        self.driver.verify_connectivity()
        logger.info(f"Neo4j connection verified at {self.uri}")

    def close(self):
        """
        Close the driver connection and release resources.

        The client is unusable after calling this method.
        """
        if self.driver:
            self.driver.close()
