#!/usr/bin/env python3
"""
Configuration settings for the SysML modeling API.

Every value can be overridden via environment variables; the defaults match
a local docker-compose setup (Neo4j on bolt://localhost:7687, Vite dev
server on port 5173).
"""

import logging

from .env_utils import getenv_clean, getenv_int, getenv_list

logger = logging.getLogger(__name__)


class Neo4jConfig:
    """Neo4j connection configuration.

    The pool settings are passed straight to ``GraphDatabase.driver``.
    """

    URI = getenv_clean("NEO4J_URI", "bolt://localhost:7687")
    USER = getenv_clean("NEO4J_USER", "neo4j")
    PASSWORD = getenv_clean("NEO4J_PASSWORD", "password")
    DATABASE = getenv_clean("NEO4J_DATABASE", "neo4j")

    # Connection pool limits
    MAX_CONNECTION_POOL_SIZE = getenv_int("NEO4J_MAX_POOL_SIZE", 50)
    CONNECTION_ACQUISITION_TIMEOUT = getenv_int("NEO4J_ACQUISITION_TIMEOUT", 60)  # seconds

    @classmethod
    def driver_options(cls) -> dict[str, int]:
        """Keyword arguments for the Neo4j driver constructor."""
        return {
            "max_connection_pool_size": cls.MAX_CONNECTION_POOL_SIZE,
            "connection_acquisition_timeout": cls.CONNECTION_ACQUISITION_TIMEOUT,
        }


# Singleton instance
neo4j_config = Neo4jConfig()


class ServerConfig:
    """HTTP server configuration."""

    CORS_ORIGINS = getenv_list("CORS_ORIGINS", ["http://localhost:5173"])
    APP_VERSION = getenv_clean("APP_VERSION", "unknown")
    HOST = getenv_clean("API_HOST", "0.0.0.0")  # nosec B104
    PORT = getenv_int("API_PORT", 8000)


# Singleton instance
server_config = ServerConfig()
