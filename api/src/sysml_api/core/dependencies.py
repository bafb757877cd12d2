#!/usr/bin/env python3

from .config import neo4j_config

# Global Neo4j client instance
_neo4j_client = None


def get_neo4j_client():
    """Get or create global Neo4j client instance"""
    global _neo4j_client
    if _neo4j_client is None:
        from ..clients.neo4j_client import Neo4jClient

        _neo4j_client = Neo4jClient(
            neo4j_config.URI,
            neo4j_config.USER,
            neo4j_config.PASSWORD,
            database=neo4j_config.DATABASE,
        )

    return _neo4j_client


def cleanup_connections():
    """Clean up global connections on application shutdown"""
    global _neo4j_client
    if _neo4j_client is not None:
        _neo4j_client.close()
        _neo4j_client = None
