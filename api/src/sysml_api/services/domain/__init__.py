"""
Domain Layer

This package contains the mapping logic between the SysML domain model and
the graph store. Domain modules are pure: they never touch the database
(use the clients layer for that) and never raise on malformed stored data.

Domains:
- sysml: kind translation, property codec, and viewpoint catalog
"""
