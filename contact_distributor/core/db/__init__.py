"""
Database module initialization.
"""

from .postgres import (
    Base,
    init_engine,
    create_tables,
    get_session,
    check_database_connection,
    get_database_stats,
    close_engine,
    initialize_database,
    get_database_url
)

from .repository import (
    AdminUserRepository,
    AgentRepository,
    DistributionRepository,
)

__all__ = [
    "Base",
    "init_engine",
    "create_tables",
    "get_session",
    "check_database_connection",
    "get_database_stats",
    "close_engine",
    "initialize_database",
    "get_database_url",
    "AdminUserRepository",
    "AgentRepository",
    "DistributionRepository",
]
