"""
Repositories: Database operations for admins, agents and distributions

Provides async operations over the PostgreSQL tables. AgentRepository and
DistributionRepository also serve as the agent roster and distribution store
used by the ingestion pipeline.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from contact_distributor.core.db.models import AdminUser, Agent, Distribution
from contact_distributor.core.db.postgres import get_session
from contact_distributor.core.logging import setup_logger

logger = setup_logger("INFO")


class AdminUserRepository:
    """Repository for administrator accounts."""

    @staticmethod
    async def get_by_email(email: str) -> Optional[AdminUser]:
        async with get_session() as session:
            query = select(AdminUser).where(AdminUser.email == email)
            result = await session.execute(query)
            return result.scalar_one_or_none()

    @staticmethod
    async def create_admin(email: str, password_hash: str, name: str = "Admin", role: str = "admin") -> AdminUser:
        async with get_session() as session:
            admin = AdminUser(email=email, password_hash=password_hash, name=name, role=role)

            session.add(admin)
            await session.commit()
            await session.refresh(admin)

            logger.info(f"✅ Created admin user: {email}")

            return admin


class AgentRepository:
    """Repository for the agent roster."""

    @staticmethod
    async def create_agent(
        name: str,
        email: str,
        mobile: str,
        password_hash: str
    ) -> Agent:
        """
        Create a new agent.

        Args:
            name: Display name
            email: Unique login email
            mobile: Mobile number with country code
            password_hash: bcrypt hash of the agent password

        Returns:
            Created Agent object
        """
        async with get_session() as session:
            agent = Agent(
                name=name,
                email=email,
                mobile=mobile,
                password_hash=password_hash,
            )

            session.add(agent)
            await session.commit()
            await session.refresh(agent)

            logger.info(f"✅ Created agent: {agent.id} ({name})")

            return agent

    @staticmethod
    async def get_agent_by_email(email: str) -> Optional[Agent]:
        """Get agent by email (for duplicate detection)."""
        async with get_session() as session:
            query = select(Agent).where(Agent.email == email)
            result = await session.execute(query)
            return result.scalar_one_or_none()

    @staticmethod
    async def list_agents() -> List[Agent]:
        """List all agents in creation order."""
        async with get_session() as session:
            query = select(Agent).order_by(Agent.created_at.asc(), Agent.id.asc())
            result = await session.execute(query)
            return list(result.scalars().all())


class DistributionRepository:
    """
    Repository for distributions.

    delete_all and insert_many only run inside unit_of_work(), which holds
    one database transaction: both commit together or neither does.
    """

    def __init__(self):
        self._session: Optional[AsyncSession] = None

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[AsyncSession]:
        async with get_session() as session:
            async with session.begin():
                self._session = session
                try:
                    yield session
                finally:
                    self._session = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("DistributionRepository used outside unit_of_work()")
        return self._session

    async def delete_all(self) -> None:
        session = self._require_session()
        result = await session.execute(delete(Distribution))
        logger.info(f"Deleted {result.rowcount} previous distributions")

    async def insert_many(self, distributions) -> int:
        """
        Add one Distribution row per planned agent chunk.

        Args:
            distributions: AgentDistribution items from the distribution engine

        Returns:
            Number of rows written
        """
        session = self._require_session()
        rows = [
            Distribution(agent_id=item.agent_id, records=item.records_as_dicts())
            for item in distributions
        ]
        session.add_all(rows)
        await session.flush()
        return len(rows)

    @staticmethod
    async def list_distributions() -> List[Distribution]:
        """List distributions with their agent, in agent creation order."""
        async with get_session() as session:
            query = (
                select(Distribution)
                .join(Distribution.agent)
                .options(selectinload(Distribution.agent))
                .order_by(Agent.created_at.asc(), Agent.id.asc())
            )
            result = await session.execute(query)
            return list(result.scalars().all())
