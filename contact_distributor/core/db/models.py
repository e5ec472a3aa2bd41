"""
Database Models: Tables for the Contact Distributor

Tables:
- admin_users: Administrators allowed to log in and upload lists
- agents: Sales/call agents that receive contacts
- distributions: Contact records assigned to one agent by the latest upload

Design:
- Agents are ordered by (created_at, id); that order drives chunk assignment
- Distribution records are stored as a JSON array of {firstName, phone, notes}
- Deleting an agent removes its distribution (ON DELETE CASCADE)
"""

from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey, Index, inspect
from sqlalchemy.orm import relationship
from datetime import datetime
from contact_distributor.core.db.postgres import Base


class AdminUser(Base):
    """
    Administrator accounts.

    Password is stored as a bcrypt hash only.
    """
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, default="Admin")
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="admin")

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Agent(Base):
    """
    Agent roster table.

    The distribution engine only reads id and name.
    """
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    mobile = Column(String(50), nullable=False)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    distributions = relationship("Distribution", back_populates="agent", cascade="all, delete-orphan")

    def to_dict(self):
        """Convert to dictionary for API responses (never includes the password hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "mobile": self.mobile,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Distribution(Base):
    """
    Distribution table.

    One row per agent per distribution run. The whole table is replaced by
    every successful upload.
    """
    __tablename__ = "distributions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    agent_id = Column(Integer, ForeignKey("agents.id", ondelete="CASCADE"), nullable=False, index=True)

    # Ordered list of {firstName, phone, notes}
    records = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationship
    agent = relationship("Agent", back_populates="distributions")

    # Indexes
    __table_args__ = (
        Index('idx_distributions_agent_created', 'agent_id', 'created_at'),
    )

    def to_dict(self):
        """Convert to dictionary, with agent summary when loaded."""
        agent = None
        # Only use the relationship when already loaded; lazy loads fail on async sessions
        if "agent" not in inspect(self).unloaded and self.agent is not None:
            agent = {
                "id": self.agent.id,
                "name": self.agent.name,
                "email": self.agent.email,
            }

        return {
            "id": self.id,
            "agentId": agent or self.agent_id,
            "data": list(self.records or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
