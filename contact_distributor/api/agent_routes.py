"""
Agent roster API routes.
Agents are listed in creation order, the order used for list distribution.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from contact_distributor.core.db.repository import AgentRepository
from contact_distributor.core.logging import setup_logger
from contact_distributor.core.security import hash_password, require_admin

logger = setup_logger()

router = APIRouter(prefix="/api/agents", tags=["Agents"], dependencies=[Depends(require_admin)])


class AgentCreateRequest(BaseModel):
    """Request model for creating an agent."""
    name: str = Field(..., min_length=1, description="Agent display name")
    email: str = Field(..., min_length=3, description="Unique agent email")
    mobile: str = Field(..., min_length=1, description="Mobile number with country code")
    password: str = Field(..., min_length=1, description="Agent password")


@router.post("", status_code=201)
async def add_agent(request: AgentCreateRequest):
    """
    Add a new agent to the roster.

    Returns the created agent without its password.
    """
    try:
        existing = await AgentRepository.get_agent_by_email(request.email)
        if existing:
            raise HTTPException(
                status_code=400,
                detail="An agent with this email already exists"
            )

        agent = await AgentRepository.create_agent(
            name=request.name.strip(),
            email=request.email.strip(),
            mobile=request.mobile.strip(),
            password_hash=hash_password(request.password)
        )

        return {
            "message": "Agent added successfully",
            "agent": agent.to_dict()
        }

    except HTTPException:
        raise
    except IntegrityError:
        # Lost a race with a concurrent create for the same email
        raise HTTPException(status_code=400, detail="An agent with this email already exists")
    except Exception as e:
        logger.error(f"Error adding agent: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to add agent")


@router.get("")
async def list_agents():
    """List all agents in creation order."""
    try:
        agents = await AgentRepository.list_agents()
        logger.info(f"Found {len(agents)} agents")
        return [agent.to_dict() for agent in agents]
    except Exception as e:
        logger.error(f"Error fetching agents: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch agents")
