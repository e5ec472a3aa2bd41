"""
Distribution engine - splits canonical records across agents and replaces
the stored distribution.

Partitioning is equal-size contiguous chunking:

    chunk_size = ceil(len(records) / len(agents))
    agent i gets records[i * chunk_size:(i + 1) * chunk_size]

Agents are taken in the order given (roster creation order), input order is
kept inside each chunk, and agents whose slice is empty get no distribution.

Persistence is delete-all then insert, run inside the store's unit of work.
A transactional store rolls the delete back when the insert fails; a store
without transactions is left empty after a failed insert. Either way the
caller gets DistributionPersistError and must not assume any distribution
exists.
"""

import math
from dataclasses import dataclass, field
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, Sequence
from contact_distributor.core.logging import setup_logger
from contact_distributor.ingestion.errors import NoAgentsError, DistributionPersistError
from contact_distributor.ingestion.normalize import CanonicalRecord

logger = setup_logger()


class AgentLike(Protocol):
    id: Any
    name: str


@dataclass
class AgentDistribution:
    """Records assigned to one agent in one run."""
    agent_id: Any
    agent_name: str
    records: List[CanonicalRecord] = field(default_factory=list)

    def records_as_dicts(self) -> List[Dict[str, str]]:
        return [record.to_dict() for record in self.records]


@dataclass(frozen=True)
class DistributionSummary:
    total_records: int
    agents_count: int
    records_per_agent: int
    distributions_created: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalRecords": self.total_records,
            "agentsCount": self.agents_count,
            "recordsPerAgent": self.records_per_agent,
            "distributionsCreated": self.distributions_created
        }


class DistributionStore(Protocol):
    """Where distributions are persisted."""

    def unit_of_work(self) -> AsyncContextManager[Any]:
        ...

    async def delete_all(self) -> None:
        ...

    async def insert_many(self, distributions: List[AgentDistribution]) -> int:
        ...


def compute_chunk_size(total_records: int, agents_count: int) -> int:
    if agents_count <= 0:
        raise NoAgentsError("No agents found to distribute the data")
    return math.ceil(total_records / agents_count)


def partition_records(
    records: Sequence[CanonicalRecord],
    agents: Sequence[AgentLike],
    chunk_size: Optional[int] = None
) -> List[AgentDistribution]:
    """
    Split records into contiguous per-agent chunks.

    Args:
        records: Canonical records in upload order
        agents: Agents in roster order
        chunk_size: Records per agent, computed from the counts when omitted

    Returns:
        One AgentDistribution per agent with a non-empty chunk, in agent order

    Raises:
        NoAgentsError: If agents is empty
    """
    if chunk_size is None:
        chunk_size = compute_chunk_size(len(records), len(agents))

    plan = []
    for i, agent in enumerate(agents):
        chunk = list(records[i * chunk_size:(i + 1) * chunk_size])
        if not chunk:
            continue
        plan.append(AgentDistribution(agent_id=agent.id, agent_name=agent.name, records=chunk))
    return plan


async def distribute(
    records: Sequence[CanonicalRecord],
    agents: Sequence[AgentLike],
    store: DistributionStore
) -> DistributionSummary:
    """
    Partition records across agents and replace all stored distributions.

    Args:
        records: Canonical records to hand out
        agents: Roster snapshot taken at the start of the run
        store: Distribution store

    Returns:
        DistributionSummary of the completed run

    Raises:
        NoAgentsError: If agents is empty (store untouched)
        DistributionPersistError: If clearing or writing distributions fails
    """
    if not agents:
        logger.warning(f"No agents available, {len(records)} records not distributed")
        raise NoAgentsError(
            "No agents found to distribute the data",
            details={"total_records": len(records)}
        )

    chunk_size = compute_chunk_size(len(records), len(agents))
    plan = partition_records(records, agents, chunk_size)

    logger.info(
        f"Distribution started for {len(records)} records among {len(agents)} agents "
        f"(chunk size: {chunk_size})"
    )

    try:
        async with store.unit_of_work():
            try:
                await store.delete_all()
            except Exception as e:
                logger.error(f"Error clearing previous distributions: {str(e)}")
                raise DistributionPersistError(
                    "Failed to clear previous distributions",
                    details={"stage": "delete", "error_type": type(e).__name__}
                ) from e
            logger.info("Cleared previous distributions")

            try:
                created = await store.insert_many(plan)
            except Exception as e:
                logger.error(f"Error inserting distributions: {str(e)}")
                raise DistributionPersistError(
                    "Failed to save distributions to database",
                    details={"stage": "insert", "error_type": type(e).__name__}
                ) from e
    except DistributionPersistError:
        raise
    except Exception as e:
        logger.error(f"Error committing distributions: {str(e)}")
        raise DistributionPersistError(
            "Failed to save distributions to database",
            details={"stage": "commit", "error_type": type(e).__name__}
        ) from e

    for item in plan:
        logger.info(f"Assigned {len(item.records)} records to agent {item.agent_name}")

    summary = DistributionSummary(
        total_records=len(records),
        agents_count=len(agents),
        records_per_agent=chunk_size,
        distributions_created=created
    )
    logger.info(f"Successfully created {created} distributions")
    return summary
