"""
Quick script to check the current distribution in PostgreSQL.
"""
import asyncio
from contact_distributor.core.db import init_engine, close_engine
from contact_distributor.core.db.repository import AgentRepository, DistributionRepository

async def check():
    # Initialize database (not async)
    init_engine()
    
    try:
        agents = await AgentRepository.list_agents()
        distributions = await DistributionRepository.list_distributions()
    finally:
        await close_engine()
    
    print(f'\n📊 PostgreSQL Database Status')
    print(f'=' * 60)
    print(f'Total agents: {len(agents)}')
    print(f'Total distributions: {len(distributions)}')
    
    if distributions:
        print(f'\n📄 Distributions:')
        for distribution in distributions:
            print(f'  - {distribution.agent.name} ({distribution.agent.email}) - {len(distribution.records)} records')
    else:
        print('\n⚠️  No distributions found!')
        print('   Upload a contact list once at least one agent exists.')
    
    return len(distributions)

if __name__ == "__main__":
    count = asyncio.run(check())
    print(f'\nResult: {count} distributions found in PostgreSQL')
