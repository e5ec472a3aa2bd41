"""
PostgreSQL Database Setup Script

Run this script to create the contact distributor tables.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Load environment variables from .env file
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from contact_distributor.core.db import initialize_database, check_database_connection, get_database_stats, close_engine
from contact_distributor.core.logging import setup_logger

logger = setup_logger("INFO")


async def main():
    """Main setup function."""
    print("=" * 70)
    print("PostgreSQL Database Setup for Contact Distributor")
    print("=" * 70)
    print()
    
    try:
        # Step 1: Initialize database
        print("Step 1: Initializing database connection and tables...")
        await initialize_database()
        print("✅ Database initialized")
        print()
        
        # Step 2: Verify connection
        print("Step 2: Verifying database connection...")
        is_available, error = await check_database_connection()
        
        if not is_available:
            print(f"❌ Database connection failed: {error}")
            print()
            print("Troubleshooting:")
            print("1. Make sure PostgreSQL is installed and running")
            print("2. Check your .env file has correct database credentials:")
            print("   DB_HOST=localhost")
            print("   DB_PORT=5432")
            print("   DB_USER=postgres")
            print("   DB_PASS=postgres")
            print("   DB_NAME=contact_distributor")
            print("3. Ensure the database exists:")
            print("   CREATE DATABASE contact_distributor;")
            return 1
        
        print("✅ Database connection verified")
        print()
        
        # Step 3: Get database stats
        stats = await get_database_stats()
        print(f"  Database: {stats.get('database_url', 'unknown')}")
        print(f"  Pool Size: {stats.get('pool_size', 'unknown')}")
        for table, count in stats.get("row_counts", {}).items():
            print(f"  {table}: {count} rows")
        print()
        print("=" * 70)
        print("✅ Database setup complete!")
        print("=" * 70)
        print()
        print("Next steps:")
        print("1. Create an admin: python scripts/db/create_admin.py --email you@example.com")
        print("2. Start the API: uvicorn contact_distributor.main:app --reload")
        return 0
        
    except Exception as e:
        print(f"❌ Setup failed: {str(e)}")
        logger.error(f"Database setup failed: {str(e)}", exc_info=True)
        return 1
    finally:
        await close_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
