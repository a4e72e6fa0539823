#!/usr/bin/env python3
"""
Verify the database connection and that the classwork tables are readable
"""
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import text

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from classwork.core.config import get_settings
from classwork.core.database import Database
from classwork.services.errors import ClassworkSourceError

TABLES = ["users", "class_members", "stream_items", "assignments", "quizzes",
          "assignment_students", "quiz_students"]


async def check_connection() -> bool:
    try:
        database = Database.from_settings(get_settings())
    except ClassworkSourceError as e:
        print(f"❌ ERROR: {e}")
        print("   Please set DATABASE_URL in your .env file")
        return False

    print("🔄 Testing database connection...")
    ok = True
    try:
        async with database.session() as session:
            result = await session.execute(text("SELECT version()"))
            print(f"✅ Connected: {result.scalar()}")

            for table in TABLES:
                try:
                    count = await session.execute(text(f"SELECT COUNT(*) FROM {table}"))
                    print(f"   {table}: {count.scalar()} rows")
                except Exception as e:
                    ok = False
                    print(f"❌ {table}: {e}")
                    await session.rollback()
    except Exception as e:
        print(f"❌ Connection failed: {e}")
        return False
    finally:
        await database.dispose()

    return ok


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_connection()) else 1)
