#!/usr/bin/env python3
"""Find assignments and quizzes whose stream item is missing or of the wrong type"""
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from classwork.core.config import get_settings
from classwork.schemas.classwork import ClassworkSnapshot
from classwork.services.classwork_source import create_classwork_source
from classwork.services.errors import ClassworkDataError, ClassworkSourceError
from classwork.services.visibility import ExclusionReason, explain


def find_broken_references(snapshot: ClassworkSnapshot):
    """(work, problem) pairs for every work item that cannot resolve its stream item"""
    # Reference checks come first in the resolver and do not depend on the student
    decisions = explain("", None, None, snapshot.stream_items, snapshot.work)

    broken = []
    for decision in decisions:
        if decision.reason is not ExclusionReason.ORPHANED_REFERENCE:
            continue
        work = decision.work
        if decision.stream_item is None:
            broken.append((work, f"stream item {work.stream_item_id} not found"))
        else:
            broken.append((work, f"stream item {decision.stream_item.id} is a {decision.stream_item.type}"))
    return broken


async def check_integrity() -> int:
    settings = get_settings()
    source = create_classwork_source(settings)
    try:
        snapshot = await source.load()
    finally:
        await source.close()

    print(f"Checking {len(snapshot.assignments)} assignments and {len(snapshot.quizzes)} quizzes")
    broken = find_broken_references(snapshot)

    if not broken:
        print("✓ Every work item resolves to a stream item of its type")
        return 0

    for work, problem in broken:
        print(f"❌ {work.kind} {work.id}: {problem}")
    print(f"\n{len(broken)} orphaned work items")
    return 2


def main():
    logging.basicConfig(
        level=logging.ERROR,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    try:
        sys.exit(asyncio.run(check_integrity()))
    except (ClassworkSourceError, ClassworkDataError) as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
