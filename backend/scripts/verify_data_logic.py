#!/usr/bin/env python3
"""Show which assignments and quizzes a student sees, and which stay hidden in their classes"""
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from classwork.core.config import get_settings
from classwork.schemas.classwork import WorkKind
from classwork.services.classwork_source import create_classwork_source
from classwork.services.errors import ClassworkDataError, ClassworkSourceError
from classwork.services.student_classwork import StudentClassworkService
from classwork.services.visibility import hidden_work, summarize


def distribution_label(work) -> str:
    if work.assign_to_all:
        return "ALL"
    return f"GROUP ({', '.join(work.assigned_groups)})"


async def verify(student_id: str, group: str = None):
    settings = get_settings()
    source = create_classwork_source(settings)
    try:
        snapshot = await source.load(student_id)
    finally:
        await source.close()

    group = StudentClassworkService.resolve_group(snapshot, student_id, group)
    print(f"Checking for student {student_id} in group {group}")

    class_ids = sorted({m.class_id for m in snapshot.memberships if m.student_id == student_id})
    print(f"Student is in {len(class_ids)} classes: {class_ids}")

    decisions = StudentClassworkService.decisions(snapshot, student_id, group)

    for kind, label in ((WorkKind.ASSIGNMENT, "assignments"), (WorkKind.QUIZ, "quizzes")):
        visible = [d for d in decisions if d.visible and d.work.kind == kind]
        print(f"\n--- Checking {label.capitalize()} ---")
        print(f"Found {len(visible)} visible {label}.")
        for d in visible:
            print(f"- [{d.stream_item.title}] ({distribution_label(d.work)}) Class: {d.stream_item.class_id}")

    print("\n--- Checking for work in student's classes that is HIDDEN ---")
    for d in hidden_work(decisions):
        print(
            f"HIDDEN in Class {d.stream_item.class_id}: [{d.stream_item.title}] "
            f"({d.work.kind}, AssignToAll: {d.work.assign_to_all}, Groups: {list(d.work.assigned_groups)})"
        )

    report = summarize(decisions)
    print(f"\n{report.visible} of {report.total} work items visible")
    for reason, count in sorted(report.excluded.items(), key=lambda item: item[0].value):
        print(f"  - excluded ({reason}): {count}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/verify_data_logic.py <student_id> [group]")
        print("\nThe data source is taken from CLASSWORK_SOURCE (json, sql or supabase)")
        sys.exit(1)

    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    student_id = sys.argv[1]
    group = sys.argv[2] if len(sys.argv) > 2 else None
    try:
        asyncio.run(verify(student_id, group))
    except (ClassworkSourceError, ClassworkDataError) as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
