import logging

from backend.storage import EntityStore
from vaultgraph.context import (
    build_area_context,
    build_project_context,
    build_task_context,
    build_vault_overview,
    to_json,
)
from vaultgraph.date_utils import get_today
from vaultgraph.fields import OutputMode, visible_fields
from vaultgraph.tree import render_tree


def demo_store(today: str) -> EntityStore:
    return EntityStore.from_records(
        areas=[
            {"path": "areas/Work.md", "title": "Work", "status": "active", "areaType": "work"},
            {"path": "areas/Health.md", "title": "Health"},
            {"path": "areas/Old Job.md", "title": "Old Job", "status": "archived"},
        ],
        projects=[
            {"path": "projects/Q1 Planning.md", "title": "Q1 Planning", "status": "InProgress",
             "areaRef": "[[Work]]", "startDate": "2025-01-06"},
            {"path": "projects/Website.md", "title": "Website", "status": "planning", "areaRef": "Work"},
            {"path": "projects/Marathon.md", "title": "Marathon", "status": "ready", "areaRef": "[[Health]]"},
            {"path": "projects/Side Thing.md", "title": "Side Thing"},
        ],
        tasks=[
            {"path": "tasks/Draft goals.md", "title": "Draft goals", "status": "in-progress",
             "projectRef": "[[Q1 Planning]]", "due": today,
             "createdAt": f"{today}T08:00:00Z", "updatedAt": f"{today}T09:00:00Z"},
            {"path": "tasks/Budget review.md", "title": "Budget review", "status": "ready",
             "projectRef": "[[Q1 Planning|Q1]]", "due": "2000-01-01"},
            {"path": "tasks/Pick theme.md", "title": "Pick theme", "status": "blocked",
             "projectRef": "[[Website]]"},
            {"path": "tasks/Book physio.md", "title": "Book physio", "status": "inbox",
             "areaRef": "[[Health]]", "deferUntil": today},
            {"path": "tasks/Stretch.md", "title": "Stretch", "status": "in-progress",
             "areaRef": "Health"},
            {"path": "tasks/Lost.md", "title": "Lost", "status": "ready",
             "areaRef": "[[Nonexistent]]"},
            {"path": "tasks/archive/Old.md", "title": "Old", "status": "ready",
             "projectRef": "[[Q1 Planning]]"},
            {"path": "tasks/Shipped.md", "title": "Shipped", "status": "done",
             "projectRef": "[[Website]]"},
        ],
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    today = get_today()
    store = demo_store(today)
    print("today:", today)
    print("entities:", len(store))

    # 1) Vault overview
    overview = build_vault_overview(store, today)
    print("stats:", overview.stats.model_dump())
    print("orphan_tasks:", [t.title for t in overview.orphan_tasks])
    print("orphan_projects:", [p.title for p in overview.orphan_projects])
    print("overdue:", [t.title for t in overview.timeline.overdue])
    print("due_today:", [t.title for t in overview.timeline.due_today])
    print("newly_actionable:", [t.title for t in overview.timeline.newly_actionable])
    for message in overview.warnings:
        print("warning:", message)

    # 2) Area context
    work = store.find_area_by_title("Work")
    area_ctx = build_area_context(work, store, today)
    print(f"\n{work.title} ({area_ctx.task_count.total} tasks)")
    for line in render_tree(area_ctx.tree):
        print(line)

    # 3) Project context
    q1 = store.find_project_by_title("[[Q1 Planning]]")
    project_ctx = build_project_context(q1, store, today)
    print("\nproject:", q1.title, "area:", project_ctx.area.title if project_ctx.area else None)
    print("tasks_by_status:", {k: len(v) for k, v in project_ctx.tasks_by_status.items()})
    print("blocked_count:", project_ctx.stats.blocked_count)

    # 4) Task context
    task_ctx = build_task_context(store.find_task("tasks/Lost.md"), store, today)
    for label, value in visible_fields(task_ctx.task, OutputMode.AI, include_body=False):
        print(f"  {label}: {value}")
    print("task_warnings:", task_ctx.warnings)

    # Show the JSON form of one result
    print("\n" + to_json(task_ctx))


if __name__ == "__main__":
    main()
