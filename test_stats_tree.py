"""
Status counts, tree rendering and area task totals.

Run: pytest test_stats_tree.py   (or: python test_stats_tree.py)
"""
from vaultgraph.schema import Project, Task
from vaultgraph.stats import (
    PROJECT_STATUS_GROUPS,
    count_tasks_by_status,
    format_task_count_shorthand,
    group_projects_by_status,
    group_tasks_by_status,
)
from vaultgraph.tree import (
    TreeNode,
    build_area_tree,
    calculate_area_task_count,
    format_project_one_liner,
    render_tree,
)


def _task(name, status="ready"):
    return Task(path=f"tasks/{name}.md", title=name, status=status)


def test_task_count_shorthand():
    print("\n── Test: Status Shorthand ──")

    tasks = [_task("a", "in-progress"), _task("b", "in-progress"), _task("c", "blocked"), _task("d", "done")]
    counts = count_tasks_by_status(tasks)
    assert (counts.in_progress, counts.ready, counts.inbox, counts.blocked) == (2, 0, 0, 1)
    assert counts.total == 3
    assert format_task_count_shorthand(counts) == "(2 in-progress, 1 blocked)"
    assert format_task_count_shorthand(count_tasks_by_status([_task("x", "done")])) == ""
    print("  ✓ Zero counts omitted, empty when nothing is active")


def test_grouping_keys_and_order():
    projects = [
        Project(path="p/1.md", title="1", status="paused"),
        Project(path="p/2.md", title="2"),
        Project(path="p/3.md", title="3", status="in-progress"),
        Project(path="p/4.md", title="4", status="paused"),
    ]
    groups = group_projects_by_status(projects)
    assert list(groups) == PROJECT_STATUS_GROUPS
    assert [p.path for p in groups["paused"]] == ["p/1.md", "p/4.md"]
    assert [p.path for p in groups["unset"]] == ["p/2.md"]
    assert groups["done"] == []

    tasks = [_task("a", "inbox"), _task("b", "blocked"), _task("c", "icebox")]
    task_groups = group_tasks_by_status(tasks)
    assert list(task_groups) == ["in-progress", "blocked", "ready", "inbox"]
    assert [t.title for t in task_groups["inbox"]] == ["a"]
    assert sum(len(v) for v in task_groups.values()) == 2


def test_render_tree_connectors():
    print("\n── Test: Tree Connectors ──")

    root = TreeNode(children=[
        TreeNode(content="A", children=[TreeNode(content="A1"), TreeNode(content="A2")]),
        TreeNode(content="B", children=[TreeNode(content="B1")]),
    ])
    assert render_tree(root) == [
        "├── A",
        "│   ├── A1",
        "│   └── A2",
        "└── B",
        "    └── B1",
    ]
    assert render_tree(TreeNode(content="Root", children=[TreeNode(content="x")])) == ["Root", "└── x"]
    assert render_tree(TreeNode()) == []
    print("  ✓ Pipes under non-last siblings, blanks under the last")


def test_project_one_liner():
    project = Project(path="p/Q1.md", title="Q1 Planning", status="InProgress")
    tasks = [_task("a", "in-progress"), _task("b", "in-progress"), _task("c", "blocked")]
    assert format_project_one_liner(project, tasks) == "🔵 Q1 Planning [in-progress] — 3 tasks (2 in-progress, 1 blocked)"

    bare = Project(path="p/Bare.md", title="Bare")
    assert format_project_one_liner(bare, [_task("z", "ready")]) == "Bare — 1 task (1 ready)"
    assert format_project_one_liner(bare, []) == "Bare — 0 tasks"


def test_area_tree():
    print("\n── Test: Area Tree ──")

    web = Project(path="p/Web.md", title="Web", status="ready")
    ops = Project(path="p/Ops.md", title="Ops", status="blocked")
    project_tasks = {
        web.path: [_task("Design", "in-progress"), _task("Copy", "inbox")],
        ops.path: [],
    }
    direct = [_task("Call bank", "in-progress"), _task("File taxes", "ready")]

    lines = render_tree(build_area_tree([web, ops], project_tasks, direct))
    assert lines == [
        "├── 🟢 Web [ready] — 2 tasks (1 in-progress, 1 inbox)",
        "│   └── ▶️ Design",
        "├── 🚫 Ops [blocked] — 0 tasks",
        "└── 📋 Direct: 2 tasks (1 in-progress, 1 ready)",
        "    └── ▶️ Call bank",
    ]

    no_direct = render_tree(build_area_tree([ops], project_tasks, []))
    assert no_direct == ["└── 🚫 Ops [blocked] — 0 tasks"]
    print("  ✓ Projects, in-progress tasks and the direct block")


def test_area_task_count():
    project_tasks = {"p/1.md": [_task("a"), _task("b")], "p/2.md": [_task("c")]}
    direct = [_task("d")]

    count = calculate_area_task_count(project_tasks, direct)
    assert (count.direct, count.via_projects, count.total) == (1, 3, 4)
    assert count.total == count.direct + count.via_projects

    only_first = calculate_area_task_count(project_tasks, direct, [Project(path="p/1.md", title="1")])
    assert (only_first.via_projects, only_first.total) == (2, 3)


def main():
    print("=" * 60)
    print("  STATS AND TREES")
    print("=" * 60)

    test_task_count_shorthand()
    test_grouping_keys_and_order()
    test_render_tree_connectors()
    test_project_one_liner()
    test_area_tree()
    test_area_task_count()

    print("\n  ✓ ALL TESTS PASSED")


if __name__ == "__main__":
    main()
