"""
Reference footer ordering and the shared field table.

Run: pytest test_references_fields.py   (or: python test_references_fields.py)
"""
from vaultgraph.fields import MISSING, OutputMode, get_output_mode, to_record, visible_fields
from vaultgraph.references import collect_references
from vaultgraph.schema import Area, Project, Task


def test_references_sorted_and_deduplicated():
    print("\n── Test: Reference Table ──")

    work = Area(path="areas/Work.md", title="Work")
    alpha = Project(path="projects/alpha.md", title="alpha")
    beta = Project(path="projects/Beta.md", title="Beta")
    task = Task(path="tasks/Zed.md", title="Zed", status="ready")

    refs = collect_references(
        areas=[work, None],
        projects=[beta, alpha, beta],
        tasks=[task, task],
    )
    assert [(r.type, r.name) for r in refs] == [
        ("area", "Work"),
        ("project", "alpha"),
        ("project", "Beta"),
        ("task", "Zed"),
    ]
    assert refs[0].model_dump(by_alias=True) == {"name": "Work", "type": "area", "path": "areas/Work.md"}
    print("  ✓ Areas, projects, tasks; case-insensitive by name; one entry per path")

    assert collect_references() == []


def test_output_mode_flags():
    assert get_output_mode() == OutputMode.HUMAN
    assert get_output_mode(ai=True) == OutputMode.AI
    assert get_output_mode(ai=True, json=True) == OutputMode.JSON


def test_task_fields_text_modes():
    print("\n── Test: Field Table ──")

    task = Task(
        path="tasks/Draft.md",
        title="Draft",
        status="InProgress",
        due="2025-06-12",
        project_ref="[[Q1 Planning]]",
        updated_at="2025-06-10T09:00:00Z",
        body="notes",
    )
    fields = visible_fields(task, OutputMode.AI)
    assert fields == [
        ("path", "tasks/Draft.md"),
        ("title", "Draft"),
        ("status", "in-progress"),
        ("created-at", MISSING),
        ("updated-at", "2025-06-10T09:00:00Z"),
        ("due", "2025-06-12"),
        ("project", "[[Q1 Planning]]"),
        ("body", "notes"),
    ]
    print("  ✓ Required fields always shown, optional only when set")

    labels = [label for label, _ in visible_fields(task, OutputMode.HUMAN, include_body=False)]
    assert "body" not in labels
    assert labels[:3] == ["path", "title", "status"]


def test_json_mode_uses_camel_case():
    task = Task(path="t.md", title="T", status="ready", defer_until="2025-06-10")
    record = to_record(task)
    assert list(record) == ["path", "title", "status", "createdAt", "updatedAt", "deferUntil"]
    assert record["createdAt"] is None
    assert record["deferUntil"] == "2025-06-10"

    project = Project(path="p.md", title="P", blocked_by=["[[A]]", "[[B]]"], start_date="2025-01-01")
    assert to_record(project) == {
        "path": "p.md", "title": "P", "startDate": "2025-01-01", "blockedBy": ["[[A]]", "[[B]]"]
    }
    assert dict(visible_fields(project, OutputMode.HUMAN))["blocked-by"] == "[[A]], [[B]]"

    area = Area(path="a.md", title="A", area_type="personal", status="active")
    assert to_record(area, include_body=False) == {
        "path": "a.md", "title": "A", "status": "active", "areaType": "personal"
    }


def test_unknown_entity_rejected():
    try:
        visible_fields(object())
    except ValueError:
        return
    raise AssertionError("Should have raised ValueError")


def main():
    print("=" * 60)
    print("  REFERENCES AND FIELDS")
    print("=" * 60)

    test_references_sorted_and_deduplicated()
    test_output_mode_flags()
    test_task_fields_text_modes()
    test_json_mode_uses_camel_case()
    test_unknown_entity_rejected()

    print("\n  ✓ ALL TESTS PASSED")


if __name__ == "__main__":
    main()
