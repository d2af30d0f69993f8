"""Built-in layout library.

Every layout sits on the 24-column grid; rows are counted from the top. Blocks
never overlap and each block title becomes a ``## `` section of the board.
"""

from pathlib import Path
from typing import Any

import yaml

from boardsync.dsl.schema import LayoutInfo
from boardsync.errors import ConfigurationError


def _block(title: str, x: int, y: int, w: int, h: int) -> dict[str, Any]:
    return {"title": title, "x": x, "y": y, "w": w, "h": h}


BUILT_IN_LAYOUTS: dict[str, list[dict[str, Any]]] = {
    # Four 12x12 quadrants: do, schedule, delegate, drop.
    "layout_eisenhower": [
        _block("Urgent and Important", 0, 0, 12, 12),
        _block("Not urgent but Important", 12, 0, 12, 12),
        _block("Urgent but Not important", 0, 12, 12, 12),
        _block("Neither urgent nor important", 12, 12, 12, 12),
    ],
    "layout_gtd": [
        _block("Inbox", 0, 0, 12, 8),
        _block("Next Actions", 12, 0, 12, 8),
        _block("Waiting For", 0, 8, 8, 8),
        _block("Projects", 8, 8, 8, 8),
        _block("Someday Maybe", 16, 8, 8, 8),
        _block("Reference", 0, 16, 24, 8),
    ],
    "layout_kanban": [
        _block("To Do", 0, 0, 8, 24),
        _block("In Progress", 8, 0, 8, 24),
        _block("Done", 16, 0, 8, 24),
    ],
    "layout_weekly": [
        _block("Monday", 0, 0, 6, 12),
        _block("Tuesday", 6, 0, 6, 12),
        _block("Wednesday", 12, 0, 6, 12),
        _block("Thursday", 18, 0, 6, 12),
        _block("Friday", 0, 12, 8, 12),
        _block("Weekend", 8, 12, 8, 12),
        _block("Notes", 16, 12, 8, 12),
    ],
    "layout_daily": [
        _block("Daily Goals", 0, 0, 12, 8),
        _block("Priority Tasks", 12, 0, 12, 8),
        _block("Schedule", 0, 8, 8, 8),
        _block("Notes", 8, 8, 8, 8),
        _block("Learnings", 16, 8, 8, 8),
        _block("Reflections", 0, 16, 24, 8),
    ],
    "layout_project": [
        _block("Overview", 0, 0, 24, 6),
        _block("Goals", 0, 6, 8, 9),
        _block("Milestones", 8, 6, 8, 9),
        _block("Resources", 16, 6, 8, 9),
        _block("Risks", 0, 15, 12, 9),
        _block("Tracking", 12, 15, 12, 9),
    ],
    "layout_simple": [
        _block("Ideas", 0, 0, 12, 24),
        _block("Actions", 12, 0, 12, 24),
    ],
    # Cornell notes: notes column, cue column, summary band.
    "layout_cornell": [
        _block("Notes", 0, 0, 16, 18),
        _block("Keywords", 16, 0, 8, 18),
        _block("Summary", 0, 18, 24, 6),
    ],
    "layout_tasks_dashboard": [
        _block("Today's Tasks", 0, 0, 8, 12),
        _block("This Week", 8, 0, 8, 12),
        _block("Overdue", 16, 0, 8, 12),
        _block("Active Projects", 0, 12, 12, 12),
        _block("Statistics", 12, 12, 12, 12),
    ],
}


def _info(name: str, display_name: str, description: str, category: str) -> LayoutInfo:
    sections = [block["title"] for block in BUILT_IN_LAYOUTS[name]]
    return LayoutInfo(
        name=name,
        display_name=display_name,
        description=description,
        sections=sections,
        block_count=len(sections),
        category=category,
    )


LAYOUT_INFO: dict[str, LayoutInfo] = {
    "layout_eisenhower": _info(
        "layout_eisenhower",
        "Eisenhower Matrix",
        "Prioritize by urgency and importance.",
        "productivity",
    ),
    "layout_gtd": _info(
        "layout_gtd",
        "Getting Things Done (GTD)",
        "Capture, clarify and organize commitments with David Allen's method.",
        "productivity",
    ),
    "layout_kanban": _info(
        "layout_kanban",
        "Kanban Board",
        "Visualize work in progress across three columns.",
        "workflow",
    ),
    "layout_weekly": _info(
        "layout_weekly",
        "Weekly Planner",
        "One block per weekday plus the weekend and free notes.",
        "planning",
    ),
    "layout_daily": _info(
        "layout_daily",
        "Daily Planner",
        "Goals, priorities and a schedule for one day, with room for reflection.",
        "planning",
    ),
    "layout_project": _info(
        "layout_project",
        "Project Overview",
        "Goals, milestones, resources, risks and tracking for one project.",
        "project",
    ),
    "layout_simple": _info(
        "layout_simple",
        "Simple Board",
        "Two columns for ideas and actions.",
        "basic",
    ),
    "layout_cornell": _info(
        "layout_cornell",
        "Cornell Notes",
        "Note-taking with a keyword column and a closing summary.",
        "notes",
    ),
    "layout_tasks_dashboard": _info(
        "layout_tasks_dashboard",
        "Tasks Dashboard",
        "Tasks grouped by time horizon and project.",
        "integration",
    ),
}


def load_layout_file(path: Path | str) -> dict[str, list[dict[str, Any]]]:
    """Load layout definitions from a YAML file.

    The file maps layout names to lists of blocks::

        layout_custom:
          - {title: Left, x: 0, y: 0, w: 12, h: 10}
          - {title: Right, x: 12, y: 0, w: 12, h: 10}

    Block geometry is not checked here; the registry validates on load.

    Args:
        path: YAML file path.

    Returns:
        Mapping of layout name to raw block mappings.

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not load layouts from {path}: {e}",
            context={"path": str(path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Layout file {path} must map layout names to block lists",
            context={"path": str(path)},
        )

    definitions = {}
    for name, blocks in data.items():
        if not isinstance(blocks, list):
            raise ConfigurationError(
                f'Layout "{name}" in {path} must be a list of blocks',
                context={"path": str(path), "layout_name": name},
            )
        definitions[str(name)] = blocks
    return definitions
