"""Cohort dashboard MCP server - FastMCP tools over the grading dashboard."""

from typing import Optional

from fastmcp import FastMCP

from .client import DashboardAPIError, DashboardAuthError, DashboardClient
from .config import configure_logging, load_env, load_settings
from .dashboard import Dashboard
from .models import WEEKS

# Load environment variables
load_env()

mcp = FastMCP(
    "Cohort Dashboard",
    instructions=(
        "Admin dashboard for weekly cohort grading. Switch to a week, filter and "
        "sort its roster, enter edit mode, change attendance and scores, then save."
    ),
)

# Global dashboard session (initialized on first use)
_dashboard: Optional[Dashboard] = None


def _get_dashboard() -> Dashboard:
    """Get or create the dashboard session."""
    global _dashboard
    if _dashboard is None:
        settings = load_settings()
        _dashboard = Dashboard(DashboardClient(settings.base_url))
    return _dashboard


@mcp.tool()
async def login(gmail: str) -> str:
    """Check that an e-mail address has admin access.

    Args:
        gmail: The operator's e-mail address.

    Returns:
        Confirmation or the server's rejection message.
    """
    try:
        await _get_dashboard().client.login(gmail)
        return f"Access granted for {gmail}."
    except DashboardAuthError as e:
        return str(e)
    except DashboardAPIError as e:
        return f"Login failed: {e}"


@mcp.tool()
async def switch_week(week: int) -> str:
    """Load the roster for a week. Unsaved edits of the previous week are dropped.

    Args:
        week: Week number, 0-4. Week 0 is registration and has no scores.

    Returns:
        The rendered roster for the week.
    """
    if week not in WEEKS:
        return f"Invalid week: {week}. Use one of {WEEKS}."
    dashboard = _get_dashboard()
    if dashboard.store.total_participants is None:
        await dashboard.sync.load(week)
    else:
        await dashboard.sync.fetch_week(week)
    return dashboard.render()


@mcp.tool()
async def show_roster(
    search: Optional[str] = None,
    group: Optional[str] = None,
    ta: Optional[str] = None,
) -> str:
    """Show the current week's roster, optionally changing the filters.

    Args:
        search: Case-insensitive name substring ("" clears it)
        group: "All Groups" or a group label such as "Group 2"
        ta: "All TAs" or a TA name (see list_tas)

    Returns:
        The filtered, sorted roster.
    """
    dashboard = _get_dashboard()
    dashboard.set_filters(search, group, ta)
    return dashboard.render()


@mcp.tool()
async def clear_filters() -> str:
    """Reset the name, group and TA filters."""
    dashboard = _get_dashboard()
    dashboard.clear_filters()
    return dashboard.render()


@mcp.tool()
async def sort_roster(key: str = "name") -> str:
    """Sort by a column. Repeating the same key flips the direction."""
    dashboard = _get_dashboard()
    try:
        dashboard.sort_by(key)
    except ValueError as e:
        return str(e)
    return dashboard.render()


@mcp.tool()
async def list_tas() -> str:
    """List the TA filter options for the loaded roster."""
    return "\n".join(_get_dashboard().ta_options())


@mcp.tool()
async def begin_edit() -> str:
    """Enter edit mode for the current week."""
    dashboard = _get_dashboard()
    dashboard.store.begin_edit()
    if dashboard.store.week == 0:
        return "Edit mode on. Week 0 only allows attendance changes."
    return "Edit mode on."


@mcp.tool()
async def set_field(record_id: int, field: str, value: str) -> str:
    """Change one field of one student in edit mode.

    Args:
        record_id: Row ID shown in the roster
        field: attendance, fa, fb, fc, fd, attempt, good, follow_up,
            good_doc or good_structure
        value: 0-5 for scores, yes/no for attendance and exercise checks

    Returns:
        The updated row or why the edit was refused.
    """
    dashboard = _get_dashboard()
    try:
        changed = dashboard.editor.set_field(record_id, field, value)
    except KeyError:
        return f"Unknown field: {field}"

    if not changed:
        if dashboard.store.find(record_id) is None:
            return f"No record with ID {record_id}."
        return f"Field '{field}' cannot be edited now."
    record = dashboard.store.find(record_id)
    return f"{record.name}: {field} updated, total {dashboard.store.display_total(record)}"


@mcp.tool()
async def save() -> str:
    """Save the whole roster of the current week and leave edit mode."""
    result = await _get_dashboard().sync.save()
    if result.ok:
        return f"Week {result.week} saved."
    return f"Save failed: {result.message}"


def main():
    """Run the MCP server."""
    configure_logging(load_settings())
    mcp.run()


if __name__ == "__main__":
    main()
