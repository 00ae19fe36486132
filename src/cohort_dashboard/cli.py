"""Cohort dashboard CLI - command-line interface for the grading dashboard.

Usage:
    python -m cohort_dashboard.cli <command> [options]

Commands:
    login [gmail]                            Check admin access for an e-mail
    week <n> [--search S] [--group G] [--ta T] [--sort KEY] [--desc]
                                             Show the roster for a week
    tas <n>                                  List TAs assigned in a week
    summary                                  Participant and attendance counts
    set <week> <id> <field> <value>          Edit one field and save the week
"""

import asyncio
import sys

from .client import DashboardAuthError, DashboardAPIError, DashboardClient
from .config import configure_logging, load_env, load_settings
from .dashboard import Dashboard
from .models import WEEKS


def _get_dashboard() -> Dashboard:
    settings = load_settings()
    return Dashboard(DashboardClient(settings.base_url))


def _parse_week(value: str) -> int:
    try:
        week = int(value)
    except ValueError:
        week = -1
    if week not in WEEKS:
        print(f"Error: Invalid week '{value}'. Use one of {WEEKS}.", file=sys.stderr)
        sys.exit(1)
    return week


def _parse_view_options(args):
    options = {"search": None, "group": None, "ta": None, "sort": None, "desc": False}
    positional = []
    i = 0
    while i < len(args):
        flag = args[i]
        if flag in ("--search", "-s", "--group", "-g", "--ta", "--sort") and i + 1 < len(args):
            name = {"-s": "search", "-g": "group"}.get(flag, flag.lstrip("-"))
            options[name] = args[i + 1]
            i += 2
        elif flag == "--desc":
            options["desc"] = True
            i += 1
        else:
            positional.append(flag)
            i += 1
    return positional, options


async def cmd_login(args):
    gmail = args[0] if args else load_settings().admin_gmail
    if not gmail:
        print("Error: gmail is required (argument or COHORT_ADMIN_GMAIL)", file=sys.stderr)
        sys.exit(1)
    client = DashboardClient(load_settings().base_url)
    try:
        await client.login(gmail)
        print(f"Access granted for {gmail}.")
    except DashboardAuthError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except DashboardAPIError as e:
        print(f"Login failed: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await client.close()


async def cmd_week(args):
    positional, options = _parse_view_options(args)
    week = _parse_week(positional[0]) if positional else 0
    dashboard = _get_dashboard()
    try:
        result = await dashboard.sync.load(week)
        dashboard.set_filters(options["search"], options["group"], options["ta"])
        if options["sort"]:
            dashboard.sort_by(options["sort"])
            if options["desc"]:
                dashboard.sort_by(options["sort"])
        print(dashboard.render())
        if not result.ok:
            sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await dashboard.close()


async def cmd_tas(args):
    week = _parse_week(args[0]) if args else 0
    dashboard = _get_dashboard()
    try:
        result = await dashboard.sync.fetch_week(week)
        if not result.ok:
            print(f"Error: {result.message}", file=sys.stderr)
            sys.exit(1)
        for ta in dashboard.ta_options()[1:]:
            print(ta)
    finally:
        await dashboard.close()


async def cmd_summary(args):
    dashboard = _get_dashboard()
    try:
        await dashboard.sync.fetch_participant_count()
        await dashboard.sync.fetch_weekly_attendance()
        store = dashboard.store
        total = store.total_participants
        print(f"Total Participants: {total if total is not None else 'unknown'}")
        for summary in store.weekly_attendance:
            absent = (total or 0) - summary.attended
            print(f"  Week {summary.week}: {summary.attended} attended, {absent} absent")
    finally:
        await dashboard.close()


async def cmd_set(args):
    if len(args) < 4:
        print("Error: requires <week> <id> <field> <value>", file=sys.stderr)
        sys.exit(1)
    week = _parse_week(args[0])
    try:
        record_id = int(args[1])
    except ValueError:
        print(f"Error: Invalid id '{args[1]}'", file=sys.stderr)
        sys.exit(1)
    field, value = args[2], args[3]

    dashboard = _get_dashboard()
    try:
        result = await dashboard.sync.fetch_week(week)
        if not result.ok:
            print(f"Error: {result.message}", file=sys.stderr)
            sys.exit(1)
        dashboard.store.begin_edit()
        try:
            changed = dashboard.editor.set_field(record_id, field, value)
        except KeyError:
            print(f"Error: Unknown field '{field}'", file=sys.stderr)
            sys.exit(1)
        if not changed:
            print(
                f"Field '{field}' of record {record_id} cannot be edited in week {week}.",
                file=sys.stderr,
            )
            sys.exit(1)
        saved = await dashboard.sync.save()
        if not saved.ok:
            print(f"Save failed: {saved.message}", file=sys.stderr)
            sys.exit(1)
        record = dashboard.store.find(record_id)
        print(f"Saved week {week}: {record.name} now has total {record.total}.")
    finally:
        await dashboard.close()


COMMANDS = {
    "login": cmd_login,
    "week": cmd_week,
    "tas": cmd_tas,
    "summary": cmd_summary,
    "set": cmd_set,
}

USAGE = """\
Usage: python -m cohort_dashboard.cli <command> [options]

Commands:
  login [gmail]                          Check admin access for an e-mail
  week <n> [--search S] [--group G] [--ta T] [--sort KEY] [--desc]
                                         Show the roster for a week (default: 0)
  tas <n>                                List TAs assigned in a week
  summary                                Participant and weekly attendance counts
  set <week> <id> <field> <value>        Edit one field and save the week

Fields: attendance, fa, fb, fc, fd, attempt, good, follow_up, good_doc, good_structure
Scores are 0-5; flags take yes/no."""


def main():
    load_env()
    configure_logging(load_settings())

    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help", "help"):
        print(USAGE)
        sys.exit(0)

    command = args[0]
    if command not in COMMANDS:
        print(f"Error: Unknown command '{command}'", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    asyncio.run(COMMANDS[command](args[1:]))


if __name__ == "__main__":
    main()
