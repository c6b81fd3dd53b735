"""Terminal front end for DevTrack.

Plays the part of the web dashboard: sign in, list and edit tasks, run a
timer against a task and look at the analytics summary.

\b
Examples:
    devtrack signup "Ana" ana@x.com
    devtrack add "Write spec" --priority high --tag docs
    devtrack start 3f2a
    devtrack stop
"""

import functools
import logging
import os

import click
import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from devtrack.client.api import DEFAULT_API_URL, ApiError, DevTrackClient
from devtrack.client.cache import DEFAULT_CACHE_PATH, LocalCache
from devtrack.client.state import FILTERS, InvalidTransition, TrackerState, merged_time_spent
from devtrack.constants import TASK_PRIORITIES, TASK_STATUSES

logger = logging.getLogger(__name__)

console = Console()

PRIORITY_COLORS = {"low": "blue", "medium": "yellow", "high": "red"}
STATUS_ICONS = {"pending": "○", "in-progress": "[yellow]◔[/yellow]", "completed": "[green]✔[/green]"}


def format_time(seconds: int) -> str:
    seconds = max(int(seconds or 0), 0)
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


class Session:
    """Everything a command needs: API client, cache and UI state."""

    def __init__(self, client: DevTrackClient, cache: LocalCache):
        self.client = client
        self.cache = cache
        self.state = TrackerState.from_dict(cache.get("tracker"))

    def save_state(self) -> None:
        self.cache.set("tracker", self.state.to_dict())

    def require_login(self) -> None:
        if not self.client.token:
            raise click.ClickException("Not logged in. Run `devtrack login` first.")

    def fetch_tasks(self) -> list[dict]:
        tasks = self.client.list_tasks()
        self.cache.store_tasks(tasks)
        return tasks

    def resolve_task(self, prefix: str) -> dict:
        matches = [t for t in self.fetch_tasks() if t["id"].startswith(prefix)]
        if not matches:
            raise click.ClickException(f"No task matches '{prefix}'")
        if len(matches) > 1:
            raise click.ClickException(f"'{prefix}' matches {len(matches)} tasks, use a longer id")
        return matches[0]

    def merge_stopped(self, stopped) -> dict | None:
        """PATCH the stopped timer's elapsed seconds into the task's timeSpent."""
        task = next((t for t in self.fetch_tasks() if t["id"] == stopped.task_id), None)
        if task is None:
            logger.warning("Timed task %s no longer exists, dropping %ss", stopped.task_id, stopped.elapsed)
            return None
        updated = self.client.update_task(task["id"], timeSpent=merged_time_spent(task, stopped))
        self.cache.invalidate_tasks()
        return updated


def api_command(func):
    """Report API failures: auth problems inline, everything else through logging."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ApiError as e:
            if e.is_auth_error or e.status_code == 400:
                console.print(f"[red]{e.message}[/red]")
            else:
                logger.error("API request failed: %s", e)
            raise SystemExit(1)
        except httpx.HTTPError as e:
            logger.error("Cannot reach the DevTrack API: %s", e)
            raise SystemExit(1)
        except InvalidTransition as e:
            raise click.ClickException(str(e))

    return wrapper


@click.group()
@click.option("--api-url", envvar="DEVTRACK_API_URL", default=DEFAULT_API_URL, show_default=True,
              help="DevTrack API base URL")
@click.option("--cache", "cache_path", envvar="DEVTRACK_CACHE", default=str(DEFAULT_CACHE_PATH),
              show_default=True, help="Local cache file")
@click.pass_context
def cli(ctx: click.Context, api_url: str, cache_path: str) -> None:
    """DevTrack: track tasks and the time you spend on them."""
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    extra = ctx.obj or {}
    cache = LocalCache(cache_path)
    client = DevTrackClient(api_url, token=cache.token, transport=extra.get("transport"))
    ctx.call_on_close(client.close)
    ctx.obj = Session(client, cache)


# ── Auth ────────────────────────────────────────────────

@cli.command()
@click.argument("name")
@click.argument("email")
@click.password_option()
@click.pass_obj
@api_command
def signup(session: Session, name: str, email: str, password: str) -> None:
    """Create an account and log in."""
    data = session.client.signup(name, email, password)
    session.cache.store_session(data["user"], data["token"])
    console.print(f"Welcome, [bold]{data['user']['name']}[/bold]!")


@cli.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
@click.pass_obj
@api_command
def login(session: Session, email: str, password: str) -> None:
    """Log in with email and password."""
    data = session.client.login(email, password)
    session.cache.store_session(data["user"], data["token"])
    console.print(f"Logged in as [bold]{data['user']['name']}[/bold]")


@cli.command()
@click.pass_obj
def logout(session: Session) -> None:
    """Forget the token and every cached value."""
    session.cache.clear()
    console.print("Logged out")


@cli.command()
@click.option("--name", help="New display name")
@click.pass_obj
@api_command
def whoami(session: Session, name: str | None) -> None:
    """Show (or rename) the logged-in user."""
    session.require_login()
    user = session.client.update_me(name) if name else session.client.me()
    session.cache.set("userDetails", user)
    console.print(f"[bold]{user['name']}[/bold] <{user['email']}>")


# ── Tasks ───────────────────────────────────────────────

@cli.command("tasks")
@click.option("--filter", "filter_", type=click.Choice(FILTERS), help="Status filter (remembered)")
@click.option("--priority", type=click.Choice(TASK_PRIORITIES))
@click.option("--offline", is_flag=True, help="Show the cached list without calling the API")
@click.pass_obj
@api_command
def list_tasks(session: Session, filter_: str | None, priority: str | None, offline: bool) -> None:
    """List your tasks, most recent first."""
    session.require_login()
    if filter_:
        session.state.set_filter(filter_)
        session.save_state()

    if offline:
        tasks = session.cache.tasks
        if tasks is None:
            raise click.ClickException("No cached tasks, run without --offline first")
    else:
        tasks = session.fetch_tasks()

    tasks = session.state.filter_tasks(tasks)
    if priority:
        tasks = [t for t in tasks if t.get("priority") == priority]

    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return

    table = Table(title=f"Tasks ({session.state.filter})")
    table.add_column("ID", style="cyan")
    table.add_column("")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Time", justify="right")
    table.add_column("Tags", style="dim")
    for t in tasks:
        time_spent = t.get("timeSpent", 0)
        if t["id"] == session.state.active_timer:
            time_spent += session.state.elapsed()
            title = f"{t['title']} [bold green](timing)[/bold green]"
        else:
            title = t["title"]
        color = PRIORITY_COLORS.get(t.get("priority"), "white")
        table.add_row(
            t["id"][:8],
            STATUS_ICONS.get(t.get("status"), ""),
            title,
            f"[{color}]{t.get('priority')}[/{color}]",
            format_time(time_spent),
            ", ".join(t.get("tags") or []),
        )
    console.print(table)


@cli.command()
@click.argument("title")
@click.option("--priority", type=click.Choice(TASK_PRIORITIES), default="medium", show_default=True)
@click.option("--status", type=click.Choice(TASK_STATUSES), default="pending", show_default=True)
@click.option("--notes", default="")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_obj
@api_command
def add(session: Session, title: str, priority: str, status: str, notes: str, tags: tuple) -> None:
    """Create a task."""
    session.require_login()
    task = session.client.create_task(title, priority=priority, status=status, notes=notes, tags=list(tags))
    session.cache.invalidate_tasks()
    console.print(f"Created [cyan]{task['id'][:8]}[/cyan] {task['title']}")


@cli.command()
@click.argument("task_id")
@click.option("--title")
@click.option("--status", type=click.Choice(TASK_STATUSES))
@click.option("--priority", type=click.Choice(TASK_PRIORITIES))
@click.option("--notes")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.pass_obj
@api_command
def update(session: Session, task_id: str, title, status, priority, notes, tags) -> None:
    """Change fields of a task."""
    session.require_login()
    fields = {"title": title, "status": status, "priority": priority, "notes": notes}
    fields = {k: v for k, v in fields.items() if v is not None}
    if tags:
        fields["tags"] = list(tags)
    if not fields:
        raise click.UsageError("Nothing to update")

    task = session.resolve_task(task_id)
    updated = session.client.update_task(task["id"], **fields)
    session.cache.invalidate_tasks()
    console.print(f"Updated [cyan]{updated['id'][:8]}[/cyan] {updated['title']} ({updated['status']})")


@cli.command("rm")
@click.argument("task_id")
@click.pass_obj
@api_command
def remove(session: Session, task_id: str) -> None:
    """Delete a task."""
    session.require_login()
    task = session.resolve_task(task_id)
    session.client.delete_task(task["id"])
    session.cache.invalidate_tasks()
    session.state.forget_task(task["id"])
    session.save_state()
    console.print(f"Deleted {task['title']}")


# ── Timer ───────────────────────────────────────────────

@cli.command()
@click.argument("task_id")
@click.pass_obj
@api_command
def start(session: Session, task_id: str) -> None:
    """Start the timer on a task (stops any running one)."""
    session.require_login()
    task = session.resolve_task(task_id)
    previous = session.state.start_timer(task["id"])
    if previous is not None:
        session.merge_stopped(previous)
        console.print(f"Stopped previous timer after {format_time(previous.elapsed)}")
    session.save_state()
    console.print(f"Timing [bold]{task['title']}[/bold]")


@cli.command()
@click.pass_obj
@api_command
def stop(session: Session) -> None:
    """Stop the running timer and add its time to the task."""
    session.require_login()
    stopped = session.state.stop_timer()
    # Persist only once the elapsed time is on the server
    updated = session.merge_stopped(stopped)
    session.save_state()
    if updated is not None:
        console.print(
            f"Stopped after {format_time(stopped.elapsed)}, "
            f"{updated['title']} total {format_time(updated['timeSpent'])}"
        )


# ── Analytics ───────────────────────────────────────────

@cli.command()
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, writable=True),
              help="Also save the CSV report to this file")
@click.pass_obj
@api_command
def stats(session: Session, csv_path: str | None) -> None:
    """Show the analytics summary."""
    session.require_login()
    summary = session.client.summary()

    lines = [
        f"[bold]Tasks:[/bold] {summary['total']}",
        f"[bold]Completed:[/bold] {summary['byStatus']['completed']} ({summary['completionRate']}%)",
        f"[bold]In progress:[/bold] {summary['byStatus']['in-progress']}",
        f"[bold]Pending:[/bold] {summary['byStatus']['pending']}",
        f"[bold]Time tracked:[/bold] {format_time(summary['totalTimeSpent'])}",
    ]
    if summary.get("topTags"):
        tags = ", ".join(f"{t['tag']} ({t['count']})" for t in summary["topTags"])
        lines.append(f"[bold]Top tags:[/bold] {tags}")
    console.print(Panel("\n".join(lines), title="[bold]Analytics[/bold]", border_style="cyan"))

    if csv_path:
        with open(csv_path, "w", encoding="utf-8") as f:
            f.write(session.client.csv_report())
        console.print(f"[dim]Report saved to {csv_path}[/dim]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
