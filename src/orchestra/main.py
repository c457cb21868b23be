"""CLI entrypoint for orchestra."""

import logging
from typing import NoReturn

import rich_click as click

from orchestra import __version__
from orchestra.agents import AgentKind
from orchestra.config import Settings, is_test_mode
from orchestra.controllers import (
    DispatchCommand,
    InvocationPlan,
    OrchestraCliController,
    RunCommand,
    SessionsCommand,
)
from orchestra.errors import LaunchError, NonZeroExitError, UnknownAgentError
from orchestra.probes import VersionState

click.rich_click.USE_MARKDOWN = True
CONTROLLER = OrchestraCliController()


@click.group()
@click.version_option(version=__version__, prog_name="orchestra")
def orchestra() -> None:
    """Orchestrate multiple AI coding agents."""

    try:
        settings = Settings.from_env()
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@orchestra.command("agents")
def agents_command() -> None:
    """List available agents and their status."""

    click.echo(click.style("\nAvailable Agents:\n", bold=True))
    for row in CONTROLLER.agents():
        descriptor = row.descriptor
        status = (
            click.style("✓ installed", fg="green")
            if row.installed
            else click.style("✗ not found", fg="red")
        )
        key = click.style(descriptor.key.ljust(10), bold=True)
        click.echo(f"  {key} {_kind_label(descriptor.kind)} {status}")
        click.echo(f"  {click.style(descriptor.description, dim=True)}\n")


@orchestra.command("status")
def status_command() -> None:
    """Show versions of installed agents."""

    click.echo(click.style("\nAgent Status:\n", bold=True))
    for row in CONTROLLER.status():
        color = "green" if row.probe.state is VersionState.FOUND else "red"
        key = click.style(row.descriptor.key.ljust(10), bold=True)
        click.echo(f"  {key} {click.style(row.probe.text, fg=color)}")
    click.echo()


@orchestra.command("run")
@click.argument("agent")
@click.argument("task")
@click.option(
    "-y",
    "--yolo",
    is_flag=True,
    default=False,
    help="Auto-approve all actions (gemini only).",
)
@click.option("-r", "--repo", default=None, help="GitHub repo for Jules (owner/repo).")
@click.option(
    "-p",
    "--parallel",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of parallel Jules sessions.",
)
def run_command(agent: str, task: str, yolo: bool, repo: str | None, parallel: int) -> None:
    """Run a task with a specific agent (claude, gemini, jules)."""

    try:
        plan = CONTROLLER.plan_run(
            RunCommand(agent=agent, task=task, yolo=yolo, repo=repo, parallel=parallel),
        )
    except UnknownAgentError as error:
        _fail_unknown_agent(error)

    click.echo(click.style(f"\nDelegating to {plan.agent.display_name}...\n", bold=True))
    _execute(plan)


@orchestra.command("dispatch")
@click.argument("task")
@click.option(
    "--sync",
    "sync_agent",
    default=None,
    help="Agent for synchronous work. Defaults to ORCHESTRA_SYNC_AGENT (gemini).",
)
@click.option(
    "--async",
    "async_agent",
    default=None,
    help="Agent for asynchronous work. Defaults to ORCHESTRA_ASYNC_AGENT (jules).",
)
@click.option("-r", "--repo", default=None, help="GitHub repo for async tasks.")
def dispatch_command(
    task: str,
    sync_agent: str | None,
    async_agent: str | None,
    repo: str | None,
) -> None:
    """Dispatch a task to a sync or async agent based on its wording."""

    click.echo(click.style("\nAnalyzing task for dispatch...\n", bold=True))
    try:
        plan = CONTROLLER.plan_dispatch(
            DispatchCommand(
                task=task,
                sync_agent=sync_agent,
                async_agent=async_agent,
                repo=repo,
            ),
        )
    except UnknownAgentError as error:
        _fail_unknown_agent(error)

    routed = plan.decision.routed_kind
    color = "yellow" if routed is AgentKind.ASYNC else "blue"
    click.echo(
        click.style(
            f"Dispatching to {plan.invocation.agent.key} ({routed.value})...",
            fg=color,
        ),
    )
    _execute(plan.invocation)


@orchestra.command("sessions")
@click.option(
    "-l",
    "--list",
    "list_sessions",
    is_flag=True,
    default=False,
    help="List all sessions.",
)
@click.option("-p", "--pull", default=None, help="Pull a session's results.")
@click.option("-a", "--apply", is_flag=True, default=False, help="Apply the patch when pulling.")
def sessions_command(list_sessions: bool, pull: str | None, apply: bool) -> None:
    """List and manage Jules sessions.

    Listing is the default; `--list` is accepted for symmetry with `--pull`.
    """

    del list_sessions
    _execute(CONTROLLER.plan_sessions(SessionsCommand(pull=pull, apply=apply)))


def _execute(plan: InvocationPlan) -> None:
    click.echo(click.style(f"Running: {plan.command_line}", dim=True))
    try:
        CONTROLLER.execute(plan)
    except NonZeroExitError as error:
        click.echo(click.style(str(error), fg="red"), err=True)
        click.get_current_context().exit(error.exit_code)
    except LaunchError as error:
        raise click.ClickException(str(error)) from error


def _fail_unknown_agent(error: UnknownAgentError) -> NoReturn:
    click.echo(click.style(str(error), fg="red"), err=True)
    click.echo(f"Available: {', '.join(error.available)}")
    click.get_current_context().exit(1)


def _kind_label(kind: AgentKind) -> str:
    if kind is AgentKind.SYNC:
        return click.style("[sync]", fg="blue")
    return click.style("[async]", fg="yellow")


def main() -> None:
    """Console entry point; a no-op in test mode so the CLI can be imported."""

    if is_test_mode():
        return
    orchestra()


if __name__ == "__main__":  # pragma: no cover
    main()
