"""Uninstall command implementation.

Discovers every EvalEds artifact on this host and removes the categories
the user confirms.
"""

from typing import Annotated

import typer

from edsctl import APP_DISPLAY_NAME
from edsctl.cli.types import StrictExitGroup, resolve_install_dir
from edsctl.core.confirm import ConfirmationGate
from edsctl.core.options import UninstallOptions
from edsctl.core.orchestrator import UninstallOrchestrator
from edsctl.platform import get_adapter
from edsctl.utils.formatting import console, print_info

app = typer.Typer(
    help=f"Remove {APP_DISPLAY_NAME} from this host.",
    cls=StrictExitGroup,
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def uninstall(
    ctx: typer.Context,
    remove_config: Annotated[
        bool,
        typer.Option(
            "--remove-config",
            help="Remove configuration files without asking.",
        ),
    ] = False,
    remove_data: Annotated[
        bool,
        typer.Option(
            "--remove-data",
            help="Remove data files (evaluations, databases) without asking.",
        ),
    ] = False,
    remove_all: Annotated[
        bool,
        typer.Option(
            "--remove-all",
            help="Remove configuration and data files without asking.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Answer yes to every confirmation.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be removed without making changes.",
        ),
    ] = False,
) -> None:
    """Remove EvalEds from this host.

    Binaries are removed after one confirmation. Configuration and data
    are kept unless confirmed or pre-approved with a flag. Shell startup
    files are never edited; they are listed for manual review.

    Examples:
        edsctl uninstall                  # Interactive uninstall
        edsctl uninstall --dry-run        # Preview what would be removed
        edsctl uninstall --remove-all     # Also remove configuration and data
        edsctl uninstall --force          # No prompts at all
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    adapter = get_adapter()
    options = UninstallOptions.from_flags(
        install_dir=resolve_install_dir(adapter),
        remove_config=remove_config,
        remove_data=remove_data,
        remove_all=remove_all,
        force=force,
        dry_run=dry_run,
    )

    console.print(f"[header]{APP_DISPLAY_NAME} Uninstaller[/header]")
    if options.dry_run:
        print_info("DRY RUN MODE - No changes will be made")
    console.print()

    report = UninstallOrchestrator(options, adapter, ConfirmationGate(options.policy)).run()
    if report.exit_code:
        raise typer.Exit(code=report.exit_code)
