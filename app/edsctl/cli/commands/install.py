"""Install command implementation.

Installs the EvalEds binary from a prebuilt release (or a source build)
and writes the default configuration.
"""

from pathlib import Path
from typing import Annotated

import typer

from edsctl import APP_DISPLAY_NAME
from edsctl.cli.types import StrictExitGroup, resolve_config_dir, resolve_install_dir
from edsctl.core.options import InstallOptions
from edsctl.core.orchestrator import InstallOrchestrator
from edsctl.installers import ReleaseDownloader, SourceBuilder
from edsctl.platform import get_adapter
from edsctl.utils.formatting import console, print_info

app = typer.Typer(
    help=f"Install {APP_DISPLAY_NAME} on this host.",
    cls=StrictExitGroup,
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def install(
    ctx: typer.Context,
    build_from_source: Annotated[
        bool,
        typer.Option(
            "--build-from-source",
            help="Build from source instead of downloading a release.",
        ),
    ] = False,
    install_dir: Annotated[
        Path | None,
        typer.Option(
            "--install-dir",
            help="Installation directory (overrides INSTALL_DIR).",
            file_okay=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be done without making changes.",
        ),
    ] = False,
) -> None:
    """Install EvalEds on this host.

    Downloads the latest prebuilt release for this platform, falling back
    to a source build when no release is available. An existing
    configuration file is never overwritten.

    Examples:
        edsctl install                         # Install the latest release
        edsctl install --build-from-source     # Build with cargo
        edsctl install --install-dir ~/bin     # Custom location
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    adapter = get_adapter()
    options = InstallOptions(
        install_dir=resolve_install_dir(adapter, install_dir),
        config_dir=resolve_config_dir(adapter),
        build_from_source=build_from_source,
        dry_run=dry_run,
    )

    console.print(f"[header]{APP_DISPLAY_NAME} Installer[/header]")
    if options.dry_run:
        print_info("DRY RUN MODE - No changes will be made")
    console.print()

    orchestrator = InstallOrchestrator(
        options,
        adapter,
        downloader=ReleaseDownloader(adapter.executable_name),
        builder=SourceBuilder(adapter.executable_name),
    )
    report = orchestrator.run()
    if report.exit_code:
        raise typer.Exit(code=report.exit_code)
