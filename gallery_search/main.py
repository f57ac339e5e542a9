"""
Gallery search CLI.

Searches the PowerShell Gallery with PSResourceGet (`Find-PSResource`), falling
back to PowerShellGet (`Find-Module` and friends) when PSResourceGet is not
installed, and prints the hits as a table.

Usage:
    gallery-search --name Pester --first 5
    gallery-search --name "Az.*" --tag Azure --type All --prerelease
    gallery-search --command Invoke-Pester
    gallery-search --dsc-resource xWebsite
"""

import click
from logly import logger
from rich.console import Console

from gallery_search.application.dispatcher import GallerySearchDispatcher
from gallery_search.config import DEFAULT_FIRST, SearchSettings
from gallery_search.core.errors import ConfigurationError, RegistryError
from gallery_search.core.gallery_types import SearchQuery
from gallery_search.infra.powershell import PowerShellRunner
from gallery_search.logging import init_logger
from gallery_search.presentation.result_table import render_outcome


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--name", "-n", default=None, help="Name pattern, wildcards allowed (default: *)")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag filter, repeatable (name search only)")
@click.option("--command", "-c", default=None, help="Find resources exporting this command")
@click.option("--dsc-resource", "-d", default=None, help="Find resources providing this DSC resource")
@click.option(
    "--type",
    "resource_type",
    default="Module",
    show_default=True,
    type=click.Choice(["Module", "Script", "All"], case_sensitive=False),
    help="Resource type (name search only)",
)
@click.option("--prerelease", is_flag=True, help="Include prerelease versions")
@click.option("--first", default=DEFAULT_FIRST, show_default=True, type=int, help="Maximum results to show")
@click.option("--repository", default=None, help="Repository to search (default: PSGallery)")
@click.option("--shell", default=None, help="PowerShell executable (default: pwsh, then powershell)")
@click.option("--timeout", default=None, type=click.IntRange(min=1), help="Time limit in seconds per PowerShell call")
@click.option("--verbose", "-v", is_flag=True, help="Log to the console as well")
def cli(
    name: str | None,
    tags: tuple,
    command: str | None,
    dsc_resource: str | None,
    resource_type: str,
    prerelease: bool,
    first: int,
    repository: str | None,
    shell: str | None,
    timeout: int | None,
    verbose: bool,
):
    """Search the PowerShell Gallery for modules, scripts, commands or DSC resources."""
    try:
        settings = SearchSettings.from_env()
        query = SearchQuery.from_options(
            name=name,
            tags=tags,
            command=command,
            dsc_resource=dsc_resource,
            resource_type=resource_type,
            include_prerelease=prerelease,
            max_results=first,
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    init_logger(
        level="DEBUG" if verbose else settings.log_level,
        console=verbose,
        log_dir=settings.log_dir,
    )

    runner = PowerShellRunner(
        shell=shell or settings.shell,
        timeout_sec=timeout or settings.timeout_sec,
    )
    dispatcher = GallerySearchDispatcher.create(runner, repository or settings.repository)
    for warning in dispatcher.warnings:
        click.secho(f"WARNING: {warning}", fg="yellow", err=True)

    try:
        outcome = dispatcher.search(query)
    except RegistryError as e:
        logger.error(f"Registry search failed (code={e.returncode})")
        raise click.ClickException(str(e)) from e

    render_outcome(outcome, Console())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
