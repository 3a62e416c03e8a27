"""cwupload CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cwupload import (
    APIConfig,
    BookMetadata,
    Credentials,
    LibraryClient,
    LibraryError,
    RetryConfig,
    SSLConfig,
    TimeoutConfig,
    UploadPayload,
    ValidationError,
    setup_logging,
)
from cwupload.core.session.credentials import ENV_PASSWORD, ENV_URL, ENV_USERNAME

app = typer.Typer(
    name="cwupload",
    help="Upload books to a Calibre-Web library",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_config(
    insecure: bool = False,
    timeout: float = 120.0,
    retries: int = 0,
    verbose: bool = False
) -> APIConfig:
    """Build client configuration from command line options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        setup_logging(logging.DEBUG)
        logging.getLogger('aiohttp').setLevel(logging.WARNING)

    return APIConfig(
        ssl=SSLConfig(verify=not insecure, check_hostname=not insecure),
        timeout=TimeoutConfig(total=timeout),
        retry=RetryConfig(max_retries=retries)
    )


def resolve_credentials(url: Optional[str], username: Optional[str], password: Optional[str]) -> Credentials:
    """Build credentials, prompting for whatever is missing."""
    if not url:
        url = typer.prompt("Server URL")
    if not username:
        username = typer.prompt("Username")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    try:
        return Credentials(username=username, password=password, base_url=url)
    except ValidationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)


URL_OPTION = typer.Option(None, "--url", "-U", envvar=ENV_URL, help="Server base URL")
USERNAME_OPTION = typer.Option(None, "--username", "-u", envvar=ENV_USERNAME, help="Username")
PASSWORD_OPTION = typer.Option(None, "--password", "-p", envvar=ENV_PASSWORD, help="Password")
INSECURE_OPTION = typer.Option(False, "--insecure", "-k", help="Skip TLS certificate verification")
TIMEOUT_OPTION = typer.Option(120.0, "--timeout", help="Request timeout in seconds")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")


@app.command()
def check(
    url: Optional[str] = URL_OPTION,
    username: Optional[str] = USERNAME_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    insecure: bool = INSECURE_OPTION,
    timeout: float = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Check that the credentials can log in."""
    credentials = resolve_credentials(url, username, password)
    config = build_config(insecure=insecure, timeout=timeout, verbose=verbose)

    async def do_check():
        async with LibraryClient(credentials, config=config) as library:
            try:
                ok = await library.check_credentials()
            except LibraryError as e:
                console.print(f"[red]Check failed: {escape(str(e))}[/red]")
                raise typer.Exit(1)

        if not ok:
            console.print("[red]Wrong username or password[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Logged in to {credentials.base_url} as {credentials.username}[/green]")

    run_async(do_check())


@app.command()
def upload(
    files: List[Path] = typer.Argument(..., help="Book files to upload", exists=True, dir_okay=False),
    url: Optional[str] = URL_OPTION,
    username: Optional[str] = USERNAME_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    title: Optional[str] = typer.Option(None, "--title", help="Title of the book"),
    author: Optional[str] = typer.Option(None, "--author", help="Author of the book"),
    description: Optional[str] = typer.Option(None, "--description", help="Description/summary"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated tags"),
    series: Optional[str] = typer.Option(None, "--series", help="Series name"),
    series_index: Optional[float] = typer.Option(None, "--series-index", help="Position in series"),
    languages: Optional[str] = typer.Option(None, "--languages", help="Comma-separated languages"),
    concurrency: int = typer.Option(1, "--concurrency", "-c", min=1, help="Uploads in flight"),
    continue_on_fail: bool = typer.Option(False, "--continue-on-fail", help="Keep going after a failed upload"),
    retries: int = typer.Option(0, "--retries", min=0, help="Retries on network or markup errors"),
    insecure: bool = INSECURE_OPTION,
    timeout: float = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Upload one or more books."""
    credentials = resolve_credentials(url, username, password)
    config = build_config(insecure=insecure, timeout=timeout, retries=retries, verbose=verbose)
    metadata = BookMetadata(
        title=title,
        author=author,
        description=description,
        tags=tags,
        series=series,
        series_index=series_index,
        languages=languages
    )

    async def do_upload():
        payloads = [
            await UploadPayload.from_path(path, metadata=metadata)
            for path in files
        ]

        async with LibraryClient(credentials, config=config) as library:
            with console.status(f"Uploading {len(payloads)} file(s)..."):
                try:
                    outcomes = await library.upload_many(
                        payloads,
                        concurrency=concurrency,
                        continue_on_fail=continue_on_fail
                    )
                except LibraryError as e:
                    console.print(f"[red]Upload failed: {escape(str(e))}[/red]")
                    raise typer.Exit(1)

        table = Table()
        table.add_column("File")
        table.add_column("Status")
        table.add_column("Location / Error", style="dim")

        for outcome in outcomes:
            if outcome.error is not None:
                table.add_row(escape(outcome.file_name), "[red]failed[/red]", escape(str(outcome.error)))
            elif outcome.success:
                table.add_row(escape(outcome.file_name), "[green]uploaded[/green]", escape(outcome.result.location))
            else:
                table.add_row(escape(outcome.file_name), "[yellow]rejected[/yellow]", "no location returned")

        console.print(table)

        if not all(outcome.success for outcome in outcomes):
            raise typer.Exit(1)

    run_async(do_upload())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
