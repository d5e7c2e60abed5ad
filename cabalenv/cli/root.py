import logging
from contextlib import contextmanager
from typing import List, Optional

import rich
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing_extensions import Annotated

from cabalenv._src.config import Settings
from cabalenv._src.constants import DEFAULT_COMPILER, DEFAULT_ENVIRONMENT_NAME, ShowFormat
from cabalenv._src.exceptions import CabalEnvError
from cabalenv._src.install import Reconciler
from cabalenv._src.listing import environment_contents, list_environments, load_environment
from cabalenv._src.models.package import DependencySpec
from cabalenv._src.toolchain import discover_toolchain


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Manage GHC package environments",
)

err_console = Console(stderr=True)

CompilerOption = Annotated[str, typer.Option(
    "--with-compiler", "-w",
    help="compiler to use"
)]
NameOption = Annotated[str, typer.Option(
    "--name", "-n",
    help="environment name"
)]
VerboseOption = Annotated[bool, typer.Option(
    "--verbose", "-v",
    help="print the generated files and solver output"
)]


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("cabalenv")
    logger.handlers[:] = [RichHandler(console=err_console, show_time=False, show_path=False)]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@contextmanager
def _reporting_errors():
    try:
        yield
    except CabalEnvError as err:
        err_console.print(err.msg, style="red", highlight=False, markup=False)
        raise typer.Exit(code=1)


def _reconciler(compiler: str) -> Reconciler:
    settings = Settings.from_env(compiler=compiler)
    return Reconciler(settings, discover_toolchain(settings))


@app.command()
def install(
    packages: Annotated[Optional[List[str]], typer.Argument(
        help="packages, with optional bounds, e.g. 'aeson >=2.0'"
    )] = None,
    with_compiler: CompilerOption = DEFAULT_COMPILER,
    name: NameOption = DEFAULT_ENVIRONMENT_NAME,
    any_version: Annotated[bool, typer.Option(
        "--any", "-a",
        help="allow any version of existing packages"
    )] = False,
    transitive: Annotated[Optional[bool], typer.Option(
        "--transitive/--no-transitive", "-t",
        help="expose transitive dependencies (defaults to the environment's previous setting)"
    )] = None,
    dry_run: Annotated[bool, typer.Option(
        "--dry-run", "-d",
        help="dry run, don't install anything"
    )] = False,
    verbose: VerboseOption = False,
):
    """Install / add packages to an environment"""
    _configure_logging(verbose)
    with _reporting_errors():
        requested = [DependencySpec.parse(token) for token in packages or []]
        reconciler = _reconciler(with_compiler)
        reconciler.install(
            name,
            requested,
            transitive=transitive,
            dry_run=dry_run,
            any_version=any_version,
        )


@app.command()
def show(
    with_compiler: CompilerOption = DEFAULT_COMPILER,
    name: NameOption = DEFAULT_ENVIRONMENT_NAME,
    format: Annotated[ShowFormat, typer.Option(
        help="output format"
    )] = ShowFormat.TEXT,
    verbose: VerboseOption = False,
):
    """Show the contents of an environment"""
    _configure_logging(verbose)
    with _reporting_errors():
        reconciler = _reconciler(with_compiler)
        path = reconciler.environment_path(name)
        environment = load_environment(path)

        if format == ShowFormat.YAML:
            print(yaml.dump(environment.summary(), sort_keys=False))
            return

        if verbose:
            err_console.print(f"Packages in {name} environment {path}")
        for package_id, exposed in environment_contents(environment):
            print(package_id if exposed else f"{package_id} (hidden)")


@app.command(name="list")
def list_(
    with_compiler: CompilerOption = DEFAULT_COMPILER,
    verbose: VerboseOption = False,
):
    """List package environments"""
    _configure_logging(verbose)
    with _reporting_errors():
        reconciler = _reconciler(with_compiler)
        environments_dir = reconciler.toolchain.environments_dir
        environments = list_environments(environments_dir)

        if not verbose:
            for path in environments:
                print(path.name)
            return

        table = Table(title=f"Environments available in {environments_dir}")
        table.add_column("name", justify="left", no_wrap=True)
        table.add_column("path", justify="left", no_wrap=True)
        for path in environments:
            table.add_row(path.name, str(path))
        rich.print(table)


@app.command()
def hide(
    packages: Annotated[Optional[List[str]], typer.Argument(
        help="packages to hide"
    )] = None,
    with_compiler: CompilerOption = DEFAULT_COMPILER,
    name: NameOption = DEFAULT_ENVIRONMENT_NAME,
    verbose: VerboseOption = False,
):
    """Hide packages from an environment"""
    _configure_logging(verbose)
    with _reporting_errors():
        requested = [DependencySpec.parse(token) for token in packages or []]
        reconciler = _reconciler(with_compiler)
        reconciler.hide(name, requested)
