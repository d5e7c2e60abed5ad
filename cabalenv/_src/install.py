import logging
from pathlib import Path
from typing import Callable, List, Optional

from cabalenv._src.codec import read_environment
from cabalenv._src.config import Settings
from cabalenv._src.exceptions import (
    EnvironmentCorrupt,
    InvalidEnvironmentName,
    PlanDecodeError,
    UnimplementedAction,
)
from cabalenv._src.manifest import synthesize_manifest, synthesize_project
from cabalenv._src.merge import MergedDependencySet, merge_dependencies
from cabalenv._src.models.package import DependencySpec
from cabalenv._src.models.plan import BuildPlan
from cabalenv._src.render import render_environment
from cabalenv._src.satisfy import satisfies
from cabalenv._src.solver import invoke_solver
from cabalenv._src.toolchain import ToolchainInfo
from cabalenv._src.utils import ensure_dir, write_text_atomic


logger = logging.getLogger(__name__)

Solve = Callable[..., Optional[BuildPlan]]


def check_environment_name(name: str) -> None:
    """Environment names are plain file names inside the environments directory."""
    if not name.strip():
        raise InvalidEnvironmentName(name, "name is empty")
    if "/" in name or "\\" in name:
        raise InvalidEnvironmentName(name, "name contains a path separator")
    if "\n" in name or "\r" in name:
        raise InvalidEnvironmentName(name, "name contains a line break")
    # dot files are reserved for temporary files next to the environments
    if name.startswith("."):
        raise InvalidEnvironmentName(name, "name starts with a dot")


class Reconciler():
    def __init__(self, settings: Settings, toolchain: ToolchainInfo, solve: Solve = invoke_solver):
        """Reconciler installs packages into named package environments.

        Parameters
        ----------
        settings: Settings
            Compiler and solver executables to use
        toolchain: ToolchainInfo
            The discovered compiler, its environment directory and package db
        solve: callable
            Runs the solver on a synthetic manifest, ``invoke_solver`` by default
        """
        self.settings = settings
        self.toolchain = toolchain
        self.solve = solve

    def environment_path(self, name: str) -> Path:
        check_environment_name(name)
        return self.toolchain.environments_dir / name

    def install(
        self,
        name: str,
        requested: List[DependencySpec],
        transitive: Optional[bool] = None,
        dry_run: bool = False,
        any_version: bool = False,
    ) -> Optional[str]:
        """Add ``requested`` to environment ``name``.

        Reuses the plan embedded in the existing environment file when it
        already covers every package, and runs the solver otherwise.
        ``transitive`` falls back to the environment's previous setting,
        or True for a new environment.

        Returns
        -------
        text: str | None
            The rendered environment file, or None if nothing was rendered
        """
        if any_version:
            raise UnimplementedAction("--any")
        if not requested:
            logger.info("no packages requested, nothing to do")
            return None

        path = self.environment_path(name)
        ensure_dir(self.toolchain.environments_dir)
        prior = read_environment(path)

        if prior is None:
            deps = merge_dependencies(requested)
            transitive = True if transitive is None else transitive
            return self._solve_and_render(name, path, deps, transitive, dry_run)

        deps = merge_dependencies(list(requested) + prior.declared_deps)
        if transitive is None:
            transitive = prior.transitive
        try:
            plan = prior.plan()
        except PlanDecodeError as err:
            raise EnvironmentCorrupt(path, err.msg)

        if satisfies(plan, deps):
            logger.debug("Everything in plan, regenerating environment file")
            return self._render_and_write(name, path, plan, deps, transitive, dry_run)

        logger.debug("existing plan does not cover the request, running the solver")
        return self._solve_and_render(name, path, deps, transitive, dry_run)

    def hide(self, name: str, packages: List[DependencySpec]):
        self.environment_path(name)
        raise UnimplementedAction("hide")

    def _solve_and_render(
        self,
        name: str,
        path: Path,
        deps: MergedDependencySet,
        transitive: bool,
        dry_run: bool,
    ) -> Optional[str]:
        manifest = synthesize_manifest(deps)
        logger.debug("Generated fake-package.cabal\n%s", manifest)

        plan = self.solve(
            manifest,
            synthesize_project(self.settings.compiler),
            solver=self.settings.solver,
            dry_run=dry_run,
        )
        if dry_run:
            return None
        return self._render_and_write(name, path, plan, deps, transitive, dry_run)

    def _render_and_write(
        self,
        name: str,
        path: Path,
        plan: BuildPlan,
        deps: MergedDependencySet,
        transitive: bool,
        dry_run: bool,
    ) -> str:
        text = render_environment(name, plan, deps, transitive, self.toolchain.package_db)
        logger.debug("environment file\n%s", text)
        if dry_run:
            logger.info("dry run, not writing %s", path)
        else:
            logger.debug("writing environment file %s", path)
            write_text_atomic(path, text)
        return text
