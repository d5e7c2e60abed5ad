import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from cabalenv._src.constants import (
    DEFAULT_SOLVER,
    FAKE_PACKAGE_DIR_PREFIX,
    FAKE_PACKAGE_NAME,
    SOLVER_BUILD_DIR,
)
from cabalenv._src.exceptions import PlanDecodeError, SolverFailure
from cabalenv._src.models.plan import BuildPlan


logger = logging.getLogger(__name__)

FAILURE_HINT = (
    "This might be due to inconsistent dependencies (delete the package environment file, "
    "or loosen the requested bounds) or to packages missing from the index (try `cabal update`)"
)


def solver_command(solver: str, dry_run: bool) -> List[str]:
    command = [solver, "v2-build", "all", f"--builddir={SOLVER_BUILD_DIR}"]
    if dry_run:
        command.append("--dry-run")
    return command


def find_plan_json(build_dir: Path) -> Path:
    plan_path = Path(build_dir) / "cache" / "plan.json"
    if not plan_path.is_file():
        raise PlanDecodeError(plan_path, "solver finished but wrote no plan.json")
    return plan_path


def invoke_solver(
    manifest: str,
    project: str,
    solver: str = DEFAULT_SOLVER,
    dry_run: bool = False,
) -> Optional[BuildPlan]:
    """Build the fake package in a scratch directory and read back its plan.

    The scratch directory is removed on every exit path. Returns None
    for a dry run, which only checks that a plan can be found.
    """
    with tempfile.TemporaryDirectory(prefix=FAKE_PACKAGE_DIR_PREFIX) as tmp_dir:
        work_dir = Path(tmp_dir)
        (work_dir / f"{FAKE_PACKAGE_NAME}.cabal").write_text(manifest, encoding="utf-8")
        (work_dir / "cabal.project").write_text(project, encoding="utf-8")

        command = solver_command(solver, dry_run)
        logger.info("running `%s`", " ".join(command))
        try:
            proc = subprocess.run(
                command,
                cwd=work_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as err:
            raise SolverFailure(
                "could not start the solver",
                f"is `{solver}` installed and on PATH? ({err})",
                command,
                work_dir,
            )

        if proc.returncode != 0:
            raise SolverFailure(
                f"solver reported failure (`{solver} v2-build` exited with code {proc.returncode})",
                FAILURE_HINT,
                command,
                work_dir,
                proc.stdout,
            )
        logger.debug("solver output:\n%s", proc.stdout)

        if dry_run:
            return None

        plan_path = find_plan_json(work_dir / SOLVER_BUILD_DIR)
        return BuildPlan.from_json(plan_path.read_bytes(), source=plan_path)
