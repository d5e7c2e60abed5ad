from pathlib import Path
from typing import List, Tuple

from cabalenv._src.codec import read_environment
from cabalenv._src.exceptions import CabalEnvError
from cabalenv._src.models.environment import Environment
from cabalenv._src.render import is_exposed


def list_environments(environments_dir: Path) -> List[Path]:
    environments_dir = Path(environments_dir)
    if not environments_dir.is_dir():
        return []
    # dot files are leftovers of interrupted writes
    return sorted(
        path for path in environments_dir.iterdir()
        if path.is_file() and not path.name.startswith(".")
    )


def load_environment(path: Path) -> Environment:
    environment = read_environment(path)
    if environment is None:
        raise CabalEnvError(f"No environment file at `{path}`")
    return environment


def environment_contents(environment: Environment) -> List[Tuple[str, bool]]:
    """Every package id in the embedded plan and whether it is exposed."""
    plan = environment.plan()
    dep_names = {dep.name for dep in environment.declared_deps}
    exposed = {
        str(unit.package_id)
        for unit in plan.units.values()
        if is_exposed(unit, dep_names, environment.transitive)
    }
    return [(str(pid), str(pid) in exposed) for pid in plan.package_ids()]
