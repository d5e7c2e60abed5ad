from typing import Iterable, List

from cabalenv._src.codec import encode_environment
from cabalenv._src.constants import BASE_PACKAGE, ENVIRONMENT_HEADER, UnitKind
from cabalenv._src.merge import MergedDependencySet, as_specs
from cabalenv._src.models.environment import Environment
from cabalenv._src.models.plan import BuildPlan, ResolvedUnit


def is_exposed(unit: ResolvedUnit, dep_names: Iterable[str], transitive: bool) -> bool:
    """Local and inplace units are never installed, so never exposed."""
    if unit.unit_kind != UnitKind.EXTERNAL:
        return False
    name = unit.package_id.name
    return transitive or name in dep_names or name == BASE_PACKAGE


def exposed_units(plan: BuildPlan, dep_names: Iterable[str], transitive: bool) -> List[ResolvedUnit]:
    dep_names = set(dep_names)
    return [
        plan.units[unit_id]
        for unit_id in sorted(plan.units)
        if is_exposed(plan.units[unit_id], dep_names, transitive)
    ]


def render_environment(
    name: str,
    plan: BuildPlan,
    deps: MergedDependencySet,
    transitive: bool,
    package_db,
) -> str:
    """Render the GHC environment file, state trailer included."""
    environment = Environment(
        name=name,
        declared_deps=as_specs(deps),
        transitive=transitive,
        plan_bytes=plan.raw,
    )

    lines = list(ENVIRONMENT_HEADER)
    lines += [
        "clear-package-db",
        "global-package-db",
        f"package-db {package_db}",
    ]
    lines += [f"package-id {unit.unit_id}" for unit in exposed_units(plan, deps, transitive)]
    lines += encode_environment(environment)
    return "\n".join(lines) + "\n"
