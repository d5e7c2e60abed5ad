from cabalenv._src.merge import MergedDependencySet
from cabalenv._src.models.plan import BuildPlan


def in_the_plan(plan: BuildPlan, name: str, version_range) -> bool:
    versions = plan.versions_of(name)
    if len(versions) != 1:
        return False
    (version,) = versions
    return version in version_range


def satisfies(plan: BuildPlan, deps: MergedDependencySet) -> bool:
    """True if the plan pins every dependency to a single version in range."""
    return all(in_the_plan(plan, name, version_range) for name, version_range in deps.items())
