from typing import Dict, Iterable, List

from cabalenv._src.models.package import DependencySpec
from cabalenv._src.version_range import VersionRange


MergedDependencySet = Dict[str, VersionRange]


def merge_dependencies(specs: Iterable[DependencySpec]) -> MergedDependencySet:
    """Collapse requested dependencies to one range per package name.

    Ranges given for the same name are intersected. An empty
    intersection is kept as is; the solver is the one to reject it.
    The result iterates in name order.
    """
    merged: Dict[str, VersionRange] = {}
    for spec in specs:
        if spec.name in merged:
            merged[spec.name] = merged[spec.name] & spec.version_range
        else:
            merged[spec.name] = spec.version_range
    return {name: merged[name] for name in sorted(merged)}


def as_specs(merged: MergedDependencySet) -> List[DependencySpec]:
    """Turn a merged set back into specs, all selecting the main library."""
    return [
        DependencySpec(name=name, version_range=merged[name])
        for name in sorted(merged)
    ]


def nub_dependencies(specs: Iterable[DependencySpec]) -> List[DependencySpec]:
    return as_specs(merge_dependencies(specs))
