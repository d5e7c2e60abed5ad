import json
from typing import Any, Dict, List, Set

from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, Field, ValidationError

from cabalenv._src.constants import UnitKind
from cabalenv._src.exceptions import PlanDecodeError


class PackageId(BaseModel):
    name: str
    version: str

    @property
    def parsed_version(self) -> Version:
        return Version(self.version)

    def __str__(self):
        return f"{self.name}-{self.version}"


class ResolvedUnit(BaseModel):
    unit_id: str
    package_id: PackageId
    unit_kind: UnitKind
    components: Dict[str, Any] = Field(default={})


class BuildPlan(BaseModel):
    """The install plan cabal wrote for the fake package.

    ``raw`` keeps the exact bytes of ``plan.json`` so they can be
    embedded in the environment file unchanged.
    """
    units: Dict[str, ResolvedUnit]
    compiler_id: str
    raw: bytes = Field(default=b"", repr=False)

    @classmethod
    def from_json(cls, data: bytes, source: str = "<embedded plan>") -> "BuildPlan":
        try:
            raw_plan = json.loads(data)
            units = {}
            for entry in raw_plan["install-plan"]:
                unit = ResolvedUnit(
                    unit_id=entry["id"],
                    package_id=PackageId(name=entry["pkg-name"], version=entry["pkg-version"]),
                    unit_kind=_unit_kind(entry),
                    components=entry.get("components", {}),
                )
                # reject versions we could never compare against a range
                unit.package_id.parsed_version
                units[unit.unit_id] = unit
            return cls(units=units, compiler_id=raw_plan["compiler-id"], raw=data)
        except (ValueError, KeyError, TypeError, InvalidVersion, ValidationError) as err:
            raise PlanDecodeError(source, err)

    def package_ids(self) -> List[PackageId]:
        """Distinct package identifiers in the plan, sorted."""
        seen: Set[str] = set()
        out = []
        for unit in self.units.values():
            key = str(unit.package_id)
            if key not in seen:
                seen.add(key)
                out.append(unit.package_id)
        return sorted(out, key=lambda pid: (pid.name, pid.parsed_version))

    def versions_of(self, name: str) -> Set[Version]:
        return {
            unit.package_id.parsed_version
            for unit in self.units.values()
            if unit.package_id.name == name
        }


def _unit_kind(entry: Dict[str, Any]) -> UnitKind:
    style = entry.get("style")
    if style == "local":
        return UnitKind.LOCAL
    if style == "inplace":
        return UnitKind.INPLACE
    # global store units and pre-existing (compiler shipped) ones
    return UnitKind.EXTERNAL
