from typing import Any, Dict, List

from pydantic import BaseModel, Field

from cabalenv._src.models.package import DependencySpec
from cabalenv._src.models.plan import BuildPlan


class Environment(BaseModel):
    """A named package environment as persisted in its environment file.

    ``plan_bytes`` is the last build plan, byte for byte, so a later
    install can check whether it still covers the requested packages
    without asking the solver again.
    """
    name: str
    declared_deps: List[DependencySpec] = Field(default=[])
    transitive: bool
    plan_bytes: bytes = Field(repr=False)

    def plan(self) -> BuildPlan:
        return BuildPlan.from_json(self.plan_bytes, source=f"plan embedded in environment `{self.name}`")

    def summary(self) -> Dict[str, Any]:
        plan = self.plan()
        return {
            "name": self.name,
            "transitive": self.transitive,
            "compiler": plan.compiler_id,
            "packages": [str(dep) for dep in self.declared_deps],
            "resolved": [str(pid) for pid in plan.package_ids()],
        }
