import json

import pytest

from cabalenv._src.config import Settings
from cabalenv._src.exceptions import SolverFailure
from cabalenv._src.install import Reconciler
from cabalenv._src.models.plan import BuildPlan
from cabalenv._src.toolchain import ToolchainInfo


def unit(name, version, style="global", unit_id=None):
    entry = {
        "type": "configured",
        "id": unit_id or f"{name}-{version}",
        "pkg-name": name,
        "pkg-version": version,
        "style": style,
        "components": {"lib": {"depends": []}},
    }
    if style is None:
        entry["type"] = "pre-existing"
        del entry["style"]
        del entry["components"]
    return entry


def plan_json(*units, compiler_id="ghc-9.6.3"):
    return json.dumps({
        "cabal-version": "3.10.2.1",
        "cabal-lib-version": "3.10.2.1",
        "compiler-id": compiler_id,
        "os": "linux",
        "arch": "x86_64",
        "install-plan": list(units),
    }, indent=2).encode("utf-8")


@pytest.fixture
def make_plan():
    """Factory for BuildPlans; ``{"aeson": "2.1.0"}`` style or explicit units."""
    def _make(packages=None, units=()):
        entries = list(units)
        for name, version in (packages or {}).items():
            entries.append(unit(name, version))
        return BuildPlan.from_json(plan_json(*entries))
    return _make


class FakeSolver:
    """Stands in for ``invoke_solver``; records every call."""

    def __init__(self, plan=None, error=None):
        self.plan = plan
        self.error = error
        self.calls = []

    def __call__(self, manifest, project, solver="cabal", dry_run=False):
        self.calls.append({"manifest": manifest, "project": project, "solver": solver, "dry_run": dry_run})
        if self.error is not None:
            raise self.error
        if dry_run:
            return None
        return self.plan


@pytest.fixture
def settings(tmp_path):
    return Settings(
        compiler="ghc-9.6.3",
        solver="cabal",
        ghc_dir=tmp_path / "ghc",
        store_dir=tmp_path / "store",
    )


@pytest.fixture
def toolchain(settings):
    return ToolchainInfo(
        compiler=settings.compiler,
        version="9.6.3",
        target_platform="x86_64-unknown-linux",
        environments_dir=settings.ghc_dir / "x86_64-linux-9.6.3" / "environments",
        package_db=settings.store_dir / "ghc-9.6.3" / "package.db",
    )


@pytest.fixture
def make_reconciler(settings, toolchain):
    def _make(solver):
        return Reconciler(settings, toolchain, solve=solver)
    return _make


@pytest.fixture
def failing_solver():
    return FakeSolver(error=SolverFailure("cabal v2-build failed", "hint", ["cabal"], "/tmp", "boom"))
