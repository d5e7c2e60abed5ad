from packaging.version import Version

from cabalenv._src.constants import (
    CABAL_PROJECT_TEMPLATE,
    FAKE_PACKAGE_NAME,
    FAKE_PACKAGE_TEMPLATE,
)
from cabalenv._src.exceptions import UnrepresentableConstraint
from cabalenv._src.merge import MergedDependencySet
from cabalenv._src.version_range import VersionRange


# cabal's version parser accepts at most nine digits per component
MAX_COMPONENT_DIGITS = 9


def _unrepresentable_reason(version: Version):
    if version.epoch:
        return f"version {version} has an epoch"
    if version.pre is not None or version.post is not None or version.dev is not None:
        return f"version {version} is a pre, post or dev release"
    if version.local is not None:
        return f"version {version} has a local segment"
    for part in version.release:
        if len(str(part)) > MAX_COMPONENT_DIGITS:
            return f"version component {part} is longer than {MAX_COMPONENT_DIGITS} digits"
    return None


def check_representable(name: str, version_range: VersionRange) -> None:
    for version in version_range.bounds():
        reason = _unrepresentable_reason(version)
        if reason is not None:
            raise UnrepresentableConstraint(name, version_range, reason)


def build_depends_line(name: str, version_range: VersionRange) -> str:
    if version_range.is_any():
        return name
    return f"{name} {version_range}"


def synthesize_manifest(deps: MergedDependencySet, package_name: str = FAKE_PACKAGE_NAME) -> str:
    """Render a throwaway ``.cabal`` file depending on exactly ``deps``."""
    for name, version_range in deps.items():
        check_representable(name, version_range)

    manifest = FAKE_PACKAGE_TEMPLATE.format(name=package_name)
    if deps:
        manifest += "  build-depends:\n"
        for name in sorted(deps):
            manifest += f"    , {build_depends_line(name, deps[name])}\n"
    return manifest


def synthesize_project(compiler: str) -> str:
    return CABAL_PROJECT_TEMPLATE.format(compiler=compiler)
