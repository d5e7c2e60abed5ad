import re
from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, PlainSerializer, PlainValidator
from typing_extensions import Annotated

from cabalenv._src.constants import MAIN_LIBRARY
from cabalenv._src.exceptions import InvalidDependency
from cabalenv._src.version_range import VersionRange, VersionRangeError


VersionRangeField = Annotated[
    VersionRange,
    PlainValidator(VersionRange.coerce),
    PlainSerializer(str, return_type=str),
]

_NAME_RE = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*")
_DEPENDENCY_RE = re.compile(
    r"^\s*(?P<name>[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*)"
    r"(?::(?P<libs>\{[^}]*\}|[A-Za-z0-9-]+))?"
    r"\s*(?P<range>.*?)\s*$"
)


def is_package_name(name: str) -> bool:
    """Cabal package names are dash separated words, none of them all digits."""
    if not _NAME_RE.fullmatch(name):
        return False
    return all(not part.isdigit() for part in name.split("-"))


class DependencySpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version_range: VersionRangeField = VersionRange.any()
    components: FrozenSet[str] = frozenset({MAIN_LIBRARY})

    @classmethod
    def parse(cls, token: str) -> "DependencySpec":
        """Parse ``name[:lib] [range]``, e.g. ``aeson >=2.0`` or ``text:{text} ^>=2.0``."""
        match = _DEPENDENCY_RE.match(token)
        if match is None or not is_package_name(match.group("name")):
            raise InvalidDependency(token, "expected a package name")

        name = match.group("name")
        libs = match.group("libs")
        if libs is None:
            components = frozenset({MAIN_LIBRARY})
        else:
            names = [lib.strip() for lib in libs.strip("{}").split(",") if lib.strip()]
            # the package's own name selects its main library
            components = frozenset(MAIN_LIBRARY if lib == name else lib for lib in names)
            if not components:
                raise InvalidDependency(token, "empty library selector")

        try:
            version_range = VersionRange.parse(match.group("range"))
        except VersionRangeError as err:
            raise InvalidDependency(token, str(err))

        return cls(name=name, version_range=version_range, components=components)

    def __str__(self):
        if self.version_range.is_any():
            return self.name
        return f"{self.name} {self.version_range}"
