"""Round-trip state embedded at the end of an environment file.

GHC ignores lines starting with ``--``, so the declared packages, the
transitivity flag and the last build plan are stored as comment lines
behind :data:`STATE_MARKER`, one field per line::

    -- cabalenv format 1
    -- cabalenv name default
    -- cabalenv transitive false
    -- cabalenv package aeson >=2.0
    -- cabalenv plan eyJjYWJhbC12ZXJzaW9uIjog...

The format line comes first so a future layout can be told apart and
rejected instead of being misread.
"""
import base64
import binascii
import logging
from pathlib import Path
from typing import List, Optional

from cabalenv._src.constants import STATE_FORMAT_VERSION, STATE_MARKER
from cabalenv._src.exceptions import EnvironmentCorrupt, InvalidDependency
from cabalenv._src.models.environment import Environment
from cabalenv._src.models.package import DependencySpec


logger = logging.getLogger(__name__)

KNOWN_DIRECTIVES = ("clear-package-db", "global-package-db", "package-db", "package-id")


def encode_environment(env: Environment) -> List[str]:
    """Trailer lines for ``env``, without line terminators."""
    fields = [
        f"format {STATE_FORMAT_VERSION}",
        f"name {env.name}",
        f"transitive {'true' if env.transitive else 'false'}",
    ]
    fields += [f"package {dep}" for dep in env.declared_deps]
    fields.append(f"plan {base64.b64encode(env.plan_bytes).decode('ascii')}")
    return [f"{STATE_MARKER} {field}" for field in fields]


def decode_environment(text: str, path="<environment>") -> Environment:
    """Parse the state back out of an environment file written by cabalenv.

    Raises EnvironmentCorrupt for anything else.
    """
    prefix = f"{STATE_MARKER} "
    fields = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if line.startswith(prefix):
            fields.append((lineno, line[len(prefix):]))
        elif not line.strip() or line.startswith("--"):
            continue
        elif line.split(maxsplit=1)[0] not in KNOWN_DIRECTIVES:
            raise EnvironmentCorrupt(path, f"line {lineno}: unexpected content {line!r}")

    if not fields:
        raise EnvironmentCorrupt(path, "no cabalenv state found")

    lineno, first = fields[0]
    key, _, value = first.partition(" ")
    if key != "format":
        raise EnvironmentCorrupt(path, f"line {lineno}: expected format marker, got {first!r}")
    if value != str(STATE_FORMAT_VERSION):
        raise EnvironmentCorrupt(path, f"unsupported state format {value!r}")

    single = {}
    deps = []
    for lineno, field in fields[1:]:
        key, _, value = field.partition(" ")
        if key == "package":
            try:
                deps.append(DependencySpec.parse(value))
            except InvalidDependency as err:
                raise EnvironmentCorrupt(path, f"line {lineno}: {err.msg}")
        elif key in ("name", "transitive", "plan"):
            if key in single:
                raise EnvironmentCorrupt(path, f"line {lineno}: duplicate {key} field")
            single[key] = value
        else:
            raise EnvironmentCorrupt(path, f"line {lineno}: unknown field {key!r}")

    missing = [key for key in ("name", "transitive", "plan") if key not in single]
    if missing:
        raise EnvironmentCorrupt(path, f"missing field(s): {', '.join(missing)}")

    if single["transitive"] not in ("true", "false"):
        raise EnvironmentCorrupt(path, f"bad transitive flag {single['transitive']!r}")

    try:
        plan_bytes = base64.b64decode(single["plan"], validate=True)
    except binascii.Error as err:
        raise EnvironmentCorrupt(path, f"embedded plan is not valid base64: {err}")

    return Environment(
        name=single["name"],
        declared_deps=deps,
        transitive=single["transitive"] == "true",
        plan_bytes=plan_bytes,
    )


def read_environment(path: Path) -> Optional[Environment]:
    """Decode the environment file at ``path``, or None if there is none."""
    path = Path(path)
    if not path.exists():
        logger.debug("no environment file at %s", path)
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise EnvironmentCorrupt(path, f"not UTF-8 text: {err}")
    return decode_environment(text, path=path)
