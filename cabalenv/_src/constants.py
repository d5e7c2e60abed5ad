from enum import Enum


DEFAULT_ENVIRONMENT_NAME = "default"
DEFAULT_COMPILER = "ghc"
DEFAULT_SOLVER = "cabal"

# always exposed, even without --transitive
BASE_PACKAGE = "base"
MAIN_LIBRARY = "main"

FAKE_PACKAGE_NAME = "fake-package"
FAKE_PACKAGE_DIR_PREFIX = "cabalenv-fake-package-"
SOLVER_BUILD_DIR = "dist-newstyle"

# trailer lines start with this, the toolchain reads them as comments
STATE_MARKER = "-- cabalenv"
STATE_FORMAT_VERSION = 1

ENVIRONMENT_HEADER = [
    "-- This is GHC environment file written by cabalenv",
    "--",
]

FAKE_PACKAGE_TEMPLATE = """\
cabal-version: 2.4
name:          {name}
version:       0
build-type:    Simple

library
  default-language: Haskell2010
"""

CABAL_PROJECT_TEMPLATE = """\
packages: .
with-compiler: {compiler}
documentation: False
write-ghc-environment-files: always
package *
  documentation: False
"""


class UnitKind(str, Enum):
    LOCAL = "local"
    INPLACE = "inplace"
    EXTERNAL = "external"


class ShowFormat(str, Enum):
    TEXT = "text"
    YAML = "yaml"
