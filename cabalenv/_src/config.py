import os
import re
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel

from cabalenv._src.constants import DEFAULT_COMPILER, DEFAULT_SOLVER


_STORE_DIR_RE = re.compile(r"^store-dir:\s*(?P<path>\S.*?)\s*$", re.MULTILINE)


class Settings(BaseModel):
    """Where the compiler, the solver and their state live."""
    compiler: str = DEFAULT_COMPILER
    solver: str = DEFAULT_SOLVER
    ghc_dir: Path
    store_dir: Path

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, compiler: Optional[str] = None):
        if environ is None:
            environ = os.environ
        home = Path(environ.get("HOME", str(Path.home())))

        ghc_dir = environ.get("CABALENV_GHC_DIR")
        return cls(
            compiler=compiler or DEFAULT_COMPILER,
            solver=environ.get("CABALENV_CABAL", DEFAULT_SOLVER),
            ghc_dir=Path(ghc_dir) if ghc_dir else home / ".ghc",
            store_dir=cabal_store_dir(environ, home),
        )


def cabal_store_dir(environ: Mapping[str, str], home: Path) -> Path:
    """Locate cabal's package store the way cabal-install does.

    An explicit ``store-dir:`` in the cabal config wins. Otherwise
    ``$CABAL_DIR`` or ``~/.cabal`` is used when present, and the XDG
    state directory when not.
    """
    cabal_dir = environ.get("CABAL_DIR")
    if cabal_dir is None and (home / ".cabal").is_dir():
        cabal_dir = str(home / ".cabal")

    if cabal_dir is not None:
        config_file = Path(cabal_dir) / "config"
        default_store = Path(cabal_dir) / "store"
    else:
        xdg_config = Path(environ.get("XDG_CONFIG_HOME", str(home / ".config")))
        xdg_state = Path(environ.get("XDG_STATE_HOME", str(home / ".local" / "state")))
        config_file = xdg_config / "cabal" / "config"
        default_store = xdg_state / "cabal" / "store"

    if config_file.is_file():
        match = _STORE_DIR_RE.search(config_file.read_text(encoding="utf-8"))
        if match:
            return Path(match.group("path")).expanduser()
    return default_store
