import ast
import logging
import subprocess
from pathlib import Path
from typing import Dict

from pydantic import BaseModel

from cabalenv._src.config import Settings
from cabalenv._src.exceptions import ToolchainError


logger = logging.getLogger(__name__)


class ToolchainInfo(BaseModel):
    compiler: str
    version: str
    target_platform: str
    environments_dir: Path
    package_db: Path


def parse_ghc_info(output: str) -> Dict[str, str]:
    """``ghc --info`` prints a Haskell list of string pairs, which is also a Python literal."""
    pairs = ast.literal_eval(output.strip())
    return {key: value for key, value in pairs}


def platform_slug(target_platform: str) -> str:
    """``x86_64-unknown-linux`` -> ``x86_64-linux``."""
    parts = target_platform.split("-")
    return f"{parts[0]}-{parts[-1]}"


def discover_toolchain(settings: Settings) -> ToolchainInfo:
    command = [settings.compiler, "--info"]
    try:
        proc = subprocess.run(command, capture_output=True, text=True, check=True)
        info = parse_ghc_info(proc.stdout)
    except subprocess.CalledProcessError as err:
        raise ToolchainError(command, err.stderr or err)
    except (OSError, ValueError, SyntaxError, TypeError) as err:
        raise ToolchainError(command, err)

    for key in ("Project version", "Target platform"):
        if key not in info:
            raise ToolchainError(command, f"no `{key}` in compiler info")

    version = info["Project version"]
    target_platform = info["Target platform"]
    toolchain = ToolchainInfo(
        compiler=settings.compiler,
        version=version,
        target_platform=target_platform,
        environments_dir=settings.ghc_dir / f"{platform_slug(target_platform)}-{version}" / "environments",
        package_db=settings.store_dir / f"ghc-{version}" / "package.db",
    )
    logger.debug("GHC environment directory: %s", toolchain.environments_dir)
    return toolchain
