"""Environment variable loading and settings for design-tool.

Load order (first wins):
  1. Existing OS environment variables — never overwrite.
  2. .env file at --env-file path (if explicitly provided).
  3. .env file walking up from cwd, stopping at .git (file or dir).

Walking stops at .git so we never load a .env from outside the repo.
Only sets variables that are NOT already in os.environ.

Recognised variables:
  DESIGN_TOOL_DESIGN_TYPE    web | mobile | print | general (default web)
  DESIGN_TOOL_PALETTE_SIZE   palette length, >= 1 (default 8)
  DESIGN_TOOL_MAX_DIMENSION  longest image side after decode (default 1920)
  TESSERACT_CMD              tesseract binary, read by the ocr technique
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from design_checker.core.raster import MAX_DIMENSION
from design_checker.core.types import DESIGN_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    design_type: str = 'web'
    palette_size: int = 8
    max_dimension: int = MAX_DIMENSION
    tesseract_cmd: str | None = None


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # Stop at repo root: .git can be a dir (normal clone) or file (worktree)
        if (current / '.git').exists():
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse a .env file into a dict. Handles KEY=value, KEY="value" and `export KEY=value`."""
    result: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, raw_value = line.partition('=')
        key = key.strip().removeprefix('export ').strip()
        value = raw_value.strip().strip('"').strip("'")
        if key:
            result[key] = value
    return result


def load_env(env_file: str | None = None) -> Path | None:
    """Load .env into os.environ for keys not already set.

    Returns the path that was loaded, or None if no .env was found/used.
    """
    if env_file:
        path = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in _parse_dotenv(path).items():
        if key not in os.environ:
            os.environ[key] = value

    return path


def _int_setting(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning('Ignoring %s=%r: not an integer', name, raw)
        return default
    if value < 1:
        logger.warning('Ignoring %s=%r: must be >= 1', name, raw)
        return default
    return value


def load_settings() -> Settings:
    """Read DESIGN_TOOL_* and TESSERACT_CMD from the environment. Bad values fall back to defaults."""
    design_type = os.environ.get('DESIGN_TOOL_DESIGN_TYPE', 'web').strip().lower()
    if design_type not in DESIGN_TYPES:
        logger.warning('Ignoring DESIGN_TOOL_DESIGN_TYPE=%r: expected one of %s', design_type, ', '.join(DESIGN_TYPES))
        design_type = 'web'
    return Settings(
        design_type=design_type,
        palette_size=_int_setting('DESIGN_TOOL_PALETTE_SIZE', 8),
        max_dimension=_int_setting('DESIGN_TOOL_MAX_DIMENSION', MAX_DIMENSION),
        tesseract_cmd=os.environ.get('TESSERACT_CMD') or None,
    )
