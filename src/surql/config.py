"""Load surql settings from YAML, TOML, or JSON files.

The ``delete`` section supplies defaults for ``surql delete``::

    [delete]
    return = "none"
    timeout = 5
    parallel = true
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .exc import WriterError
from .query.types import ReturnMode

_DELETE_KEYS = ('return', 'timeout', 'parallel')


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a configuration dict from a file, dispatched by extension.

    Supported extensions: ``.json``, ``.toml``, ``.yaml`` / ``.yml``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == '.json':
        with open(path) as f:
            data = json.load(f)
    elif suffix == '.toml':
        data = _load_toml(path)
    elif suffix in ('.yaml', '.yml'):
        data = _load_yaml(path)
    else:
        raise ValueError(
            f"Unsupported config file extension {suffix!r}. "
            "Use .json, .toml, .yaml, or .yml."
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping at the top level, "
            f"got {type(data).__name__}"
        )
    return data


def cli_defaults_from_config(path: str | Path) -> dict[str, Any]:
    """Read the ``delete`` section of a config file as CLI defaults.

    Returns a dict with any of ``return``, ``timeout`` and ``parallel``.
    """
    data = load_config(path)
    section = data.get('delete', {})
    if not isinstance(section, dict):
        raise WriterError("Config section 'delete' must be a table/mapping")

    unknown = sorted(set(section) - set(_DELETE_KEYS))
    if unknown:
        raise WriterError(f"Unknown keys in config section 'delete': {', '.join(unknown)}")

    defaults: dict[str, Any] = {}
    if 'return' in section:
        defaults['return'] = ReturnMode.coerce(section['return'])
    if 'timeout' in section:
        timeout = section['timeout']
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise WriterError(f"Config 'delete.timeout' must be a number, got {timeout!r}")
        defaults['timeout'] = timeout
    if 'parallel' in section:
        defaults['parallel'] = bool(section['parallel'])
    return defaults


# ── Internal loaders ─────────────────────────────────────────────

def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML using ``tomllib`` (3.11+) or ``tomli``."""
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ModuleNotFoundError:
            raise ImportError(
                "TOML support requires Python 3.11+ (built-in tomllib) "
                "or the 'tomli' package. Install with: pip install surql[toml]"
            )
    with open(path, 'rb') as f:
        return tomllib.load(f)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML using ``pyyaml``."""
    try:
        import yaml
    except ModuleNotFoundError:
        raise ImportError(
            "YAML support requires the 'pyyaml' package. "
            "Install with: pip install surql[yaml]"
        )
    with open(path) as f:
        return yaml.safe_load(f)
