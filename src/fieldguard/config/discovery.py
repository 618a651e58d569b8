"""Config file discovery and loading.

Walk-up finder locates fieldguard.toml, similar to how git finds .git/.
Supports the FIELDGUARD_CONFIG env var and the --config CLI flag.

File layout (every key optional)::

    [validation]
    stop_on_first_error = true
    expose_rule_names = true

    [validation.tag_names]
    validator = "check"
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from fieldguard.config.models import ValidationOptions

CONFIG_FILENAME = "fieldguard.toml"
CONFIG_ENV_VAR = "FIELDGUARD_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for fieldguard.toml.

    Returns the path to the config file, or None if not found.
    Checks FIELDGUARD_CONFIG first; a set-but-missing path yields None
    rather than falling back to discovery.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse a fieldguard.toml file into a plain dict."""
    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_options(path: Path | None = None, cwd: Path | None = None) -> ValidationOptions:
    """Load the ``[validation]`` section as ValidationOptions.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default options if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return ValidationOptions()
    return ValidationOptions.model_validate(read_config(path).get("validation", {}))
