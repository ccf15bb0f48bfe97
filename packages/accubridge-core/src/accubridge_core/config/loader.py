"""accubridge.yaml discovery and loading.

``${VAR}`` references are expanded from the environment. The accurev password
is never read from the file; it comes from the variable named by
``accurev.password_env``.
"""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import AccuBridgeConfig

_ENV_REF = re.compile(r"\$\{(\w+)\}")

# Keys that would put a credential in the file itself.
_SECRET_KEYS = {"password", "passwd"}


def config_search_path(cli_path: str | None = None) -> list[Path]:
    """Candidate files, highest priority first: CLI, project-local, user-global."""
    paths = [Path("./accubridge.yaml"), Path.home() / ".accubridge" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> AccuBridgeConfig:
    """Load the first non-empty config file found, else the defaults.

    An explicit *cli_path* must exist.
    """
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_search_path(cli_path):
        if not path.exists():
            continue
        try:
            with open(path) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: expected a mapping at the top level")
        _reject_inline_secrets(raw, path)
        try:
            return AccuBridgeConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return AccuBridgeConfig()


def _reject_inline_secrets(raw: dict, path: Path, prefix: str = "") -> None:
    for key, value in raw.items():
        dotted = f"{prefix}{key}"
        if str(key).lower() in _SECRET_KEYS:
            raise ValueError(
                f"Invalid config in {path}: '{dotted}' is not allowed; "
                "set accurev.password_env to the name of an environment variable instead"
            )
        if isinstance(value, dict):
            _reject_inline_secrets(value, path, prefix=f"{dotted}.")


def _expand_env_vars(obj: object) -> object:
    """Expand ${VAR} in every string of a parsed YAML tree; unset vars become ''."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `accubridge config init`
DEFAULT_CONFIG_TEMPLATE = """\
# accubridge.yaml

# AccuRev command-line client
accurev:
  exe_path: "accurev"            # name on PATH, or full path to accurev / accurev.exe
  username: "${ACCUREV_USER}"
  password_env: "ACCUREV_PASSWORD"
  timeout: 300                   # seconds per accurev invocation
  path_separator: "\\\\"           # depot path separator used in arguments
  epoch_timestamps: false        # true reports every file as modified at the epoch

# AccuWork issue tracking
accuwork:
  depot: ""
  fields:
    issue_id: "issueNum"
    release: "targetRelease"
    title: "shortDescription"
    description: "description"
    status: "status"
  closed_statuses: ["Closed"]
  # filter_category: "productArea"   # must be a 'Choose' field
  # category_id_filter: ["Server"]

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
