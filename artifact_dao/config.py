# artifact_dao/config.py
import logging
import os
from typing import Any, Dict

import yaml

CONFIG_FILENAME = "artifact_dao.yaml"

# -------- Defaults --------
_DEFAULT: Dict[str, Any] = {
    "roles": {
        "owner": "@owner",
        "assignee": "@assignee",
    },
    "governance": {
        "quorum": 0,
        "debate_period_sec": 3600,
    },
    # Seed balances for the in-memory token view (address -> weight)
    "token": {"balances": {}},
    "logging": {"level": "INFO"},
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
}

# -------- ENV overrides --------
_ENV_MAP = {
    ("roles", "owner"): ("DAO_OWNER", str),
    ("roles", "assignee"): ("DAO_ASSIGNEE", str),
    ("governance", "quorum"): ("DAO_QUORUM", int),
    ("governance", "debate_period_sec"): ("DAO_DEBATE_PERIOD_SEC", int),
    ("logging", "level"): ("DAO_LOG_LEVEL", str),
}


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for (section, key), (env_name, cast) in _ENV_MAP.items():
        val = os.getenv(env_name)
        if val is None:
            continue
        try:
            casted = cast(val)
        except ValueError as e:
            raise ValueError(f"{env_name}={val!r} is not a valid {cast.__name__}") from e
        cfg[section] = dict(cfg.get(section) or {})
        cfg[section][key] = casted
    return cfg


def load_config(repo_root: str) -> Dict[str, Any]:
    """
    Loads the YAML config from repo_root/artifact_dao.yaml.
    Returns defaults if the file doesn't exist. A file that exists but is
    not a YAML mapping is an error.
    Also applies ENV overrides for roles, rules and log level.
    """
    path = os.path.join(repo_root, CONFIG_FILENAME)
    cfg = _deep_merge({}, _DEFAULT)

    if os.path.exists(path):
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top-level YAML must be a mapping")
        cfg = _deep_merge(cfg, data)

    cfg = _apply_env_overrides(cfg)

    token = dict(cfg.get("token") or {})
    balances = token.get("balances") or {}
    token["balances"] = {str(k): int(v) for k, v in balances.items()}
    cfg["token"] = token

    return cfg


def configure_logging(cfg: Dict[str, Any]) -> None:
    level_name = str(cfg.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# -------- Small helpers used by the app --------
def get_owner(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("roles", {}).get("owner", "@owner"))


def get_assignee(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("roles", {}).get("assignee", "@assignee"))


def get_quorum(cfg: Dict[str, Any]) -> int:
    return int(cfg.get("governance", {}).get("quorum", 0))


def get_debate_period_sec(cfg: Dict[str, Any]) -> int:
    return int(cfg.get("governance", {}).get("debate_period_sec", 3600))


def get_token_balances(cfg: Dict[str, Any]) -> Dict[str, int]:
    return dict(cfg.get("token", {}).get("balances", {}))


def get_bind_host(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("server", {}).get("host", "127.0.0.1"))


def get_bind_port(cfg: Dict[str, Any]) -> int:
    return int(cfg.get("server", {}).get("port", 8000))
