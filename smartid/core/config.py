# smartid/core/config.py
from __future__ import annotations
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple

import yaml

from smartid.models.models import TrustedIssuer

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    # Relying party
    relying_party_uuid: str
    relying_party_name: str
    authorize_token: Optional[str]
    # Remote service
    hostname: str
    port: int
    api_path: str
    request_timeout: float
    # Trust
    trusted_issuers: Tuple[TrustedIssuer, ...]
    # Logging
    log_level: str
    # Informational
    cfg_file_used: Optional[str] = None

    @property
    def base_url(self) -> str:
        return f"https://{self.hostname}:{self.port}{self.api_path}"

    @staticmethod
    def from_mapping(data: Dict[str, Any], cfg_file_used: Optional[str] = None) -> "Settings":
        """Build settings from a (partial) mapping shaped like the YAML file."""
        cfg = _merge(_DEFAULTS, data or {})
        rp = cfg.get("relying_party") or {}
        api = cfg.get("api") or {}

        hostname, port = _split_host(str(api.get("hostname") or ""), api.get("port"))
        issuers = [TrustedIssuer.from_mapping(i) for i in (cfg.get("trusted_issuers") or [])]
        if not issuers:
            log.warning("No trusted issuers configured - every certificate will be rejected")

        return Settings(
            relying_party_uuid=str(rp.get("uuid") or ""),
            relying_party_name=str(rp.get("name") or ""),
            authorize_token=api.get("authorize_token"),
            hostname=hostname,
            port=port,
            api_path=str(api.get("path") or "").rstrip("/"),
            request_timeout=float(api.get("request_timeout", 10)),
            trusted_issuers=tuple(issuers),
            log_level=str((cfg.get("logging") or {}).get("level") or "INFO").upper(),
            cfg_file_used=cfg_file_used,
        )


_DEFAULTS: Dict[str, Any] = {
    "relying_party": {
        "uuid": None,
        "name": None,
    },
    "api": {
        "hostname": "sid.demo.sk.ee",
        "port": None,
        "path": "/smart-id-rp/v1",
        "authorize_token": None,
        "request_timeout": 10,
    },
    "trusted_issuers": [],
    "logging": {"level": "INFO"},
}

_SEARCH_ORDER = (
    "smartid.yaml",
    "smartid.yml",
    "smartid.dev.yaml",
)

def _merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def _split_host(hostname: str, port: Optional[Any]) -> Tuple[str, int]:
    """Accept either `host` + separate port or a combined `host:port`; default port 443."""
    host, _, embedded = hostname.partition(":")
    if port is None and embedded:
        port = embedded
    return host, int(port or 443)

def _resolve_path(s: str, base_dir: Path) -> Optional[Path]:
    """
    Try multiple resolution strategies for a relative path:
    - as given relative to CWD
    - relative to the project root
    Return first existing path; else None.
    """
    p = Path(s)
    if p.is_absolute():
        return p if p.exists() else None
    for c in (Path.cwd() / p, base_dir / p, p):
        if c.exists():
            return c
    return None

def _substitute_env_vars(obj: Any) -> Any:
    """Replace string values of the form ${VAR_NAME} with the environment value."""
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    if isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        var_name = obj[2:-1]
        env_value = os.getenv(var_name)
        if env_value:
            log.debug("Substituted ${%s} from environment", var_name)
            return env_value
        log.warning("Environment variable %s not found, keeping placeholder", var_name)
    return obj

def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load YAML settings.

    Priority:
      1) explicit `path` arg (absolute or relative)
      2) env SMARTID_CONFIG (absolute or relative)
      3) search order in project root: smartid.yaml|yml|smartid.dev.yaml

    With no file found the built-in defaults are used, which point at the
    public demo environment but carry no relying-party identity.
    """
    base_dir = Path(__file__).resolve().parent.parent.parent
    cfg_file_used: Optional[Path] = None

    if path:
        candidate = _resolve_path(path, base_dir)
        if not candidate:
            raise FileNotFoundError(f"Config file not found: {path}")
        cfg_file_used = candidate
    else:
        env_cfg = os.getenv("SMARTID_CONFIG")
        if env_cfg:
            candidate = _resolve_path(env_cfg, base_dir)
            if not candidate:
                tried: List[str] = [str(Path(env_cfg)), str(base_dir / env_cfg), str(Path.cwd() / env_cfg)]
                raise FileNotFoundError("SMARTID_CONFIG not found. Tried: " + ", ".join(tried))
            cfg_file_used = candidate
        else:
            for name in _SEARCH_ORDER:
                p = base_dir / name
                if p.exists():
                    cfg_file_used = p
                    break

    data: Dict[str, Any] = {}
    if cfg_file_used:
        with open(cfg_file_used, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        data = _substitute_env_vars(data)
        log.info("Loaded config from: %s", str(cfg_file_used))

    settings = Settings.from_mapping(data, cfg_file_used=str(cfg_file_used) if cfg_file_used else None)
    logging.getLogger("smartid").setLevel(settings.log_level)
    return settings
