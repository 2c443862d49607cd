"""Configuration loader for chatrelay."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

_DEFAULT_API_URL = "https://open.bigmodel.cn/api/paas/v4/chat/completions"
_DEFAULT_MODEL = "glm-4-flash"


@dataclass
class UpstreamConfig:
    provider: str = "openai"
    api_url: str = _DEFAULT_API_URL
    model: str = _DEFAULT_MODEL
    timeout: float = 60.0
    max_tokens: int | None = None
    temperature: float | None = None
    api_key: str | None = field(default=None, repr=False)


@dataclass
class HistoryConfig:
    window_size: int = 6
    anonymous_user_id: str = "anonymous"


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class SystemConfig:
    debug: bool = False
    log_level: str = "INFO"


@dataclass
class RelayConfig:
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    system: SystemConfig = field(default_factory=SystemConfig)


def _optional(value: object, cast: type) -> object:
    return None if value is None else cast(value)


def load_config(path: str | None = None) -> RelayConfig:
    """Load configuration from a YAML file and .env, returning a RelayConfig."""
    load_dotenv()

    raw: dict = {}
    if path and Path(path).exists():
        with open(path) as fh:
            raw = yaml.safe_load(fh) or {}
    else:
        default_path = Path(__file__).parent.parent.parent / "config" / "chatrelay.yaml"
        if default_path.exists():
            with open(default_path) as fh:
                raw = yaml.safe_load(fh) or {}

    up_raw = raw.get("upstream", {})
    provider = str(up_raw.get("provider", "openai")).lower()
    if provider not in ("openai", "groq"):
        raise ValueError(f"Unknown upstream provider: {provider!r} (expected 'openai' or 'groq')")
    key_var = "GROQ_API_KEY" if provider == "groq" else "CHATRELAY_API_KEY"
    upstream_config = UpstreamConfig(
        provider=provider,
        api_url=os.environ.get("CHATRELAY_API_URL") or up_raw.get("api_url", _DEFAULT_API_URL),
        model=os.environ.get("CHATRELAY_MODEL") or up_raw.get("model", _DEFAULT_MODEL),
        timeout=float(up_raw.get("timeout", 60.0)),
        max_tokens=_optional(up_raw.get("max_tokens"), int),
        temperature=_optional(up_raw.get("temperature"), float),
        api_key=os.environ.get(key_var),
    )

    hist_raw = raw.get("history", {})
    window_size = int(hist_raw.get("window_size", 6))
    if window_size < 0:
        raise ValueError(f"history.window_size must be >= 0, got {window_size}")
    history_config = HistoryConfig(
        window_size=window_size,
        anonymous_user_id=hist_raw.get("anonymous_user_id", "anonymous"),
    )

    srv_raw = raw.get("server", {})
    server_config = ServerConfig(
        host=srv_raw.get("host", "0.0.0.0"),
        port=int(srv_raw.get("port", 8080)),
        cors_origins=list(srv_raw.get("cors_origins", ["*"])),
    )

    sys_raw = raw.get("system", {})
    system_config = SystemConfig(
        debug=bool(sys_raw.get("debug", False)),
        log_level=str(sys_raw.get("log_level", "INFO")).upper(),
    )

    _validate_api_key(upstream_config, key_var)

    return RelayConfig(
        upstream=upstream_config,
        history=history_config,
        server=server_config,
        system=system_config,
    )


def _validate_api_key(upstream: UpstreamConfig, key_var: str) -> None:
    """Warn if the upstream API key is missing."""
    if not upstream.api_key:
        import warnings

        warnings.warn(
            f"{key_var} environment variable is not set. "
            "Chat requests will fail until an upstream key is configured. "
            f"Set it via: export {key_var}=your_key_here",
            stacklevel=3,
        )
