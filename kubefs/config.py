"""
Configuration management for kubefs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/kubefs/config.json
- Fallback: ~/.kubefs/config.json
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kubefs.cluster.kinds import DEFAULT_KINDS

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "KUBE_TOKEN"


@dataclass
class ClusterConfig:
    """API server connection settings."""
    url: str = "https://127.0.0.1:6443"
    token: Optional[str] = None
    token_file: Optional[str] = None
    verify_tls: bool = True
    ca_file: Optional[str] = None
    timeout: float = 30.0
    retries: int = 3

    def tls_verify(self) -> Union[bool, str]:
        """Value for httpx's ``verify``: a CA bundle path or a flag."""
        if self.verify_tls and self.ca_file:
            return self.ca_file
        return self.verify_tls


@dataclass
class MountConfig:
    """Mount and projection settings."""
    mountpoint: Optional[str] = None
    kinds: List[str] = field(default_factory=lambda: list(DEFAULT_KINDS))
    workers: int = 4
    allow_other: bool = False
    uid: Optional[int] = None
    gid: Optional[int] = None
    debug: bool = False


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False


@dataclass
class KubeFSConfig:
    """Main kubefs configuration."""
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    mount: MountConfig = field(default_factory=MountConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cluster": asdict(self.cluster),
            "mount": asdict(self.mount),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KubeFSConfig':
        """Create from dictionary."""
        return cls(
            cluster=ClusterConfig(**data.get("cluster", {})),
            mount=MountConfig(**data.get("mount", {})),
            cli=CLIConfig(**data.get("cli", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. $XDG_CONFIG_HOME/kubefs/config.json (usually ~/.config/kubefs/config.json)
    2. Fallback: ~/.kubefs/config.json

    Returns:
        Path to config file
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    xdg_config_home = Path(xdg) if xdg else Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "kubefs"
    else:
        config_dir = Path.home() / ".kubefs"

    return config_dir / "config.json"


def load_config() -> KubeFSConfig:
    """
    Load configuration from file.

    Returns:
        KubeFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return KubeFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return KubeFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
        return KubeFSConfig()


def save_config(config: KubeFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.debug(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(KubeFSConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    cluster_url: Optional[str] = None,
    token_file: Optional[str] = None,
    verify_tls: Optional[bool] = None,
    ca_file: Optional[str] = None,
    timeout: Optional[float] = None,
    kinds: Optional[List[str]] = None,
    workers: Optional[int] = None,
    mountpoint: Optional[str] = None,
    verbose: Optional[bool] = None,
) -> KubeFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.
    """
    config = load_config()

    if cluster_url is not None:
        config.cluster.url = cluster_url
    if token_file is not None:
        config.cluster.token_file = token_file
    if verify_tls is not None:
        config.cluster.verify_tls = verify_tls
    if ca_file is not None:
        config.cluster.ca_file = ca_file
    if timeout is not None:
        config.cluster.timeout = timeout

    if kinds is not None:
        config.mount.kinds = list(kinds)
    if workers is not None:
        config.mount.workers = workers
    if mountpoint is not None:
        config.mount.mountpoint = mountpoint

    if verbose is not None:
        config.cli.verbose = verbose

    save_config(config)
    return config


def resolve_token(
    token: Optional[str] = None,
    token_file: Optional[str] = None,
    cluster: Optional[ClusterConfig] = None,
) -> Optional[str]:
    """
    Work out which bearer token to use.

    Order: explicit token, $KUBE_TOKEN, token file (argument, then
    configured), configured token. Returns None for anonymous access.

    Raises:
        OSError: If a token file is named but cannot be read
    """
    if token:
        return token

    env_token = os.environ.get(TOKEN_ENV_VAR)
    if env_token:
        return env_token

    path = token_file or (cluster.token_file if cluster else None)
    if path:
        return Path(path).expanduser().read_text().strip() or None

    return cluster.token if cluster else None
