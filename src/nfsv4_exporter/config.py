"""Environment-based configuration for the NFSv4 exporter."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """NFSv4 exporter configuration.

    Settings are read once at startup and never change afterwards; the
    model is frozen so the per-client toggle can be shared by concurrent
    scrapes without a lock.

    All settings can be overridden via environment variables with
    NFSV4_EXPORTER_ prefix. For example:
        NFSV4_EXPORTER_PORT=9945
        NFSV4_EXPORTER_NFSV4_OPS_CLIENTS=true
    """

    # HTTP listener
    ip_address: str = "0.0.0.0"
    port: int = 9944

    # Per-client state collection reads two files per client, off by default
    nfsv4_ops_clients: bool = False

    # Kernel interfaces
    proc_rpc_path: Path = Path("/proc/net/rpc")
    proc_nfsd_path: Path = Path("/proc/fs/nfsd")
    var_nfs_path: Path = Path("/var/lib/nfs")

    scrape_timeout_seconds: float = 10.0
    min_kernel_version: str = "5.3.0"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="NFSV4_EXPORTER_", frozen=True)


settings = Settings()
