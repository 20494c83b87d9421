"""Engine configuration."""

from enum import Enum

from pydantic_settings import BaseSettings


class NetworkEnvironment(str, Enum):
    """Network provisioning backend active in this control plane."""
    NAMED = "named"
    VDS = "vds"
    NSXT = "nsx-t"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Backend selection, fixed for the lifetime of the process
    network_provider_type: NetworkEnvironment = NetworkEnvironment.NAMED

    # Readiness waits (seconds)
    retry_timeout: float = 15.0
    poll_interval: float = 0.5

    # Concurrency limits
    max_concurrent_waits: int = 16

    # Named network used when an interface does not reference one
    default_network: str = ""

    # Backend request objects
    max_object_name_length: int = 253  # DNS-1123 subdomain limit
    interface_type: str = "vmxnet3"

    class Config:
        env_prefix = "VMNET_"


settings = Settings()
