"""
Network and deployer configuration loaded from the environment (.env)
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from .scope import SCOPE_OVERRIDE_PREFIX, parse_scope, scope_override_env


@dataclass(frozen=True)
class NetworkConfig:
    """Chain and block explorer settings for one network"""
    name: str
    chain_id: int
    api_url: str  # Etherscan-compatible verification API
    browser_url: str
    rpc_url_env: str
    private_key_env: str
    api_key_env: str
    currency: str = "CELO"


NETWORKS: Dict[str, NetworkConfig] = {
    "celo": NetworkConfig(
        name="celo",
        chain_id=44787,
        api_url="https://api-alfajores.celoscan.io/api",
        browser_url="https://alfajores.celoscan.io",
        rpc_url_env="CELO_RPC_URL",
        private_key_env="CELO_KEY",
        api_key_env="CELOSCAN_API_KEY",
    ),
}


@dataclass(frozen=True)
class DeployerConfig:
    """Everything a deployment run needs, passed explicitly to the deployer"""
    network: NetworkConfig
    rpc_url: str
    private_key: str
    explorer_api_key: Optional[str] = None
    artifacts_dir: str = "artifacts"
    gas_limit: Optional[int] = None  # None = estimate
    receipt_timeout: int = 300
    auto_verify: bool = False
    # Precomputed Self scopes keyed by override variable name (SELF_SCOPE_<LABEL>)
    scope_overrides: Dict[str, int] = field(default_factory=dict)

    def scope_override(self, scope_label: str) -> Optional[int]:
        return self.scope_overrides.get(scope_override_env(scope_label))

    def __repr__(self):
        return (f"DeployerConfig(network={self.network.name!r}, rpc_url={self.rpc_url!r}, "
                f"artifacts_dir={self.artifacts_dir!r}, auto_verify={self.auto_verify})")


def _env_flag(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def _scope_overrides() -> Dict[str, int]:
    """Collect SELF_SCOPE_<LABEL> values; each label gets its own scope"""
    if os.getenv('SELF_SCOPE'):
        raise ValueError(
            "SELF_SCOPE applies to every contract; use a per-label variable such as "
            f"{scope_override_env('Self-Hotel-Booking')}"
        )

    overrides = {}
    for name, value in os.environ.items():
        if not name.startswith(SCOPE_OVERRIDE_PREFIX) or not value:
            continue
        try:
            overrides[name] = parse_scope(value)
        except ValueError:
            raise ValueError(f"{name} is not a number: {value!r}")
    return overrides


def load_config(network: str = "celo", dotenv_path: Optional[str] = None) -> DeployerConfig:
    """Load configuration from environment"""
    load_dotenv(dotenv_path)

    if network not in NETWORKS:
        raise ValueError(f"Unknown network: {network} (known: {sorted(NETWORKS)})")
    net = NETWORKS[network]

    required_vars = [net.rpc_url_env, net.private_key_env]
    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        raise ValueError(f"Missing required environment variables: {missing}")

    gas_limit = os.getenv('GAS_LIMIT')

    return DeployerConfig(
        network=net,
        rpc_url=os.getenv(net.rpc_url_env),
        private_key=os.getenv(net.private_key_env),
        explorer_api_key=os.getenv(net.api_key_env) or None,
        artifacts_dir=os.getenv('ARTIFACTS_DIR', 'artifacts'),
        gas_limit=int(gas_limit) if gas_limit else None,
        receipt_timeout=int(os.getenv('RECEIPT_TIMEOUT', '300')),
        auto_verify=_env_flag('AUTO_VERIFY'),
        scope_overrides=_scope_overrides(),
    )
