"""
Deployment tooling for Self-gated contracts on Celo
"""

from .address import predict_contract_address
from .config import DeployerConfig, NetworkConfig, NETWORKS, load_config
from .contract_deployer import ContractDeployer
from .countries import (
    Country,
    CountryBitmap,
    format_blocked_countries,
    pack_forbidden_countries,
    unpack_forbidden_countries,
)
from .exceptions import (
    ArtifactError,
    DeployerError,
    DeploymentError,
    ScopeError,
    VerificationError,
)
from .scope import hash_endpoint_with_scope

__version__ = "0.1.0"
