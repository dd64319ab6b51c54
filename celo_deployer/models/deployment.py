"""
Deployment models for Self-gated contract deployments
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from web3 import Web3


def _format_arg(value) -> str:
    """Render a constructor argument the way `hardhat verify` expects it"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return '[' + ','.join(_format_arg(item) for item in value) + ']'
    return str(value)


@dataclass(frozen=True)
class DeployerAccount:
    """Deployer address and its transaction count at read time"""
    address: str
    nonce: int


@dataclass(frozen=True)
class DeploymentParameters:
    """Constructor arguments shared by all Self-gated contracts"""
    hub: str  # Identity verification hub
    scope: int
    attestation_id: int
    token: str
    forbidden_countries_enabled: bool
    forbidden_countries_packed: Tuple[int, int, int, int]
    ofac_enabled: Tuple[bool, bool, bool]

    contract_name = ""

    def __post_init__(self):
        object.__setattr__(self, 'hub', Web3.to_checksum_address(self.hub))
        object.__setattr__(self, 'token', Web3.to_checksum_address(self.token))
        object.__setattr__(self, 'forbidden_countries_packed', tuple(self.forbidden_countries_packed))
        object.__setattr__(self, 'ofac_enabled', tuple(self.ofac_enabled))
        if len(self.forbidden_countries_packed) != 4:
            raise ValueError("forbidden_countries_packed must hold exactly 4 integers")
        if len(self.ofac_enabled) != 3:
            raise ValueError("ofac_enabled must hold exactly 3 flags")

    def _head(self) -> tuple:
        return (self.hub, self.scope, self.attestation_id, self.token)

    def _tail(self) -> tuple:
        return (
            self.forbidden_countries_enabled,
            list(self.forbidden_countries_packed),
            list(self.ofac_enabled),
        )

    def constructor_args(self) -> tuple:
        """Arguments in constructor order"""
        return self._head() + self._tail()

    def verify_args(self) -> List[str]:
        return [_format_arg(arg) for arg in self.constructor_args()]


@dataclass(frozen=True)
class HotelBookingParameters(DeploymentParameters):
    boys_bed_price: int = 0
    girls_bed_price: int = 0
    boys_beds: Tuple[int, ...] = ()
    girls_beds: Tuple[int, ...] = ()

    contract_name = "HotelBooking"

    def constructor_args(self) -> tuple:
        return self._head() + (
            self.boys_bed_price,
            self.girls_bed_price,
            list(self.boys_beds),
            list(self.girls_beds),
        ) + self._tail()


@dataclass(frozen=True)
class HappyBirthdayParameters(DeploymentParameters):
    older_than_enabled: bool = False
    older_than: int = 18

    contract_name = "SelfHappyBirthday"

    def constructor_args(self) -> tuple:
        return self._head() + (self.older_than_enabled, self.older_than) + self._tail()


@dataclass
class DeploymentResult:
    """Outcome of a confirmed deployment"""
    contract_name: str
    predicted_address: str
    address: str
    tx_hash: str
    gas_used: Optional[int] = None
    block_number: Optional[int] = None
    verify_args: List[str] = field(default_factory=list)

    @property
    def address_matches_prediction(self) -> bool:
        return self.address.lower() == self.predicted_address.lower()
