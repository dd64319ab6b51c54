from .deployment import (
    DeployerAccount,
    DeploymentParameters,
    DeploymentResult,
    HappyBirthdayParameters,
    HotelBookingParameters,
)

__all__ = [
    'DeployerAccount',
    'DeploymentParameters',
    'DeploymentResult',
    'HappyBirthdayParameters',
    'HotelBookingParameters',
]
