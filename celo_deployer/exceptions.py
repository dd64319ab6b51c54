"""
Errors raised by the deployment workflow
"""


class DeployerError(Exception):
    """Base class for deployment failures"""


class ScopeError(DeployerError):
    """The Self scope could not be computed"""


class ArtifactError(DeployerError):
    """A compiled contract artifact is missing or incomplete"""


class DeploymentError(DeployerError):
    """The deployment transaction failed or reverted"""


class VerificationError(DeployerError):
    """The block explorer rejected a verification request"""
