from .artifacts import BuildInfo, ContractArtifact, load_artifact, load_build_info
from .explorer import ExplorerClient, build_verify_command, encode_constructor_args

__all__ = [
    'BuildInfo',
    'ContractArtifact',
    'ExplorerClient',
    'build_verify_command',
    'encode_constructor_args',
    'load_artifact',
    'load_build_info',
]
