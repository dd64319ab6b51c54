"""
Hardhat artifact loading (abi, bytecode and build info)
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import ArtifactError

logger = logging.getLogger('celo_deployer')


@dataclass
class ContractArtifact:
    """Compiled contract as written by `npx hardhat compile`"""
    contract_name: str
    source_name: str  # e.g. contracts/HotelBooking.sol
    abi: List[Dict]
    bytecode: str
    build_info_path: Optional[Path] = None

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    def constructor_abi(self) -> Dict:
        for item in self.abi:
            if item.get('type') == 'constructor':
                return item
        return {'type': 'constructor', 'inputs': []}

    def function_abi(self, name: str) -> Optional[Dict]:
        for item in self.abi:
            if item.get('type') == 'function' and item.get('name') == name:
                return item
        return None


@dataclass
class BuildInfo:
    solc_long_version: str  # e.g. 0.8.28+commit.7893614a
    input: Dict  # solc standard JSON input


def load_artifact(contract_name: str, artifacts_dir: str = 'artifacts') -> ContractArtifact:
    """Find and load <artifacts>/contracts/**/<Name>.sol/<Name>.json"""
    root = Path(artifacts_dir)
    candidates = sorted(root.glob(f"contracts/**/{contract_name}.json"))
    if not candidates:
        raise ArtifactError(
            f"Artifact for {contract_name} not found under {root}. Run `npx hardhat compile` first."
        )
    if len(candidates) > 1:
        logger.warning(f"Multiple artifacts named {contract_name}, using {candidates[0]}")

    path = candidates[0]
    data = json.loads(path.read_text(encoding='utf-8'))
    abi = data.get('abi')
    bytecode = data.get('bytecode')
    if not abi or not bytecode or bytecode == '0x':
        raise ArtifactError(f"Artifact {path} is missing abi/bytecode")

    build_info_path = None
    dbg_path = path.with_name(f"{contract_name}.dbg.json")
    if dbg_path.exists():
        dbg = json.loads(dbg_path.read_text(encoding='utf-8'))
        if dbg.get('buildInfo'):
            build_info_path = (dbg_path.parent / dbg['buildInfo']).resolve()

    return ContractArtifact(
        contract_name=data.get('contractName', contract_name),
        source_name=data.get('sourceName', str(path.parent.relative_to(root))),
        abi=abi,
        bytecode=bytecode,
        build_info_path=build_info_path,
    )


def load_build_info(artifact: ContractArtifact) -> BuildInfo:
    """Load the compiler version and standard JSON input used for `artifact`"""
    if artifact.build_info_path is None or not artifact.build_info_path.exists():
        raise ArtifactError(f"No build info for {artifact.contract_name}. Recompile with Hardhat.")

    data = json.loads(artifact.build_info_path.read_text(encoding='utf-8'))
    try:
        return BuildInfo(solc_long_version=data['solcLongVersion'], input=data['input'])
    except KeyError as e:
        raise ArtifactError(f"Build info {artifact.build_info_path} is missing {e}")
