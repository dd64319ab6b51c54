"""
Block explorer (Celoscan / Etherscan-compatible) contract verification
"""

import asyncio
import json
import logging
from typing import Dict, Sequence

import aiohttp
import requests
from eth_abi import encode

from ..config import NetworkConfig
from ..exceptions import VerificationError
from .artifacts import BuildInfo, ContractArtifact

logger = logging.getLogger('celo_deployer')


def build_verify_command(network: NetworkConfig, address: str, args: Sequence[str]) -> str:
    """Command line for `npx hardhat verify`, array arguments double-quoted"""
    parts = ['npx', 'hardhat', 'verify', '--network', network.name, address]
    for arg in args:
        parts.append(f'"{arg}"' if arg.startswith('[') else arg)
    return ' '.join(parts)


def _abi_type(param: Dict) -> str:
    """ABI type string, expanding tuple components"""
    abi_type = param['type']
    if abi_type.startswith('tuple'):
        inner = ','.join(_abi_type(component) for component in param['components'])
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def encode_constructor_args(artifact: ContractArtifact, args: Sequence) -> str:
    """ABI-encode constructor arguments as hex without 0x prefix"""
    types = [_abi_type(param) for param in artifact.constructor_abi().get('inputs', [])]
    if len(types) != len(args):
        raise VerificationError(
            f"{artifact.contract_name} constructor takes {len(types)} arguments, got {len(args)}"
        )
    return encode(types, list(args)).hex()


class ExplorerClient:
    """Client for the explorer's contract verification API"""

    def __init__(self, network: NetworkConfig, api_key: str,
                 poll_interval: float = 5.0, max_attempts: int = 24):
        if not api_key:
            raise ValueError(f"{network.api_key_env} is required for verification")
        self.network = network
        self.api_key = api_key
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    def address_url(self, address: str) -> str:
        return f"{self.network.browser_url}/address/{address}"

    def submit_verification(self, artifact: ContractArtifact, build_info: BuildInfo,
                            address: str, constructor_args: Sequence) -> str:
        """Submit standard JSON input for verification, returns the request GUID"""
        data = {
            'apikey': self.api_key,
            'module': 'contract',
            'action': 'verifysourcecode',
            'contractaddress': address,
            'sourceCode': json.dumps(build_info.input),
            'codeformat': 'solidity-standard-json-input',
            'contractname': artifact.fully_qualified_name,
            'compilerversion': f"v{build_info.solc_long_version}",
            # API parameter name is misspelled upstream
            'constructorArguements': encode_constructor_args(artifact, constructor_args),
        }

        response = requests.post(self.network.api_url, data=data, timeout=30)
        if response.status_code != 200:
            raise VerificationError(f"Verification request failed: HTTP {response.status_code}")

        payload = response.json()
        if str(payload.get('status')) != '1':
            raise VerificationError(f"Verification rejected: {payload.get('result')}")

        guid = payload['result']
        logger.info(f"Verification submitted for {address}: {guid}")
        return guid

    async def check_status(self, guid: str) -> str:
        params = {
            'apikey': self.api_key,
            'module': 'contract',
            'action': 'checkverifystatus',
            'guid': guid,
        }
        async with aiohttp.ClientSession() as session:
            async with session.get(self.network.api_url, params=params) as response:
                if response.status != 200:
                    raise VerificationError(f"Status check failed: HTTP {response.status}")
                payload = await response.json(content_type=None)
        return str(payload.get('result', ''))

    async def wait_for_verification(self, guid: str) -> str:
        """Poll until the explorer reports a final result"""
        for _ in range(self.max_attempts):
            result = await self.check_status(guid)
            if result.startswith('Pass') or 'Already Verified' in result:
                return result
            if result.startswith('Fail'):
                raise VerificationError(result)
            logger.info(f"Verification {guid}: {result}")
            await asyncio.sleep(self.poll_interval)
        raise VerificationError(f"Verification {guid} still pending after {self.max_attempts} checks")
