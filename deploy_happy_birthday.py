#!/usr/bin/env python3
"""
Deploy the Self-gated SelfHappyBirthday contract to Celo Alfajores

Usage:
- Set CELO_RPC_URL and CELO_KEY in .env
- Compile the contracts: npx hardhat compile
- Run: python deploy_happy_birthday.py
"""

import asyncio
import sys

from celo_deployer import ContractDeployer, hash_endpoint_with_scope, load_config
from celo_deployer.models import HappyBirthdayParameters
from celo_deployer.services import build_verify_command

IDENTITY_VERIFICATION_HUB = "0x3e2487a250e2A7b56c7ef5307Fb591Cc8C83623D"
TOKEN_ADDRESS = "0x96CFA0E76Bd15d99A1230CA3955be5E677B746a6"
ENDPOINT = "https://f2a6-2a09-bac5-5907-323-00-50-7f.ngrok-free.app"
SCOPE_LABEL = "Self-Denver-Birthday"
ATTESTATION_ID = 1

OLDER_THAN_ENABLED = False
OLDER_THAN = 18
FORBIDDEN_COUNTRIES_ENABLED = False
FORBIDDEN_COUNTRIES_PACKED = (0, 0, 0, 0)
OFAC_ENABLED = (False, False, False)


def build_parameters(scope: int) -> HappyBirthdayParameters:
    return HappyBirthdayParameters(
        hub=IDENTITY_VERIFICATION_HUB,
        scope=scope,
        attestation_id=ATTESTATION_ID,
        token=TOKEN_ADDRESS,
        forbidden_countries_enabled=FORBIDDEN_COUNTRIES_ENABLED,
        forbidden_countries_packed=FORBIDDEN_COUNTRIES_PACKED,
        ofac_enabled=OFAC_ENABLED,
        older_than_enabled=OLDER_THAN_ENABLED,
        older_than=OLDER_THAN,
    )


async def main() -> int:
    config = load_config('celo')
    deployer = ContractDeployer(config)

    account = deployer.show_account()

    scope = hash_endpoint_with_scope(
        ENDPOINT, SCOPE_LABEL, override=config.scope_override(SCOPE_LABEL)
    )
    params = build_parameters(scope)
    artifact = deployer.load_artifact(params.contract_name)

    result = await deployer.deploy(artifact, params, account)

    print(f"To verify on {config.network.browser_url}:")
    print(build_verify_command(config.network, result.address, result.verify_args))

    if config.auto_verify:
        if config.explorer_api_key:
            await deployer.verify(artifact, params, result.address)
        else:
            deployer.logger.warning(
                f"AUTO_VERIFY is set but {config.network.api_key_env} is missing; skipping verification"
            )
    return 0


def run():
    try:
        exit_code = asyncio.run(main())
    except Exception as e:
        print(f"❌ {e}", file=sys.stderr)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
