#!/usr/bin/env python3
"""
Deploy the Self-gated HotelBooking contract to Celo Alfajores

Usage:
- Set CELO_RPC_URL, CELO_KEY (and optionally CELOSCAN_API_KEY) in .env
- Compile the contracts: npx hardhat compile
- Run: python deploy_hotel_booking.py
"""

import asyncio
import sys

from celo_deployer import (
    ContractDeployer,
    Country,
    CountryBitmap,
    hash_endpoint_with_scope,
    load_config,
    pack_forbidden_countries,
)
from celo_deployer.models import HotelBookingParameters
from celo_deployer.services import build_verify_command

IDENTITY_VERIFICATION_HUB = "0x3e2487a250e2A7b56c7ef5307Fb591Cc8C83623D"
TOKEN_ADDRESS = "0x96CFA0E76Bd15d99A1230CA3955be5E677B746a6"
ENDPOINT = "https://f2a6-2a09-bac5-5907-323-00-50-7f.ngrok-free.app"
SCOPE_LABEL = "Self-Hotel-Booking"
ATTESTATION_ID = 1

BOYS_BED_PRICE = 1_000_000
GIRLS_BED_PRICE = 1_200_000
BOYS_BEDS = (1, 3, 5, 7)
GIRLS_BEDS = (2, 4, 6, 8)

# Blocking only North Korea and Pakistan
FORBIDDEN_COUNTRIES = [Country.NORTH_KOREA, Country.PAKISTAN]
FORBIDDEN_COUNTRIES_ENABLED = True

# OFAC compliance checks
OFAC_ENABLED = (True, True, True)


def build_parameters(scope: int) -> HotelBookingParameters:
    return HotelBookingParameters(
        hub=IDENTITY_VERIFICATION_HUB,
        scope=scope,
        attestation_id=ATTESTATION_ID,
        token=TOKEN_ADDRESS,
        forbidden_countries_enabled=FORBIDDEN_COUNTRIES_ENABLED,
        forbidden_countries_packed=tuple(pack_forbidden_countries(FORBIDDEN_COUNTRIES)),
        ofac_enabled=OFAC_ENABLED,
        boys_bed_price=BOYS_BED_PRICE,
        girls_bed_price=GIRLS_BED_PRICE,
        boys_beds=BOYS_BEDS,
        girls_beds=GIRLS_BEDS,
    )


def check_blocked_countries(deployer: ContractDeployer, blocked) -> bool:
    """Compare the contract's blocked list with what was requested"""
    bitmap = CountryBitmap()
    try:
        matches = bitmap.pack(blocked) == bitmap.pack(FORBIDDEN_COUNTRIES)
    except ValueError as e:
        deployer.logger.warning(f"Contract returned an unknown country code: {e}")
        return False
    if not matches:
        deployer.logger.warning(
            f"Blocked countries {blocked} do not match requested "
            f"{[country.value for country in FORBIDDEN_COUNTRIES]}"
        )
    return matches


async def main() -> int:
    try:
        config = load_config('celo')
        deployer = ContractDeployer(config)
    except ValueError as e:
        print(f"\n❌ CONFIGURATION ERROR: {e}", file=sys.stderr)
        print("   Please ensure you have a .env file with all required variables.", file=sys.stderr)
        return 1

    account = deployer.show_account()
    print(f"💰 Account balance: {deployer.get_balance()} {config.network.currency}")

    scope = hash_endpoint_with_scope(
        ENDPOINT, SCOPE_LABEL, override=config.scope_override(SCOPE_LABEL)
    )
    print(f"🔑 scope: {scope}")

    params = build_parameters(scope)
    print(f"🚫 forbidden: {list(params.forbidden_countries_packed)}")

    fee_data = deployer.get_fee_data()
    print(f"⛽ Current gas price: {deployer.w3.from_wei(fee_data['gas_price'], 'gwei')} gwei")

    artifact = deployer.load_artifact(params.contract_name)

    try:
        result = await deployer.deploy(artifact, params, account, fee_data)

        print("\nChecking blocked countries...")
        blocked = deployer.get_blocked_countries(result.address, artifact.abi)
        print(f"Blocked countries: {blocked}")
        check_blocked_countries(deployer, blocked)

        print(f"\nTo verify on {config.network.browser_url}:")
        print(build_verify_command(config.network, result.address, result.verify_args))

        if config.auto_verify:
            if config.explorer_api_key:
                await deployer.verify(artifact, params, result.address)
            else:
                deployer.logger.warning(
                    f"AUTO_VERIFY is set but {config.network.api_key_env} is missing; skipping verification"
                )
    except Exception as e:
        deployer.logger.error(f"Deployment failed with error: {e}")
        return 1

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
