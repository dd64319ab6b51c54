#!/usr/bin/env python3
"""
Tests for the deployment entry points
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

import deploy_happy_birthday
import deploy_hotel_booking
from celo_deployer.config import NETWORKS, DeployerConfig
from celo_deployer.countries import Country, CountryBitmap, pack_forbidden_countries
from celo_deployer.exceptions import DeploymentError
from celo_deployer.models import DeployerAccount, DeploymentResult

ADDRESS = "0x000000000000000000000000000000000000dEaD"


def fake_config(**overrides):
    values = dict(network=NETWORKS['celo'], rpc_url="http://localhost:8545", private_key="0x01")
    values.update(overrides)
    return DeployerConfig(**values)


def fake_deployer(deploy_side_effect=None, blocked=("PRK", "PAK")):
    deployer = MagicMock()
    deployer.show_account.return_value = DeployerAccount(address=ADDRESS, nonce=0)
    deployer.get_balance.return_value = 1.5
    deployer.get_fee_data.return_value = {'gas_price': 10 ** 9}
    deployer.w3.from_wei.return_value = 1
    deployer.load_artifact.return_value = MagicMock(abi=[])
    deployer.get_blocked_countries.return_value = list(blocked)
    deployer.verify = AsyncMock(return_value="Pass - Verified")
    deployer.deploy = AsyncMock(
        side_effect=deploy_side_effect,
        return_value=DeploymentResult("HotelBooking", ADDRESS, ADDRESS, "0x01", verify_args=["1"]),
    )
    return deployer


@pytest.fixture
def patch_hotel(monkeypatch):
    def apply(deployer, config=None):
        monkeypatch.setattr(deploy_hotel_booking, 'load_config', lambda network: config or fake_config())
        monkeypatch.setattr(deploy_hotel_booking, 'ContractDeployer', lambda config: deployer)
        monkeypatch.setattr(deploy_hotel_booking, 'hash_endpoint_with_scope', lambda endpoint, label, override=None: 42)
    return apply


class TestHotelBookingScript:

    def test_parameters(self):
        params = deploy_hotel_booking.build_parameters(42)
        assert params.scope == 42
        assert params.attestation_id == 1
        assert params.boys_beds == (1, 3, 5, 7)
        assert params.girls_beds == (2, 4, 6, 8)
        assert params.ofac_enabled == (True, True, True)
        assert list(params.forbidden_countries_packed) == pack_forbidden_countries(
            [Country.NORTH_KOREA, Country.PAKISTAN]
        )

    def test_forbidden_bitmap_has_two_bits(self):
        packed = CountryBitmap().pack(deploy_hotel_booking.FORBIDDEN_COUNTRIES)
        assert sum(bin(word).count("1") for word in packed) == 2

    def test_check_blocked_countries(self):
        deployer = MagicMock()
        assert deploy_hotel_booking.check_blocked_countries(deployer, ["PAK", "PRK"])
        assert not deploy_hotel_booking.check_blocked_countries(deployer, ["PRK"])
        assert not deploy_hotel_booking.check_blocked_countries(deployer, ["???"])

    def test_success(self, patch_hotel, capsys):
        deployer = fake_deployer()
        patch_hotel(deployer)

        assert asyncio.run(deploy_hotel_booking.main()) == 0
        out = capsys.readouterr().out
        assert "npx hardhat verify --network celo" in out
        assert "Blocked countries: ['PRK', 'PAK']" in out
        deployer.verify.assert_not_called()

    def test_auto_verify(self, patch_hotel):
        deployer = fake_deployer()
        patch_hotel(deployer, fake_config(auto_verify=True, explorer_api_key="key"))

        assert asyncio.run(deploy_hotel_booking.main()) == 0
        deployer.verify.assert_awaited_once()

    def test_auto_verify_without_api_key_warns(self, patch_hotel):
        deployer = fake_deployer()
        patch_hotel(deployer, fake_config(auto_verify=True))

        assert asyncio.run(deploy_hotel_booking.main()) == 0
        deployer.verify.assert_not_called()
        assert "CELOSCAN_API_KEY" in deployer.logger.warning.call_args[0][0]

    def test_scope_override_is_per_label(self, monkeypatch):
        seen = {}

        def fake_hash(endpoint, label, override=None):
            seen[label] = override
            return override

        overrides = {"SELF_SCOPE_SELF_HOTEL_BOOKING": 111, "SELF_SCOPE_SELF_DENVER_BIRTHDAY": 222}
        for module in (deploy_hotel_booking, deploy_happy_birthday):
            monkeypatch.setattr(module, 'load_config', lambda network: fake_config(scope_overrides=overrides))
            monkeypatch.setattr(module, 'ContractDeployer', lambda config: fake_deployer())
            monkeypatch.setattr(module, 'hash_endpoint_with_scope', fake_hash)
            assert asyncio.run(module.main()) == 0

        assert seen == {"Self-Hotel-Booking": 111, "Self-Denver-Birthday": 222}

    def test_deployment_failure_exits_1(self, patch_hotel):
        deployer = fake_deployer(deploy_side_effect=DeploymentError("reverted"))
        patch_hotel(deployer)

        assert asyncio.run(deploy_hotel_booking.main()) == 1
        deployer.logger.error.assert_called_once()

    def test_configuration_error_exits_1(self, monkeypatch):
        def missing(network):
            raise ValueError("Missing required environment variables: ['CELO_KEY']")
        monkeypatch.setattr(deploy_hotel_booking, 'load_config', missing)

        assert asyncio.run(deploy_hotel_booking.main()) == 1

    def test_run_exit_code(self, monkeypatch):
        async def broken():
            raise ConnectionError("Failed to connect to celo network")
        monkeypatch.setattr(deploy_hotel_booking, 'main', broken)

        with pytest.raises(SystemExit) as excinfo:
            deploy_hotel_booking.run()
        assert excinfo.value.code == 1


class TestHappyBirthdayScript:

    def test_parameters(self):
        params = deploy_happy_birthday.build_parameters(7)
        assert params.constructor_args()[1:] == (
            7, 1, params.token, False, 18, False, [0, 0, 0, 0], [False, False, False]
        )

    def test_success(self, monkeypatch, capsys):
        deployer = fake_deployer()
        monkeypatch.setattr(deploy_happy_birthday, 'load_config', lambda network: fake_config())
        monkeypatch.setattr(deploy_happy_birthday, 'ContractDeployer', lambda config: deployer)
        monkeypatch.setattr(deploy_happy_birthday, 'hash_endpoint_with_scope', lambda endpoint, label, override=None: 7)

        assert asyncio.run(deploy_happy_birthday.main()) == 0
        assert "npx hardhat verify --network celo" in capsys.readouterr().out

    def test_failure_propagates_to_exit_1(self, monkeypatch):
        deployer = fake_deployer(deploy_side_effect=DeploymentError("reverted"))
        monkeypatch.setattr(deploy_happy_birthday, 'load_config', lambda network: fake_config())
        monkeypatch.setattr(deploy_happy_birthday, 'ContractDeployer', lambda config: deployer)
        monkeypatch.setattr(deploy_happy_birthday, 'hash_endpoint_with_scope', lambda endpoint, label, override=None: 7)

        with pytest.raises(SystemExit) as excinfo:
            deploy_happy_birthday.run()
        assert excinfo.value.code == 1

    def test_auto_verify_without_api_key_warns(self, monkeypatch):
        deployer = fake_deployer()
        monkeypatch.setattr(deploy_happy_birthday, 'load_config', lambda network: fake_config(auto_verify=True))
        monkeypatch.setattr(deploy_happy_birthday, 'ContractDeployer', lambda config: deployer)
        monkeypatch.setattr(deploy_happy_birthday, 'hash_endpoint_with_scope', lambda endpoint, label, override=None: 7)

        assert asyncio.run(deploy_happy_birthday.main()) == 0
        deployer.verify.assert_not_called()
        deployer.logger.warning.assert_called_once()
