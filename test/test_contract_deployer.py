#!/usr/bin/env python3
"""
Tests for ContractDeployer with a mocked web3 connection
"""

import asyncio
import logging
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from celo_deployer.address import predict_contract_address
from celo_deployer.config import NETWORKS, DeployerConfig
from celo_deployer.contract_deployer import ContractDeployer
from celo_deployer.exceptions import DeploymentError
from celo_deployer.models import DeployerAccount, HappyBirthdayParameters
from celo_deployer.services import ContractArtifact

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
DEPLOYER = Account.from_key(PRIVATE_KEY).address
HUB = "0x3e2487a250e2A7b56c7ef5307Fb591Cc8C83623D"
TOKEN = "0x96CFA0E76Bd15d99A1230CA3955be5E677B746a6"


def make_config(**overrides):
    values = dict(network=NETWORKS['celo'], rpc_url="http://localhost:8545", private_key=PRIVATE_KEY)
    values.update(overrides)
    return DeployerConfig(**values)


def make_w3(connected=True):
    w3 = MagicMock()
    w3.is_connected.return_value = connected
    w3.to_wei.side_effect = Web3.to_wei
    w3.from_wei.side_effect = Web3.from_wei
    w3.to_hex.side_effect = Web3.to_hex
    return w3


def birthday_params():
    return HappyBirthdayParameters(
        hub=HUB, scope=99, attestation_id=1, token=TOKEN,
        forbidden_countries_enabled=False,
        forbidden_countries_packed=(0, 0, 0, 0),
        ofac_enabled=(False, False, False),
    )


ARTIFACT = ContractArtifact(
    contract_name="SelfHappyBirthday",
    source_name="contracts/SelfHappyBirthday.sol",
    abi=[{"type": "constructor", "inputs": []}],
    bytecode="0x6080",
)


class TestSetup:

    def test_not_connected(self):
        with pytest.raises(ConnectionError):
            ContractDeployer(make_config(), w3=make_w3(connected=False))

    def test_signer_from_private_key(self):
        deployer = ContractDeployer(make_config(), w3=make_w3())
        assert deployer.deployer_address == DEPLOYER

    def test_logging_handler_added_once(self):
        ContractDeployer(make_config(), w3=make_w3())
        ContractDeployer(make_config(), w3=make_w3())
        assert len(logging.getLogger('celo_deployer').handlers) == 1


class TestAccountAndFees:

    def setup_method(self):
        self.w3 = make_w3()
        self.deployer = ContractDeployer(make_config(), w3=self.w3)

    def test_get_account_reads_pending_nonce(self):
        self.w3.eth.get_transaction_count.return_value = 7
        account = self.deployer.get_account()
        assert account == DeployerAccount(address=DEPLOYER, nonce=7)
        self.w3.eth.get_transaction_count.assert_called_once_with(DEPLOYER, 'pending')

    def test_predict_address(self):
        account = DeployerAccount(address=DEPLOYER, nonce=3)
        assert self.deployer.predict_address(account) == predict_contract_address(DEPLOYER, 3)

    def test_show_account(self, capsys):
        self.w3.eth.get_transaction_count.return_value = 0
        account = self.deployer.show_account()
        out = capsys.readouterr().out
        assert DEPLOYER in out
        assert predict_contract_address(DEPLOYER, 0) in out
        assert account.nonce == 0

    def test_get_balance(self):
        self.w3.eth.get_balance.return_value = 2 * 10 ** 18
        assert self.deployer.get_balance() == 2.0

    def test_fee_data_eip1559(self):
        self.w3.eth.gas_price = 5 * 10 ** 9
        self.w3.eth.get_block.return_value = {'baseFeePerGas': 10 ** 9}
        fee_data = self.deployer.get_fee_data()
        assert fee_data['gas_price'] == 5 * 10 ** 9
        assert fee_data['max_priority_fee_per_gas'] == 10 ** 9
        assert fee_data['max_fee_per_gas'] == 2_200_000_000

    def test_fee_data_legacy(self):
        self.w3.eth.gas_price = 5 * 10 ** 9
        self.w3.eth.get_block.return_value = {}
        fee_data = self.deployer.get_fee_data()
        assert fee_data['max_fee_per_gas'] is None

    def test_get_blocked_countries(self):
        contract = self.w3.eth.contract.return_value
        contract.functions.getBlockedCountries.return_value.call.return_value = [
            "PRK", "PAK", "\x00\x00\x00"
        ]
        assert self.deployer.get_blocked_countries(HUB, []) == ["PRK", "PAK"]


class TestDeploy:

    def setup_method(self):
        self.w3 = make_w3()
        self.deployer = ContractDeployer(make_config(gas_limit=6_500_000), w3=self.w3)
        self.deployer.account = MagicMock()
        self.account = DeployerAccount(address=DEPLOYER, nonce=4)
        self.predicted = predict_contract_address(DEPLOYER, 4)

        self.factory = self.w3.eth.contract.return_value
        self.constructor = self.factory.constructor.return_value
        self.constructor.build_transaction.return_value = {'data': '0x6080'}
        self.w3.eth.send_raw_transaction.return_value = b'\x12' * 32

        self.fee_data = {'gas_price': 10 ** 9, 'max_fee_per_gas': 3 * 10 ** 9,
                         'max_priority_fee_per_gas': 10 ** 9}

    def receipt(self, status=1, address=None):
        return {'status': status, 'contractAddress': address or self.predicted,
                'gasUsed': 1_234_567, 'blockNumber': 100}

    def test_successful_deploy(self):
        self.w3.eth.wait_for_transaction_receipt.return_value = self.receipt()
        params = birthday_params()

        result = asyncio.run(self.deployer.deploy(ARTIFACT, params, self.account, self.fee_data))

        self.factory.constructor.assert_called_once_with(*params.constructor_args())
        tx_params = self.constructor.build_transaction.call_args[0][0]
        assert tx_params['nonce'] == 4
        assert tx_params['chainId'] == 44787
        assert tx_params['gas'] == 6_500_000
        assert tx_params['maxFeePerGas'] == 3 * 10 ** 9
        assert 'gasPrice' not in tx_params

        assert result.address == self.predicted
        assert result.address_matches_prediction
        assert result.tx_hash == '0x' + '12' * 32
        assert result.gas_used == 1_234_567
        assert result.verify_args == params.verify_args()

    def test_legacy_gas_price(self):
        self.w3.eth.wait_for_transaction_receipt.return_value = self.receipt()
        fee_data = {'gas_price': 10 ** 9, 'max_fee_per_gas': None, 'max_priority_fee_per_gas': None}

        asyncio.run(self.deployer.deploy(ARTIFACT, birthday_params(), self.account, fee_data))

        tx_params = self.constructor.build_transaction.call_args[0][0]
        assert tx_params['gasPrice'] == 10 ** 9
        assert 'maxFeePerGas' not in tx_params

    def test_reverted_deploy(self):
        self.w3.eth.wait_for_transaction_receipt.return_value = self.receipt(status=0)
        with pytest.raises(DeploymentError):
            asyncio.run(self.deployer.deploy(ARTIFACT, birthday_params(), self.account, self.fee_data))

    def test_address_mismatch_is_only_logged(self, caplog):
        other = "0x000000000000000000000000000000000000dEaD"
        self.w3.eth.wait_for_transaction_receipt.return_value = self.receipt(address=other)

        with caplog.at_level(logging.WARNING, logger='celo_deployer'):
            result = asyncio.run(
                self.deployer.deploy(ARTIFACT, birthday_params(), self.account, self.fee_data)
            )

        assert result.address == other
        assert not result.address_matches_prediction
        assert "differs from predicted" in caplog.text
