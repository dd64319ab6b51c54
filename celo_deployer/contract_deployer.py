"""
Self-gated contract deployer for Celo

Wraps the web3 calls of a one-shot deployment: signer, nonce, predicted
address, balance, fee data, deployment, confirmation and explorer verification.
"""

import logging
from typing import Dict, List, Optional

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware
from eth_account import Account

from .address import predict_contract_address
from .config import DeployerConfig
from .countries import format_blocked_countries
from .exceptions import DeploymentError
from .models import DeployerAccount, DeploymentParameters, DeploymentResult
from .services import ContractArtifact, ExplorerClient, load_artifact, load_build_info


class ContractDeployer:
    """Deploys compiled Hardhat contracts with a single signer"""

    def __init__(self, config: DeployerConfig, w3: Optional[Web3] = None):
        """Initialize the deployer"""
        self.config = config
        self.network = config.network
        self._setup_logging()
        self._setup_web3(w3)

    def _setup_logging(self):
        """Setup logging"""
        self.logger = logging.getLogger('celo_deployer')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.INFO)
            formatter = logging.Formatter('%(asctime)s | %(levelname)s | %(message)s')
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _setup_web3(self, w3: Optional[Web3]):
        """Setup Web3 connection"""
        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(self.config.rpc_url, request_kwargs={'timeout': 60}))
            # Celo block headers carry extra data
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self.w3 = w3

        if not self.w3.is_connected():
            raise ConnectionError(f"Failed to connect to {self.network.name} network")

        self.account = Account.from_key(self.config.private_key)
        self.deployer_address = self.account.address

    def get_account(self) -> DeployerAccount:
        """Deployer address with its current (pending) nonce"""
        nonce = self.w3.eth.get_transaction_count(self.deployer_address, 'pending')
        return DeployerAccount(address=self.deployer_address, nonce=nonce)

    def show_account(self) -> DeployerAccount:
        """Read the deployer account once and print it with the predicted address"""
        account = self.get_account()
        print(f"👤 Deploying contracts with the account: {account.address}")
        print(f"🔢 Account nonce: {account.nonce}")
        print(f"🎯 Calculated future contract address: {self.predict_address(account)}")
        return account

    def get_balance(self) -> float:
        """Get current native balance"""
        balance_wei = self.w3.eth.get_balance(self.deployer_address)
        return float(self.w3.from_wei(balance_wei, 'ether'))

    def get_fee_data(self) -> Dict:
        """Current gas price plus EIP-1559 parameters when the chain has a base fee"""
        gas_price = self.w3.eth.gas_price
        latest_block = self.w3.eth.get_block('latest')
        base_fee = latest_block.get('baseFeePerGas')

        fee_data = {'gas_price': gas_price, 'base_fee': base_fee,
                    'max_fee_per_gas': None, 'max_priority_fee_per_gas': None}
        if base_fee is not None:
            max_priority_fee = self.w3.to_wei(1, 'gwei')
            fee_data['max_priority_fee_per_gas'] = max_priority_fee
            fee_data['max_fee_per_gas'] = int(base_fee * 1.2) + max_priority_fee
        return fee_data

    def predict_address(self, account: DeployerAccount) -> str:
        return predict_contract_address(account.address, account.nonce)

    def load_artifact(self, contract_name: str) -> ContractArtifact:
        return load_artifact(contract_name, self.config.artifacts_dir)

    def _transaction_params(self, account: DeployerAccount, fee_data: Dict) -> Dict:
        tx_params = {
            'from': account.address,
            'nonce': account.nonce,
            'chainId': self.network.chain_id,
            'value': 0,
        }
        if fee_data.get('max_fee_per_gas') is not None:
            tx_params['maxFeePerGas'] = fee_data['max_fee_per_gas']
            tx_params['maxPriorityFeePerGas'] = fee_data['max_priority_fee_per_gas']
        else:
            tx_params['gasPrice'] = fee_data['gas_price']
        if self.config.gas_limit:
            tx_params['gas'] = self.config.gas_limit
        return tx_params

    async def deploy(self, artifact: ContractArtifact, params: DeploymentParameters,
                     account: DeployerAccount, fee_data: Optional[Dict] = None) -> DeploymentResult:
        """Deploy `artifact` with `params` and wait for confirmation"""
        predicted_address = self.predict_address(account)
        if fee_data is None:
            fee_data = self.get_fee_data()

        print(f"🚀 Deploying {artifact.contract_name}...")

        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        constructor = factory.constructor(*params.constructor_args())
        tx = constructor.build_transaction(self._transaction_params(account, fee_data))

        signed_tx = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = self.w3.to_hex(tx_hash)

        print(f"📝 Transaction sent: {tx_hash_hex}")
        print("⏳ Waiting for confirmation...")
        receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.config.receipt_timeout
        )

        if receipt['status'] != 1:
            self.logger.error(f"{artifact.contract_name} deployment reverted in {tx_hash_hex}")
            raise DeploymentError(f"Deployment transaction {tx_hash_hex} reverted")

        address = receipt['contractAddress']
        result = DeploymentResult(
            contract_name=artifact.contract_name,
            predicted_address=predicted_address,
            address=address,
            tx_hash=tx_hash_hex,
            gas_used=receipt.get('gasUsed'),
            block_number=receipt.get('blockNumber'),
            verify_args=params.verify_args(),
        )

        if result.address_matches_prediction:
            print(f"🎯 Address prediction was correct!")
        else:
            # Another transaction from this account landed first
            self.logger.warning(
                f"Deployed address {address} differs from predicted {predicted_address}"
            )

        print(f"✅ {artifact.contract_name} deployed to: {address}")
        return result

    def get_blocked_countries(self, address: str, abi: List[Dict]) -> List[str]:
        """Read the blocked country list back from a deployed contract"""
        contract = self.w3.eth.contract(address=address, abi=abi)
        raw = contract.functions.getBlockedCountries().call()
        return format_blocked_countries(raw)

    async def verify(self, artifact: ContractArtifact, params: DeploymentParameters,
                     address: str) -> str:
        """Submit the deployed contract to the block explorer and wait for the result"""
        client = ExplorerClient(self.network, self.config.explorer_api_key)
        build_info = load_build_info(artifact)

        print(f"🔍 Verifying {artifact.contract_name} on {self.network.browser_url}...")
        guid = client.submit_verification(artifact, build_info, address, params.constructor_args())
        result = await client.wait_for_verification(guid)
        print(f"✅ {result}: {client.address_url(address)}")
        return result
