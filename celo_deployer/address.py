"""
Deterministic contract address prediction (CREATE)
"""

import rlp
from eth_hash.auto import keccak
from eth_utils import is_address, to_bytes, to_checksum_address


def predict_contract_address(sender: str, nonce: int) -> str:
    """
    Calculate the address the next contract created by `sender` will receive.

    CREATE formula: keccak256(rlp([sender, nonce]))[12:]
    The result is only valid until another transaction from `sender` is mined.
    """
    if not is_address(sender):
        raise ValueError(f"Invalid sender address: {sender}")
    if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
        raise ValueError(f"Nonce must be a non-negative integer, got {nonce!r}")

    sender_bytes = to_bytes(hexstr=sender)
    hash_result = keccak(rlp.encode([sender_bytes, nonce]))

    # Address = last 20 bytes
    return to_checksum_address("0x" + hash_result[-20:].hex())
