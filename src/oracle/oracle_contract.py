#!/usr/bin/env python3
"""
oracle_contract.py

Typed wrapper around the MockPriceOracle contract.

Exports:
    ORACLE_ABI
    OracleContract(contract) with owner / transfer_ownership / update_price /
    update_prices / reset_prices / latest_price

All prices are 8-decimal scaled integers. Token addresses are checksummed
before they reach the ABI encoder.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Tuple

from eth_utils import to_checksum_address

from src.hedera.client import TxResult
from src.hedera.config import (
    QUERY_GAS,
    RESET_PRICES_GAS,
    TRANSFER_OWNERSHIP_GAS,
    UPDATE_PRICE_GAS,
    UPDATE_PRICES_GAS,
)

logger = logging.getLogger(__name__)


# Contract ABI for the functions we need
ORACLE_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "address", "name": "newOwner", "type": "address"}],
        "name": "transferOwnership",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "price", "type": "uint256"}
        ],
        "name": "updatePrice",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address[]", "name": "tokens", "type": "address[]"},
            {"internalType": "uint256[]", "name": "prices", "type": "uint256[]"}
        ],
        "name": "updatePrices",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "resetPrices",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "address", "name": "token", "type": "address"}],
        "name": "latestPrice",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]


def _addr(address: str) -> str:
    return to_checksum_address(address.lower())


class OracleContract:
    """`contract` is anything with call(function, *args, gas) / execute(function, *args, gas)."""

    def __init__(self, contract):
        self.contract = contract

    @property
    def contract_id(self) -> str:
        return self.contract.contract_id

    def owner(self) -> str:
        return self.contract.call("owner", gas=QUERY_GAS)

    def transfer_ownership(self, new_owner: str) -> TxResult:
        res = self.contract.execute("transferOwnership", _addr(new_owner), gas=TRANSFER_OWNERSHIP_GAS)
        logger.info(f"transferOwnership({new_owner}) -> {res.status} txId={res.tx_id}")
        return res

    def update_price(self, token: str, scaled_price: int) -> TxResult:
        res = self.contract.execute("updatePrice", _addr(token), scaled_price, gas=UPDATE_PRICE_GAS)
        logger.info(f"updatePrice({token}, {scaled_price}) -> {res.status} txId={res.tx_id}")
        return res

    def update_prices(self, pairs: Sequence[Tuple[str, int]]) -> TxResult:
        tokens = [_addr(token) for token, _ in pairs]
        prices = [scaled for _, scaled in pairs]
        res = self.contract.execute("updatePrices", tokens, prices, gas=UPDATE_PRICES_GAS)
        logger.info(f"updatePrices(batch size={len(pairs)}) -> {res.status} txId={res.tx_id}")
        return res

    def reset_prices(self) -> TxResult:
        res = self.contract.execute("resetPrices", gas=RESET_PRICES_GAS)
        logger.info(f"resetPrices() -> {res.status} txId={res.tx_id}")
        return res

    def latest_price(self, token: str) -> int:
        return int(self.contract.call("latestPrice", _addr(token), gas=QUERY_GAS))
