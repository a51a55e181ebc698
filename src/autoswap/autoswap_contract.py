#!/usr/bin/env python3
"""
autoswap_contract.py

Typed wrapper around the AutoSwapLimit contract: order snapshots, the
on-chain executability check and the execution transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from src.hedera.client import TxResult
from src.hedera.config import CAN_EXECUTE_GAS, CONTRACT_CONFIG_GAS, ORDER_DETAILS_GAS, QUERY_GAS

logger = logging.getLogger(__name__)


AUTOSWAP_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "nextOrderId",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "orderId", "type": "uint256"}],
        "name": "getOrderDetails",
        "outputs": [
            {"internalType": "address", "name": "tokenOut", "type": "address"},
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint256", "name": "minAmountOut", "type": "uint256"},
            {"internalType": "uint256", "name": "triggerPrice", "type": "uint256"},
            {"internalType": "address", "name": "owner", "type": "address"},
            {"internalType": "bool", "name": "isActive", "type": "bool"},
            {"internalType": "uint256", "name": "expirationTime", "type": "uint256"},
            {"internalType": "bool", "name": "isExecuted", "type": "bool"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "orderId", "type": "uint256"}],
        "name": "canExecuteOrder",
        "outputs": [
            {"internalType": "bool", "name": "", "type": "bool"},
            {"internalType": "string", "name": "", "type": "string"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "orderId", "type": "uint256"},
            {"internalType": "uint256", "name": "currentPrice", "type": "uint256"}
        ],
        "name": "executeSwapOrder",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "getContractConfig",
        "outputs": [
            {"internalType": "uint256", "name": "executionFee", "type": "uint256"},
            {"internalType": "uint256", "name": "minOrderAmount", "type": "uint256"},
            {"internalType": "address", "name": "backendExecutor", "type": "address"},
            {"internalType": "uint256", "name": "nextOrderId", "type": "uint256"}
        ],
        "stateMutability": "view",
        "type": "function"
    }
]


def normalize_address(address: str) -> str:
    """'ABC...' / '0xAbC...' -> '0xabc...'"""
    return (address if address.startswith("0x") else f"0x{address}").lower()


@dataclass(frozen=True)
class SwapOrder:
    order_id: int
    token_out: str
    amount_in_tinybar: int
    min_amount_out: int
    trigger_price: int
    owner: str
    is_active: bool
    expiration_time: int
    is_executed: bool

    @property
    def is_open(self) -> bool:
        return self.is_active and not self.is_executed

    @classmethod
    def from_result(cls, order_id: int, result: Any) -> "SwapOrder":
        """Build from the 8-tuple returned by getOrderDetails."""
        token_out, amount_in, min_out, trigger, owner, active, expiration, executed = result
        return cls(
            order_id=order_id,
            token_out=normalize_address(token_out),
            amount_in_tinybar=int(amount_in),
            min_amount_out=int(min_out),
            trigger_price=int(trigger),
            owner=owner,
            is_active=bool(active),
            expiration_time=int(expiration),
            is_executed=bool(executed),
        )


@dataclass(frozen=True)
class AutoSwapContractConfig:
    execution_fee: int
    min_order_amount: int
    backend_executor: str
    next_order_id: int


class AutoSwapContract:
    """`contract` is anything with call(function, *args, gas) / execute(function, *args, gas)."""

    def __init__(self, contract):
        self.contract = contract

    @property
    def contract_id(self) -> str:
        return self.contract.contract_id

    def next_order_id(self) -> int:
        return int(self.contract.call("nextOrderId", gas=QUERY_GAS))

    def get_order_details(self, order_id: int) -> SwapOrder:
        result = self.contract.call("getOrderDetails", order_id, gas=ORDER_DETAILS_GAS)
        return SwapOrder.from_result(order_id, result)

    def can_execute_order(self, order_id: int) -> Tuple[bool, str]:
        can, reason = self.contract.call("canExecuteOrder", order_id, gas=CAN_EXECUTE_GAS)
        return bool(can), reason

    def execute_swap_order(self, order_id: int, current_price: int, gas: int) -> TxResult:
        return self.contract.execute("executeSwapOrder", order_id, current_price, gas=gas)

    def get_contract_config(self) -> AutoSwapContractConfig:
        fee, min_amount, backend, next_id = self.contract.call("getContractConfig", gas=CONTRACT_CONFIG_GAS)
        return AutoSwapContractConfig(
            execution_fee=int(fee),
            min_order_amount=int(min_amount),
            backend_executor=normalize_address(backend),
            next_order_id=int(next_id),
        )
