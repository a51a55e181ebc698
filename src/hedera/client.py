#!/usr/bin/env python3
"""
client.py

Ledger session + contract call interface over the Hedera JSON-RPC relay.

Exports:
    LedgerClient(credentials, network, web3=None)
    ContractClient.call(function, *args, gas) -> decoded outputs
    ContractClient.execute(function, *args, gas) -> TxResult

Behavior:
- One LedgerClient per process: a Web3 HTTP connection and the operator's ECDSA account
- Contracts are addressed by Hedera id (0.0.x) or EVM address
- Every execute() signs, submits and waits for the receipt before returning
- Transport errors, reverts and failed receipts surface as RemoteCallError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from eth_account import Account
from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import Web3Exception

from src.hedera.config import NetworkConfig, OperatorCredentials, contract_id_to_evm_address
from src.hedera.errors import ConfigurationError, RemoteCallError

logger = logging.getLogger(__name__)

# JSON-RPC errors surface as ValueError on some web3 releases
_TRANSPORT_ERRORS = (Web3Exception, requests.exceptions.RequestException, ValueError)


@dataclass(frozen=True)
class TxResult:
    """Outcome of a confirmed transaction."""
    tx_id: str
    status: str
    gas_used: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "SUCCESS"


class LedgerClient:
    """Operator session used for every query and transaction."""

    def __init__(self, credentials: OperatorCredentials, network: NetworkConfig, web3: Optional[Web3] = None):
        self.account_id = credentials.account_id
        self.network = network
        self.w3 = web3 or Web3(Web3.HTTPProvider(network.rpc_url))
        try:
            self.account = Account.from_key(credentials.private_key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid ECDSA private key for {self.account_id}: {e}") from e
        logger.debug(f"Ledger session for {self.account_id} ({self.account.address}) on {network.name}")

    @property
    def address(self) -> str:
        return self.account.address

    def contract(self, contract_id: str, abi: List[Dict[str, Any]]) -> "ContractClient":
        return ContractClient(self, contract_id, abi)


class ContractClient:
    """
    Narrow call interface to one contract.

    `call` is a read-only query; `execute` is a state-changing transaction
    that returns only once its receipt is available.
    """

    def __init__(self, ledger: LedgerClient, contract_id: str, abi: List[Dict[str, Any]]):
        self.ledger = ledger
        self.contract_id = contract_id
        self.address = to_checksum_address(contract_id_to_evm_address(contract_id))
        self._contract = ledger.w3.eth.contract(address=self.address, abi=abi)

    def _function(self, function: str, args: tuple):
        return getattr(self._contract.functions, function)(*args)

    def call(self, function: str, *args: Any, gas: int) -> Any:
        try:
            return self._function(function, args).call({"from": self.ledger.address, "gas": gas})
        except _TRANSPORT_ERRORS as e:
            raise RemoteCallError(
                f"{function} query on {self.contract_id} failed: {e}",
                function=function, contract_id=self.contract_id,
            ) from e

    def execute(self, function: str, *args: Any, gas: int) -> TxResult:
        w3 = self.ledger.w3
        sender = self.ledger.address
        try:
            tx = self._function(function, args).build_transaction({
                "from": sender,
                "nonce": w3.eth.get_transaction_count(sender),
                "gas": gas,
                "gasPrice": w3.eth.gas_price,
                "chainId": self.ledger.network.chain_id,
            })
            signed = self.ledger.account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.ledger.network.receipt_timeout)
        except _TRANSPORT_ERRORS as e:
            raise RemoteCallError(
                f"{function} transaction on {self.contract_id} failed: {e}",
                function=function, contract_id=self.contract_id,
            ) from e

        result = TxResult(
            tx_id=Web3.to_hex(tx_hash),
            status="SUCCESS" if receipt["status"] == 1 else "REVERTED",
            gas_used=receipt.get("gasUsed"),
        )
        if not result.ok:
            raise RemoteCallError(
                f"{function} on {self.contract_id} -> {result.status} txId={result.tx_id}",
                function=function, contract_id=self.contract_id, status=result.status,
            )
        return result
