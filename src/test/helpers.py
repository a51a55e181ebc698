"""
Test doubles for the contract call interface (call / execute).
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from src.autoswap.autoswap_contract import AutoSwapContract
from src.hedera.client import TxResult
from src.oracle.oracle_contract import OracleContract


class FakeContract:
    """
    Records every call/execute. `responses` maps function name to a value,
    an exception instance (raised), or a callable taking the call args.
    """

    def __init__(self, contract_id: str = "0.0.1001", responses: Optional[Dict[str, Any]] = None):
        self.contract_id = contract_id
        self.responses: Dict[str, Any] = dict(responses or {})
        self.execute_errors: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, tuple, int]] = []
        self.executions: List[Tuple[str, tuple, int]] = []

    def call(self, function: str, *args: Any, gas: int) -> Any:
        self.calls.append((function, args, gas))
        resp = self.responses[function]
        if isinstance(resp, Exception):
            raise resp
        return resp(*args) if callable(resp) else resp

    def execute(self, function: str, *args: Any, gas: int) -> TxResult:
        self.executions.append((function, args, gas))
        err = self.execute_errors.get(function)
        if err is not None:
            raise err
        return TxResult(tx_id=f"0x{len(self.executions):064x}", status="SUCCESS", gas_used=21000)

    def called(self, function: str) -> List[tuple]:
        return [args for name, args, _ in self.calls if name == function]


def order_tuple(token_out: str, trigger_price: int, *, active: bool = True, executed: bool = False,
                expiration: int = 2_000_000_000, amount_in: int = 100_000_000, min_out: int = 1,
                owner: str = "0x00000000000000000000000000000000000a11ce") -> tuple:
    """Shape of getOrderDetails() output."""
    return (token_out, amount_in, min_out, trigger_price, owner, active, expiration, executed)


def make_oracle(prices: Dict[str, int]) -> Tuple[OracleContract, FakeContract]:
    """Oracle whose latestPrice looks up `prices` by lower-cased token address."""
    fake = FakeContract("0.0.6506125", {"latestPrice": lambda token: prices[token.lower()]})
    return OracleContract(fake), fake


def make_autoswap(next_order_id: int, orders: Dict[int, Any],
                  can_execute: Optional[Callable[[int], Tuple[bool, str]]] = None) -> Tuple[AutoSwapContract, FakeContract]:
    fake = FakeContract("0.0.6506134", {
        "nextOrderId": next_order_id,
        "getOrderDetails": lambda order_id: orders[order_id],
        "canExecuteOrder": can_execute or (lambda order_id: (True, "")),
    })
    return AutoSwapContract(fake), fake
