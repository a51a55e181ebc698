#!/usr/bin/env python3
"""
Tests for the oracle and AutoSwap contract wrappers: function names, argument
encoding (checksummed addresses, int prices) and gas limits.
"""

from eth_utils import to_checksum_address

from src.autoswap.autoswap_contract import AutoSwapContract, SwapOrder
from src.hedera.config import (
    CAN_EXECUTE_GAS,
    ORDER_DETAILS_GAS,
    QUERY_GAS,
    RESET_PRICES_GAS,
    TOKENS,
    UPDATE_PRICE_GAS,
    UPDATE_PRICES_GAS,
)
from src.oracle.oracle_contract import OracleContract
from src.test.helpers import FakeContract, order_tuple

WHBAR = TOKENS["WHBAR"]
NEW_OWNER = "0x00000000000000000000000000000000000a11ce"


class TestOracleContract:

    def test_owner(self):
        fake = FakeContract(responses={"owner": NEW_OWNER})
        assert OracleContract(fake).owner() == NEW_OWNER
        assert fake.calls == [("owner", (), QUERY_GAS)]

    def test_latest_price_checksums_token(self):
        fake = FakeContract(responses={"latestPrice": 6123000})
        assert OracleContract(fake).latest_price(WHBAR) == 6123000
        assert fake.calls == [("latestPrice", (to_checksum_address(WHBAR.lower()),), QUERY_GAS)]

    def test_update_price(self):
        fake = FakeContract()
        res = OracleContract(fake).update_price(TOKENS["SAUCE"], 6123000)
        assert res.ok
        assert fake.executions == [
            ("updatePrice", (to_checksum_address(TOKENS["SAUCE"]), 6123000), UPDATE_PRICE_GAS),
        ]

    def test_update_prices_splits_pairs(self):
        fake = FakeContract()
        OracleContract(fake).update_prices([(TOKENS["SAUCE"], 6100000), (TOKENS["HBAR"], 28000000)])
        name, (tokens, prices), gas = fake.executions[0]
        assert name == "updatePrices"
        assert tokens == [to_checksum_address(TOKENS["SAUCE"]), to_checksum_address(TOKENS["HBAR"])]
        assert prices == [6100000, 28000000]
        assert gas == UPDATE_PRICES_GAS

    def test_reset_prices(self):
        fake = FakeContract()
        OracleContract(fake).reset_prices()
        assert fake.executions == [("resetPrices", (), RESET_PRICES_GAS)]

    def test_transfer_ownership(self):
        fake = FakeContract()
        OracleContract(fake).transfer_ownership(NEW_OWNER)
        assert fake.executions[0][0] == "transferOwnership"
        assert fake.executions[0][1] == (to_checksum_address(NEW_OWNER),)


class TestAutoSwapContract:

    def test_order_details(self):
        fake = FakeContract(responses={
            "getOrderDetails": order_tuple("0x0000000000000000000000000000000000120F46", 21000000),
        })
        order = AutoSwapContract(fake).get_order_details(7)
        assert isinstance(order, SwapOrder)
        assert order.order_id == 7
        assert order.token_out == "0x0000000000000000000000000000000000120f46"
        assert order.trigger_price == 21000000
        assert order.is_open
        assert fake.calls == [("getOrderDetails", (7,), ORDER_DETAILS_GAS)]

    def test_uint256_values_kept_exact(self):
        big = 2 ** 255 + 1
        fake = FakeContract(responses={"getOrderDetails": order_tuple("0x" + "0" * 40, big, amount_in=big)})
        order = AutoSwapContract(fake).get_order_details(1)
        assert order.trigger_price == big
        assert order.amount_in_tinybar == big

    def test_can_execute_order(self):
        fake = FakeContract(responses={"canExecuteOrder": (False, "Order expired")})
        assert AutoSwapContract(fake).can_execute_order(3) == (False, "Order expired")
        assert fake.calls == [("canExecuteOrder", (3,), CAN_EXECUTE_GAS)]

    def test_next_order_id(self):
        fake = FakeContract(responses={"nextOrderId": 12})
        assert AutoSwapContract(fake).next_order_id() == 12

    def test_execute_swap_order_gas(self):
        fake = FakeContract()
        AutoSwapContract(fake).execute_swap_order(4, 21428571, gas=5_000_000)
        assert fake.executions == [("executeSwapOrder", (4, 21428571), 5_000_000)]

    def test_contract_config(self):
        fake = FakeContract(responses={
            "getContractConfig": (100000000, 10000000, "0x00000000000000000000000000000000000A11CE", 5),
        })
        cfg = AutoSwapContract(fake).get_contract_config()
        assert cfg.execution_fee == 100000000
        assert cfg.min_order_amount == 10000000
        assert cfg.backend_executor == NEW_OWNER
        assert cfg.next_order_id == 5
