#!/usr/bin/env python3
"""
executor.py

Polling executor for AutoSwapLimit orders.

Exports:
    AutoSwapExecutor(config, autoswap, oracle, clock=time.time, sleep=time.sleep)
    fetch_oracle_prices(oracle, target_token, base_token) -> OraclePrices
    check_order_guards(order, now, target_token) -> OrderOutcome | None

Behavior:
- Each cycle reads nextOrderId; with no orders the executor stays IDLE and sleeps
- Otherwise it enters SCANNING: one oracle cross rate for the whole cycle, then
  every order id 1..nextOrderId-1 is evaluated sequentially
- An order is executed when its trigger is met, or when near-trigger execution
  is enabled and the price sits inside the slippage band
- A failing order is logged and skipped; a failing cycle-level fetch aborts the
  rest of that cycle only. The fixed poll interval is the only retry
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional

from src.autoswap.autoswap_contract import AutoSwapContract, SwapOrder
from src.compute.fixed_point import format_usdc, scaled_to_decimal_string
from src.compute.swap_math import cross_rate, is_within_tolerance
from src.hedera.config import ExecutorConfig
from src.oracle.oracle_contract import OracleContract

logger = logging.getLogger(__name__)

SLEEP_CHUNK_SECONDS = 5.0
STATS_EVERY_N_CYCLES = 10


class ExecutorState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class OrderOutcome(Enum):
    CLOSED = "closed"
    EXPIRED = "expired"
    OTHER_TOKEN = "other_token"
    NOT_EXECUTABLE = "not_executable"
    BELOW_TRIGGER = "below_trigger"
    EXECUTED = "executed"
    ERROR = "error"


@dataclass(frozen=True)
class OraclePrices:
    target_usd: int
    base_usd: int
    cross_rate: int


@dataclass
class CycleReport:
    state: ExecutorState
    last_order_id: int = 0
    prices: Optional[OraclePrices] = None
    outcomes: Dict[int, OrderOutcome] = field(default_factory=dict)

    @property
    def executed(self) -> int:
        return sum(1 for o in self.outcomes.values() if o is OrderOutcome.EXECUTED)


@dataclass
class ExecutorStats:
    cycles: int = 0
    cycle_errors: int = 0
    orders_executed: int = 0
    order_errors: int = 0
    started_at: datetime = field(default_factory=datetime.now)


# ----------------------- pure helpers ----------------------- #

def fetch_oracle_prices(oracle: OracleContract, target_token: str, base_token: str) -> OraclePrices:
    """Target priced in base token. Raises ZeroDenominator when the base price is 0."""
    target_usd = oracle.latest_price(target_token)
    base_usd = oracle.latest_price(base_token)
    return OraclePrices(target_usd=target_usd, base_usd=base_usd, cross_rate=cross_rate(target_usd, base_usd))


def check_order_guards(order: SwapOrder, now: int, target_token: str) -> Optional[OrderOutcome]:
    """Local guards, in order. Returns the skip reason or None if the order may proceed."""
    if not order.is_open:
        return OrderOutcome.CLOSED
    if order.expiration_time <= now:
        return OrderOutcome.EXPIRED
    if order.token_out != target_token.lower():
        return OrderOutcome.OTHER_TOKEN
    return None


# ----------------------- executor ----------------------- #

class AutoSwapExecutor:
    """Idle/Scanning polling loop with injectable clock and sleep."""

    def __init__(self, config: ExecutorConfig, autoswap: AutoSwapContract, oracle: OracleContract,
                 clock: Callable[[], float] = time.time, sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.autoswap = autoswap
        self.oracle = oracle
        self.clock = clock
        self.sleep = sleep
        self.state = ExecutorState.IDLE
        self.running = True
        self.stats = ExecutorStats()

    def stop(self) -> None:
        self.running = False

    def should_execute(self, order: SwapOrder, current_price: int) -> bool:
        meets_trigger = current_price >= order.trigger_price
        near_trigger = is_within_tolerance(current_price, order.trigger_price, self.config.slippage_percent)
        logger.info(
            f"Order #{order.order_id}: trigger={order.trigger_price} current={current_price} "
            f"meets={meets_trigger} nearWithin{self.config.slippage_percent}%={near_trigger}"
        )
        return meets_trigger or (self.config.allow_near_trigger_execution and near_trigger)

    def process_order(self, order_id: int, current_price: int, now: int) -> OrderOutcome:
        """Evaluate one order and submit at most one execution. Remote errors propagate."""
        order = self.autoswap.get_order_details(order_id)

        skip = check_order_guards(order, now, self.config.target_token)
        if skip is not None:
            logger.debug(f"Order #{order_id} skipped: {skip.value}")
            return skip

        can, reason = self.autoswap.can_execute_order(order_id)
        if not can:
            logger.info(f"Order #{order_id} not executable: {reason}")
            return OrderOutcome.NOT_EXECUTABLE

        if not self.should_execute(order, current_price):
            return OrderOutcome.BELOW_TRIGGER

        res = self.autoswap.execute_swap_order(order_id, current_price, gas=self.config.max_gas_for_execute)
        logger.info(f"Order #{order_id}: executeSwapOrder status={res.status} txId={res.tx_id}")
        return OrderOutcome.EXECUTED

    def _log_prices(self, prices: OraclePrices) -> None:
        logger.info(f"Oracle price target in HBAR (1e8 scale): {prices.cross_rate}")
        logger.info(f"Oracle price target in HBAR: {scaled_to_decimal_string(prices.cross_rate)} HBAR")
        logger.info(f"Oracle price target in USDC (1e8 scale): {prices.target_usd}")
        logger.info(f"Oracle price target in USDC: {format_usdc(prices.target_usd)}")
        logger.info(f"Oracle price HBAR in USDC (1e8 scale): {prices.base_usd} => {format_usdc(prices.base_usd)}")

    def run_cycle(self) -> CycleReport:
        """
        One poll. Cycle-level failures (order count, oracle prices) raise;
        per-order failures are logged and recorded as OrderOutcome.ERROR.
        """
        now = int(self.clock())
        last_id = self.autoswap.next_order_id() - 1

        if last_id < 1:
            self.state = ExecutorState.IDLE
            logger.info("No orders yet; sleeping...")
            return CycleReport(state=self.state)

        self.state = ExecutorState.SCANNING
        prices = fetch_oracle_prices(self.oracle, self.config.target_token, self.config.base_token)
        self._log_prices(prices)

        report = CycleReport(state=self.state, last_order_id=last_id, prices=prices)
        for order_id in range(1, last_id + 1):
            try:
                outcome = self.process_order(order_id, prices.cross_rate, now)
            except Exception as e:
                logger.error(f"Order #{order_id} processing error: {e}")
                self.stats.order_errors += 1
                outcome = OrderOutcome.ERROR
            report.outcomes[order_id] = outcome

        self.stats.orders_executed += report.executed
        return report

    def log_statistics(self) -> None:
        uptime = datetime.now() - self.stats.started_at
        logger.info("📊 Statistics:")
        logger.info(f"   Uptime: {uptime}")
        logger.info(f"   Cycles: {self.stats.cycles}")
        logger.info(f"   Cycle errors: {self.stats.cycle_errors}")
        logger.info(f"   Orders executed: {self.stats.orders_executed}")
        logger.info(f"   Order errors: {self.stats.order_errors}")

    def _wait(self, seconds: float) -> None:
        """Sleep in small chunks to allow for graceful shutdown."""
        remaining = seconds
        while remaining > 0 and self.running:
            step = min(SLEEP_CHUNK_SECONDS, remaining)
            self.sleep(step)
            remaining -= step

    def run(self, max_cycles: Optional[int] = None) -> ExecutorStats:
        """Poll until stopped (or until `max_cycles` cycles have run)."""
        while self.running:
            try:
                self.run_cycle()
            except KeyboardInterrupt:
                logger.info("🛑 Keyboard interrupt received")
                break
            except Exception as e:
                logger.error(f"Scan loop error: {e}")
                self.stats.cycle_errors += 1

            self.stats.cycles += 1
            if self.stats.cycles % STATS_EVERY_N_CYCLES == 0:
                self.log_statistics()

            if max_cycles is not None and self.stats.cycles >= max_cycles:
                break

            self._wait(self.config.poll_interval_seconds)

        return self.stats
