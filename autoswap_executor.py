#!/usr/bin/env python3
"""
AutoSwap Executor

A VM-ready script that polls AutoSwapLimit orders and submits
executeSwapOrder once an order's trigger price is reached.

Usage:
    python autoswap_executor.py [options]

Configuration (environment / .env):
    HEDERA_ACCOUNT_ID | ACCOUNT_ID          operator account (0.0.x)
    PRIVATE_KEY | ECDSA_PRIVATE_KEY         operator ECDSA key
    HEDERA_NETWORK                          testnet (default) | mainnet
    HEDERA_RPC_URL                          JSON-RPC relay override
    AUTOSWAP_CONTRACT_ID                    default 0.0.6506134
    ORACLE_CONTRACT_ID                      default 0.0.6506125
    AUTOSWAP_TARGET_TOKEN | BONZO_TESTNET_SAUCE_ADDRESS
    SLIPPAGE_PERCENT                        default 1
    ALLOW_NEAR_TRIGGER_EXECUTION            default false
    POLL_INTERVAL_MS                        default 30000
    MAX_GAS_FOR_EXECUTE                     default 5000000
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from dotenv import load_dotenv

from src.autoswap.autoswap_contract import AUTOSWAP_ABI, AutoSwapContract
from src.autoswap.executor import AutoSwapExecutor
from src.hedera.client import LedgerClient
from src.hedera.config import ExecutorConfig, NetworkConfig, OperatorCredentials
from src.hedera.errors import ConfigurationError, RemoteCallError
from src.oracle.oracle_contract import ORACLE_ABI, OracleContract

logger = logging.getLogger("autoswap_executor")


def setup_logging(log_level: str, log_file: Optional[str]) -> None:
    """Setup logging configuration"""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        logger.info(f"📝 Logging to file: {log_file}")


def build_executor(config: ExecutorConfig, ledger: LedgerClient) -> AutoSwapExecutor:
    autoswap = AutoSwapContract(ledger.contract(config.autoswap_contract_id, AUTOSWAP_ABI))
    oracle = OracleContract(ledger.contract(config.oracle_contract_id, ORACLE_ABI))
    return AutoSwapExecutor(config, autoswap, oracle)


def log_banner(config: ExecutorConfig, network: NetworkConfig) -> None:
    logger.info("🚀 AutoSwap Executor starting...")
    logger.info(f"   Network: {network.name} ({network.rpc_url})")
    logger.info(f"   AutoSwapLimit: {config.autoswap_contract_id}")
    logger.info(f"   Oracle: {config.oracle_contract_id}")
    logger.info(f"   Target token: {config.target_token}")
    logger.info(f"   Slippage tolerance: {config.slippage_percent}%")
    logger.info(f"   Attempt execution when near-trigger: {config.allow_near_trigger_execution}")
    logger.info(f"   Poll interval: {config.poll_interval_ms}ms")


def probe_contract_config(executor: AutoSwapExecutor, operator_address: str) -> None:
    """Log getContractConfig(); warn if this operator is not the backend executor."""
    try:
        cfg = executor.autoswap.get_contract_config()
    except RemoteCallError as e:
        logger.warning(f"⚠️  Could not read AutoSwap contract config: {e}")
        return

    logger.info(f"   Execution fee (tinybar): {cfg.execution_fee}")
    logger.info(f"   Min order amount (tinybar): {cfg.min_order_amount}")
    logger.info(f"   Backend executor: {cfg.backend_executor}")
    logger.info(f"   Next order id: {cfg.next_order_id}")
    if cfg.backend_executor != operator_address.lower():
        logger.warning(
            f"⚠️  Operator {operator_address} is not the contract's backend executor; "
            "executeSwapOrder will likely revert"
        )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="AutoSwap Executor - execute limit orders when the oracle price reaches the trigger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage (reads .env)
  python autoswap_executor.py

  # Single scan, verbose
  python autoswap_executor.py --once --log-level DEBUG

  # Run as background service
  nohup python autoswap_executor.py --log-file autoswap.log > /dev/null 2>&1 &
        """
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Log file path (optional)'
    )
    parser.add_argument(
        '--once',
        action='store_true',
        help='Run a single scan cycle and exit'
    )
    parser.add_argument(
        '--max-cycles',
        type=int,
        default=None,
        help='Stop after N cycles (default: run forever)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    load_dotenv()

    try:
        credentials = OperatorCredentials.from_env()
        network = NetworkConfig.from_env()
        config = ExecutorConfig.from_env()
        ledger = LedgerClient(credentials, network)
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 1

    executor = build_executor(config, ledger)

    def _signal_handler(signum, frame):
        logger.info(f"🛑 Received signal {signum}, initiating graceful shutdown...")
        executor.stop()

    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)

    log_banner(config, network)
    probe_contract_config(executor, ledger.address)
    logger.info("=" * 60)

    max_cycles = 1 if args.once else args.max_cycles
    try:
        executor.run(max_cycles=max_cycles)
    except Exception as e:
        logger.error(f"💥 Fatal error: {e}")
        return 1

    logger.info("🏁 AutoSwap executor stopped")
    executor.log_statistics()
    return 0


if __name__ == "__main__":
    sys.exit(main())
