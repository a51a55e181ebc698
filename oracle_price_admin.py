#!/usr/bin/env python3
"""
Oracle Price Admin

Read and update MockPriceOracle prices, or transfer its ownership.
One command per invocation; every transaction waits for its receipt.
"""

import argparse
import sys
from typing import Callable, Dict, List, Optional

from dotenv import load_dotenv
from eth_utils import is_hex_address

from src.compute.fixed_point import decimal_to_scaled, parse_raw_price, scaled_to_decimal_string
from src.hedera.client import LedgerClient
from src.hedera.config import (
    NetworkConfig,
    OperatorCredentials,
    contract_id_to_evm_address,
    default_oracle_contract_id,
)
from src.hedera.errors import ConfigurationError, InputError
from src.hedera.tokens import parse_price_pairs, resolve_token
from src.oracle.oracle_contract import ORACLE_ABI, OracleContract

Connect = Callable[[], OracleContract]

USAGE_EXAMPLES = """
Examples:
  python oracle_price_admin.py owner
  python oracle_price_admin.py transferOwner --to 0x...
  python oracle_price_admin.py set --token SAUCE --usd 0.06123
  python oracle_price_admin.py set --token 0x... --priceRaw 6123000
  python oracle_price_admin.py batch --pairs "SAUCE=0.061,HBAR=0.28"
  python oracle_price_admin.py reset
  python oracle_price_admin.py info --token SAUCE

Notes:
  - Prices use 8 decimals of precision internally (USDC-style)
  - You must be the oracle contract owner to update prices
  - ORACLE_CONTRACT_ID can be overridden via env or --oracle
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oracle_price_admin.py",
        description="Oracle Price Admin - read and update oracle prices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EXAMPLES,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument('command', nargs='?', default='',
                        help='owner | setOwner | transferOwner | set | batch | reset | info | help')
    parser.add_argument('-h', '--help', action='store_true', help='Show this help and exit')
    parser.add_argument('--oracle', help='Oracle contract id (default: $ORACLE_CONTRACT_ID or 0.0.6506125)')
    parser.add_argument('--to', '--new', dest='to', help='New owner EVM address')
    parser.add_argument('--token', help='Token symbol or EVM address')
    parser.add_argument('--usd', help='Price in USD as a decimal string, e.g. 0.06123')
    parser.add_argument('--priceRaw', '--price-raw', dest='price_raw', help='Price already scaled by 1e8')
    parser.add_argument('--pairs', help='Comma-separated TOKEN=usd pairs')
    return parser


def connect_oracle(oracle_id: str) -> OracleContract:
    """Build the operator session from env; no network traffic until the first call."""
    ledger = LedgerClient(OperatorCredentials.from_env(), NetworkConfig.from_env())
    return OracleContract(ledger.contract(oracle_id, ORACLE_ABI))


# ----------------------- commands ----------------------- #

def cmd_owner(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    oracle = connect()
    print(f"owner({oracle_id}) = {oracle.owner()}")


def cmd_transfer_owner(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    new_owner = args.to or ""
    if not new_owner:
        raise InputError("Missing --to <0xEvmAddress>")
    if not is_hex_address(new_owner):
        raise InputError(f"Invalid --to address '{new_owner}'")
    oracle = connect()
    print(f"Transferring ownership to {new_owner} (oracle={oracle_id})")
    res = oracle.transfer_ownership(new_owner)
    print(f"transferOwnership({new_owner}) -> {res.status} txId={res.tx_id}")
    print(f"owner({oracle_id}) = {oracle.owner()}")


def cmd_set(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    if not args.token or not (args.usd or args.price_raw):
        raise InputError("Missing --token and either --usd or --priceRaw")
    token = resolve_token(args.token)
    scaled = parse_raw_price(args.price_raw) if args.price_raw else decimal_to_scaled(args.usd)
    oracle = connect()
    print(f"Setting price token={token} scaled={scaled} (oracle={oracle_id})")
    res = oracle.update_price(token, scaled)
    print(f"updatePrice({token}, {scaled}) -> {res.status} txId={res.tx_id}")
    latest = oracle.latest_price(token)
    print(f"latestPrice -> {latest} ({scaled_to_decimal_string(latest)} USD)")


def cmd_batch(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    if not args.pairs:
        raise InputError("Missing --pairs 'TOKEN=usd,...'")
    pairs = parse_price_pairs(args.pairs)
    oracle = connect()
    print(f"Batch updating {len(pairs)} prices (oracle={oracle_id})")
    res = oracle.update_prices(pairs)
    print(f"updatePrices(batch size={len(pairs)}) -> {res.status} txId={res.tx_id}")


def cmd_reset(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    oracle = connect()
    print(f"Resetting oracle prices (oracle={oracle_id})")
    res = oracle.reset_prices()
    print(f"resetPrices() -> {res.status} txId={res.tx_id}")


def cmd_info(args: argparse.Namespace, oracle_id: str, connect: Connect) -> None:
    if not args.token:
        raise InputError("Missing --token")
    token = resolve_token(args.token)
    oracle = connect()
    price = oracle.latest_price(token)
    print(f"latestPrice({token}) = {price} ({scaled_to_decimal_string(price)} USD)")


COMMANDS: Dict[str, Callable[[argparse.Namespace, str, Connect], None]] = {
    "owner": cmd_owner,
    "setOwner": cmd_transfer_owner,
    "transferOwner": cmd_transfer_owner,
    "set": cmd_set,
    "batch": cmd_batch,
    "reset": cmd_reset,
    "info": cmd_info,
}


def main(argv: Optional[List[str]] = None,
         oracle_factory: Callable[[str], OracleContract] = connect_oracle) -> int:
    """Main entry point. RemoteCallError is not caught: a failed call ends the process."""
    parser = build_parser()
    args = parser.parse_args(argv)
    cmd = args.command

    if args.help or cmd in ("", "help"):
        parser.print_help()
        return 0

    handler = COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command '{cmd}'", file=sys.stderr)
        parser.print_help()
        return 1

    load_dotenv()
    oracle_id = args.oracle or default_oracle_contract_id()

    try:
        contract_id_to_evm_address(oracle_id)
        handler(args, oracle_id, lambda: oracle_factory(oracle_id))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except InputError as e:
        print(str(e), file=sys.stderr)
        parser.print_help()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
