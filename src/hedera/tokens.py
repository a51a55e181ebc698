"""
tokens.py

Resolve token symbols (or address literals) to canonical EVM addresses and
parse `SYM=usd,SYM=usd` batch strings.
"""

from typing import List, Mapping, Optional, Tuple

from eth_utils import is_hex_address

from src.compute.fixed_point import decimal_to_scaled
from src.hedera.config import TOKENS
from src.hedera.errors import InputError, InvalidPairSpec, UnknownToken


def resolve_token(token_or_address: str, registry: Optional[Mapping[str, str]] = None) -> str:
    """
    Case-insensitive registry lookup; a 0x-prefixed 40-hex-digit literal passes through.

    Raises UnknownToken listing the known symbols otherwise.
    """
    tokens = TOKENS if registry is None else registry
    hit = tokens.get(token_or_address.upper())
    if hit is not None:
        return hit
    if token_or_address.startswith("0x") and is_hex_address(token_or_address):
        return token_or_address
    raise UnknownToken(token_or_address, tokens.keys())


def parse_price_pairs(pairs_arg: str, registry: Optional[Mapping[str, str]] = None) -> List[Tuple[str, int]]:
    """'SAUCE=0.061,HBAR=0.28' -> [(sauce_addr, 6100000), (hbar_addr, 28000000)]"""
    entries = [kv.strip() for kv in pairs_arg.split(",") if kv.strip()]
    if not entries:
        raise InputError("No pairs parsed from --pairs")

    parsed: List[Tuple[str, int]] = []
    for kv in entries:
        token_key, sep, usd = kv.partition("=")
        token_key, usd = token_key.strip(), usd.strip()
        if not sep or not token_key or not usd:
            raise InvalidPairSpec(f"Invalid pair '{kv}', expected TOKEN=usd")
        parsed.append((resolve_token(token_key, registry), decimal_to_scaled(usd)))
    return parsed
