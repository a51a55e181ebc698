"""
config.py

Central configuration for the oracle admin tool and the AutoSwap executor.
Static constants live at the top; environment parsing builds immutable
config objects once at startup, business logic only ever receives those.
"""

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from src.hedera.errors import ConfigurationError, InvalidContractId

logger = logging.getLogger(__name__)


# ---- Network (Hashio JSON-RPC relay) ----
NETWORKS: Dict[str, Dict[str, object]] = {
    "testnet": {"rpc_url": "https://testnet.hashio.io/api", "chain_id": 296},
    "mainnet": {"rpc_url": "https://mainnet.hashio.io/api", "chain_id": 295},
}
DEFAULT_NETWORK = "testnet"
RECEIPT_TIMEOUT_SECONDS = 120

# ---- Contracts ----
DEFAULT_ORACLE_CONTRACT_ID = "0.0.6506125"
DEFAULT_AUTOSWAP_CONTRACT_ID = "0.0.6506134"

# ---- Tokens (MockPriceOracle constants, testnet) ----
TOKENS: Dict[str, str] = {
    "HBAR": "0x0000000000000000000000000000000000000000",
    "WHBAR": "0x0000000000000000000000000000000000003aD2",
    "USDC": "0x00000000000000000000000000000000000014F5",
    "SAUCE": "0x0000000000000000000000000000000000120f46",
}
HBAR_EVM_ZERO_ADDRESS = TOKENS["HBAR"]
DEFAULT_TARGET_TOKEN = TOKENS["SAUCE"]

# ---- Price scale ----
PRICE_DECIMALS = 8

# ---- Gas limits ----
QUERY_GAS = 150_000
ORDER_DETAILS_GAS = 300_000
CAN_EXECUTE_GAS = 200_000
CONTRACT_CONFIG_GAS = 200_000
TRANSFER_OWNERSHIP_GAS = 300_000
UPDATE_PRICE_GAS = 300_000
UPDATE_PRICES_GAS = 600_000
RESET_PRICES_GAS = 200_000
DEFAULT_MAX_GAS_FOR_EXECUTE = 5_000_000

# ---- Executor defaults ----
DEFAULT_SLIPPAGE_PERCENT = 1.0
DEFAULT_POLL_INTERVAL_MS = 30_000

# ---- Env names (primary first, legacy aliases after) ----
ACCOUNT_ID_ENV = ["HEDERA_ACCOUNT_ID", "ACCOUNT_ID"]
PRIVATE_KEY_ENV = ["PRIVATE_KEY", "ECDSA_PRIVATE_KEY"]
TARGET_TOKEN_ENV = ["AUTOSWAP_TARGET_TOKEN", "BONZO_TESTNET_SAUCE_ADDRESS"]

_ENTITY_ID_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


# ----------------------- env helpers ----------------------- #

def _env(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def get_env_or_raise(names: List[str], env: Optional[Mapping[str, str]] = None) -> str:
    """Return the first non-blank value among `names`, or raise naming all of them."""
    source = _env(env)
    for name in names:
        val = source.get(name)
        if val and val.strip():
            return val.strip()
    raise ConfigurationError(f"Missing required env. Tried: {', '.join(names)}")


def get_env_optional(names: List[str], env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    try:
        return get_env_or_raise(names, env)
    except ConfigurationError:
        return None


def get_env_int(name: str, default: int, env: Optional[Mapping[str, str]] = None) -> int:
    raw = get_env_optional([name], env)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def get_env_float(name: str, default: float, env: Optional[Mapping[str, str]] = None) -> float:
    raw = get_env_optional([name], env)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got '{raw}'")
    return value


def get_env_bool(name: str, default: bool, env: Optional[Mapping[str, str]] = None) -> bool:
    raw = get_env_optional([name], env)
    if raw is None:
        return default
    return raw.lower() == "true"


# ----------------------- id helpers ----------------------- #

def contract_id_to_evm_address(contract_id: str) -> str:
    """
    '0.0.6506134' -> '0x0000000000000000000000000000000000634696'

    Hedera "long-zero" form: 4 bytes shard, 8 bytes realm, 8 bytes entity num.
    A 42-char 0x address is returned unchanged.
    """
    value = contract_id.strip()
    if _ADDRESS_RE.match(value):
        return value
    m = _ENTITY_ID_RE.match(value)
    if not m:
        raise InvalidContractId(
            f"Invalid contract id '{contract_id}': expected shard.realm.num or a 0x address"
        )
    shard, realm, num = (int(g) for g in m.groups())
    if shard >= 2 ** 32 or realm >= 2 ** 64 or num >= 2 ** 64:
        raise InvalidContractId(f"Invalid contract id '{contract_id}': component out of range")
    return f"0x{shard:08x}{realm:016x}{num:016x}"


# ----------------------- config objects ----------------------- #

@dataclass(frozen=True)
class NetworkConfig:
    name: str
    rpc_url: str
    chain_id: int
    receipt_timeout: int = RECEIPT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "NetworkConfig":
        name = (get_env_optional(["HEDERA_NETWORK"], env) or DEFAULT_NETWORK).lower()
        if name not in NETWORKS:
            logger.warning(f"Invalid HEDERA_NETWORK: {name}. Defaulting to {DEFAULT_NETWORK}")
            name = DEFAULT_NETWORK
        net = NETWORKS[name]
        rpc_url = get_env_optional(["HEDERA_RPC_URL"], env) or str(net["rpc_url"])
        return cls(name=name, rpc_url=rpc_url, chain_id=int(net["chain_id"]))


@dataclass(frozen=True)
class OperatorCredentials:
    account_id: str
    private_key: str

    def __repr__(self) -> str:
        return f"OperatorCredentials(account_id={self.account_id!r}, private_key=***)"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "OperatorCredentials":
        account_id = get_env_or_raise(ACCOUNT_ID_ENV, env)
        if not _ENTITY_ID_RE.match(account_id):
            raise ConfigurationError(
                f"Invalid account id '{account_id}' (from {' / '.join(ACCOUNT_ID_ENV)}): expected shard.realm.num"
            )
        private_key = get_env_or_raise(PRIVATE_KEY_ENV, env)
        return cls(account_id=account_id, private_key=private_key)


@dataclass(frozen=True)
class ExecutorConfig:
    """Everything the AutoSwap executor needs, read once at startup."""
    autoswap_contract_id: str = DEFAULT_AUTOSWAP_CONTRACT_ID
    oracle_contract_id: str = DEFAULT_ORACLE_CONTRACT_ID
    target_token: str = DEFAULT_TARGET_TOKEN.lower()
    base_token: str = HBAR_EVM_ZERO_ADDRESS
    slippage_percent: float = DEFAULT_SLIPPAGE_PERCENT
    allow_near_trigger_execution: bool = False
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    max_gas_for_execute: int = DEFAULT_MAX_GAS_FOR_EXECUTE

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExecutorConfig":
        autoswap_id = get_env_optional(["AUTOSWAP_CONTRACT_ID"], env) or DEFAULT_AUTOSWAP_CONTRACT_ID
        oracle_id = get_env_optional(["ORACLE_CONTRACT_ID"], env) or DEFAULT_ORACLE_CONTRACT_ID
        for name, value in (("AUTOSWAP_CONTRACT_ID", autoswap_id), ("ORACLE_CONTRACT_ID", oracle_id)):
            try:
                contract_id_to_evm_address(value)
            except InvalidContractId as e:
                raise ConfigurationError(f"{name}: {e}")

        target = (get_env_optional(TARGET_TOKEN_ENV, env) or DEFAULT_TARGET_TOKEN).lower()
        if not _ADDRESS_RE.match(target):
            raise ConfigurationError(
                f"Target token (from {' / '.join(TARGET_TOKEN_ENV)}) must be a 0x address, got '{target}'"
            )

        return cls(
            autoswap_contract_id=autoswap_id,
            oracle_contract_id=oracle_id,
            target_token=target,
            slippage_percent=get_env_float("SLIPPAGE_PERCENT", DEFAULT_SLIPPAGE_PERCENT, env),
            allow_near_trigger_execution=get_env_bool("ALLOW_NEAR_TRIGGER_EXECUTION", False, env),
            poll_interval_ms=get_env_int("POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS, env),
            max_gas_for_execute=get_env_int("MAX_GAS_FOR_EXECUTE", DEFAULT_MAX_GAS_FOR_EXECUTE, env),
        )


def default_oracle_contract_id(env: Optional[Mapping[str, str]] = None) -> str:
    return get_env_optional(["ORACLE_CONTRACT_ID"], env) or DEFAULT_ORACLE_CONTRACT_ID
