"""
errors.py

Exception hierarchy shared by the oracle admin tool and the AutoSwap executor.
"""

from typing import Iterable, Optional


class HederaBotError(Exception):
    """Base error for this package."""
    pass


class ConfigurationError(HederaBotError):
    """Missing or malformed environment / static configuration."""
    pass


class InputError(HederaBotError):
    """Bad command-line input."""
    pass


class InvalidPriceFormat(InputError):
    """A price string or raw price could not be parsed."""

    def __init__(self, value: str, reason: str = "expected digits with an optional '.' fraction"):
        self.value = value
        super().__init__(f"Invalid price '{value}': {reason}")


class UnknownToken(InputError):
    """Token symbol is not in the registry and is not an address literal."""

    def __init__(self, token: str, known: Iterable[str]):
        self.token = token
        self.known = sorted(known)
        super().__init__(
            f"Unknown token '{token}'. Use one of {', '.join(self.known)} or an EVM address."
        )


class InvalidPairSpec(InputError):
    """A --pairs entry is not of the form TOKEN=usd."""
    pass


class InvalidContractId(InputError):
    """Contract id is neither shard.realm.num nor a 0x address."""
    pass


class RemoteCallError(HederaBotError):
    """Contract query or transaction failed (transport, revert or bad receipt)."""

    def __init__(self, message: str, function: Optional[str] = None,
                 contract_id: Optional[str] = None, status: Optional[str] = None):
        self.function = function
        self.contract_id = contract_id
        self.status = status
        super().__init__(message)


class ZeroDenominator(HederaBotError, ZeroDivisionError):
    """Cross rate cannot be derived because the quote price is zero."""
    pass
