"""Outcome of a single deployment attempt."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeploymentResult:
    """
    Success carries contract_address, failure carries error.
    Exactly one of the two is set.
    """

    contract_address: Optional[str] = None
    error: Optional[BaseException] = None

    def __post_init__(self):
        if (self.contract_address is None) == (self.error is None):
            raise ValueError("DeploymentResult needs exactly one of contract_address or error")

    @classmethod
    def success(cls, contract_address: str) -> "DeploymentResult":
        return cls(contract_address=contract_address)

    @classmethod
    def failure(cls, error: BaseException) -> "DeploymentResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
