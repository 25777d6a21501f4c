"""Read-only query selectors."""

from staking_kernel.selectors.base import BaseSelector
from staking_kernel.selectors.deposit_selector import DepositSelector, to_deposit_info

__all__ = ["BaseSelector", "DepositSelector", "to_deposit_info"]
