"""
Payment rail interface.

The ledger computes fares, refunds and fees; moving the money is the job of
an external payment rail. The default rail only logs what it was asked to
settle, so a real deployment must inject a rail that performs transfers.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class PaymentRail(ABC):
    """Moves value between accounts."""

    @abstractmethod
    def transfer(self, source: str, destination: str, amount: int) -> None:
        """
        Move amount from source to destination.

        Implementations raise to refuse a transfer; the ledger call that
        requested it is then aborted.
        """
        raise NotImplementedError


class LoggingPaymentRail(PaymentRail):
    """Rail that moves nothing and logs every requested settlement."""

    def transfer(self, source: str, destination: str, amount: int) -> None:
        logger.info(f"Settlement requested (not executed): {amount} from {source} to {destination}")
