"""
Authorization gate for ledger calls.

The host verifies signatures before invoking the ledger and tells it which
addresses authorized the current invocation through an AuthVerifier. The gate
turns a missing authorization into an Unauthorized error, which aborts the
whole call.
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Optional

from ..errors import NotInitialized, Unauthorized
from ..models.codec import decode_address, encode_address
from ..store.keys import AdminKey
from ..store.transaction import StagedTransaction

logger = logging.getLogger(__name__)


class AuthVerifier(ABC):
    """Confirms that the controller of an address authorized the current call."""

    @abstractmethod
    def is_authorized(self, address: str) -> bool:
        raise NotImplementedError


class InvocationSigners(AuthVerifier):
    """Verifier backed by the set of addresses whose signatures the host already checked."""

    def __init__(self, signers: Iterable[str] = ()):
        self.signers: FrozenSet[str] = frozenset(signers)

    def is_authorized(self, address: str) -> bool:
        return address in self.signers

    def __repr__(self) -> str:
        return f"InvocationSigners({sorted(self.signers)!r})"


class AuthorizationGate:
    """Admin and caller checks, bound to one call's transaction."""

    def __init__(self, txn: StagedTransaction, verifier: AuthVerifier):
        self.txn = txn
        self.verifier = verifier

    def find_admin(self) -> Optional[str]:
        raw = self.txn.get(AdminKey())
        return decode_address(raw) if raw is not None else None

    def load_admin(self) -> str:
        """
        Return the provisioned admin address.

        Raises:
            NotInitialized: If no admin has been provisioned
        """
        admin = self.find_admin()
        if admin is None:
            raise NotInitialized()
        return admin

    def store_admin(self, admin: str) -> None:
        self.txn.set(AdminKey(), encode_address(admin))

    def require_caller(self, address: str) -> str:
        """
        Demand that the current call was authorized by address.

        Raises:
            Unauthorized: If the verifier does not confirm the address
        """
        if not self.verifier.is_authorized(address):
            logger.debug(f"Authorization missing for {address}")
            raise Unauthorized(f"Call not authorized by {address}")
        return address

    def require_admin(self) -> str:
        """Demand that the current call was authorized by the admin."""
        return self.require_caller(self.load_admin())
