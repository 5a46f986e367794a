from typing import Dict, Optional, Protocol, Set

from models import ClientAccount, DisputableRecord


class LedgerStore(Protocol):
    """
    Storage capability the ledger needs: get, insert and update by key.
    Every transaction references exactly one client, so a store may hold a
    disjoint shard of clients.
    """

    def get_account(self, client_id: int) -> Optional[ClientAccount]: ...

    def get_or_create_account(self, client_id: int) -> ClientAccount: ...

    def get_record(self, transaction_id: int) -> Optional[DisputableRecord]: ...

    def insert_record(self, record: DisputableRecord) -> None: ...

    def has_transaction(self, transaction_id: int) -> bool: ...

    def mark_transaction_seen(self, transaction_id: int) -> None: ...

    def get_all_accounts(self) -> Dict[int, ClientAccount]: ...


class StateManager:
    """
    In-memory state: client accounts, disputable records and the ids of every
    applied deposit/withdrawal. Single-threaded; nothing here is ever deleted.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._records: Dict[int, DisputableRecord] = {}
        self._seen_transaction_ids: Set[int] = set()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account if the client has been seen."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_record(self, transaction_id: int) -> Optional[DisputableRecord]:
        """Retrieve disputable record by transaction ID."""
        return self._records.get(transaction_id)

    def insert_record(self, record: DisputableRecord) -> None:
        """Store record for future dispute lookups."""
        self._records[record.transaction_id] = record
        self._seen_transaction_ids.add(record.transaction_id)

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._seen_transaction_ids

    def mark_transaction_seen(self, transaction_id: int) -> None:
        self._seen_transaction_ids.add(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
