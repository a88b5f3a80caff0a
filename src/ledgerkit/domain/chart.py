"""Chart of accounts hierarchy service."""

from typing import Any, Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Account
from ledgerkit.domain.errors import ValidationError


class AccountIndex:
    """Flat lookup maps over a chart of accounts, built once per query.

    Children are resolved through an adjacency map rather than object
    references, so walking the tree never follows live parent pointers.
    """

    def __init__(self, accounts: Sequence[Account]):
        self.accounts: dict[int, Account] = {acc.id: acc for acc in accounts}
        self.parent_map: dict[int, Optional[int]] = {}
        self.children_map: dict[int, list[int]] = {}

        for acc in accounts:
            parent_id = acc.parent_id if acc.parent_id in self.accounts else None
            self.parent_map[acc.id] = parent_id
            if parent_id is not None:
                self.children_map.setdefault(parent_id, []).append(acc.id)

        self._check_for_cycles()

    def _check_for_cycles(self) -> None:
        for start in self.accounts:
            seen = {start}
            current = self.parent_map.get(start)
            while current is not None:
                if current in seen:
                    raise ValidationError(
                        f"Account hierarchy contains a cycle through account {current}"
                    )
                seen.add(current)
                current = self.parent_map.get(current)

    def roots(self) -> list[int]:
        """Return IDs of accounts without a parent, in input order."""
        return [acc_id for acc_id, parent in self.parent_map.items() if parent is None]

    def children(self, account_id: int) -> list[int]:
        return self.children_map.get(account_id, [])

    def descendant_ids(self, account_id: int) -> set[int]:
        """Return the account ID and the IDs of everything below it."""
        result = {account_id}
        stack = [account_id]
        while stack:
            for child_id in self.children(stack.pop()):
                result.add(child_id)
                stack.append(child_id)
        return result


class ChartService:
    """Service for reading the chart of accounts as a hierarchy."""

    def __init__(self, db: Database):
        """Initialize chart service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_index(self, active_only: bool = False) -> AccountIndex:
        """Build lookup maps for the current chart of accounts.

        Raises:
            ValidationError: If parent links form a cycle
        """
        return AccountIndex(self.db.list_accounts(active_only=active_only))

    def get_account_tree(self, active_only: bool = False) -> list[dict[str, Any]]:
        """Get the chart of accounts as nested dictionaries.

        Each node has the account entity under 'account' and its child
        nodes under 'children', ordered by account code.
        """
        index = self.build_index(active_only=active_only)

        def build(account_id: int) -> dict[str, Any]:
            children = sorted(index.children(account_id), key=lambda i: index.accounts[i].code)
            return {
                "account": index.accounts[account_id],
                "children": [build(child_id) for child_id in children],
            }

        roots = sorted(index.roots(), key=lambda i: index.accounts[i].code)
        return [build(root_id) for root_id in roots]

    def descendant_ids(self, account_id: int) -> set[int]:
        """Get an account's ID together with all descendant account IDs."""
        return self.build_index().descendant_ids(account_id)
