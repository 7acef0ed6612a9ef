"""Holdings ledger kept on the client side."""

from typing import Dict, List, Optional

from .models import Holding


class HoldingsLedger:
    """Symbol to share-count ledger.

    Entries are created on the first buy of a symbol and removed as soon
    as a sell brings the quantity to zero or below, so the ledger never
    holds duplicate symbols or negative quantities.
    """

    def __init__(self, holdings: Optional[List[Holding]] = None) -> None:
        self._holdings: Dict[str, Holding] = {}
        for holding in holdings or []:
            self.apply_buy(holding.symbol, holding.quantity)

    def get_holding(self, symbol: str) -> Optional[Holding]:
        """Get the holding for a specific symbol."""
        return self._holdings.get(symbol)

    def get_holdings(self) -> List[Holding]:
        """Get all holdings in the order they were first bought."""
        return [Holding(h.symbol, h.quantity) for h in self._holdings.values()]

    def can_sell(self, symbol: str, quantity: int) -> bool:
        """Check the ledger holds at least ``quantity`` shares of ``symbol``."""
        holding = self._holdings.get(symbol)
        return holding is not None and holding.quantity >= quantity

    def apply_buy(self, symbol: str, quantity: int) -> None:
        """Add shares, creating the holding if needed."""
        existing = self._holdings.get(symbol)
        if existing:
            existing.quantity += quantity
        else:
            self._holdings[symbol] = Holding(symbol=symbol, quantity=quantity)

    def apply_sell(self, symbol: str, quantity: int) -> None:
        """Remove shares; drops the holding once it reaches zero.

        Selling a symbol that is not held leaves the ledger unchanged.
        """
        existing = self._holdings.get(symbol)
        if existing is None:
            return
        existing.quantity -= quantity
        if existing.quantity <= 0:
            del self._holdings[symbol]

    def __len__(self) -> int:
        return len(self._holdings)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._holdings


class PortfolioSerializer:
    """Serializer for the persisted holdings list."""

    @staticmethod
    def serialize(ledger: HoldingsLedger) -> List[dict]:
        """Serialize the ledger to a JSON-compatible list.

        Args:
            ledger: Ledger to serialize

        Returns:
            List of ``{"symbol", "quantity"}`` dictionaries
        """
        return [
            {"symbol": holding.symbol, "quantity": holding.quantity}
            for holding in ledger.get_holdings()
        ]

    @staticmethod
    def deserialize(data: List[dict]) -> HoldingsLedger:
        """Restore a ledger from its persisted list.

        Entries for the same symbol are merged; entries with a quantity of
        zero or below are dropped.

        Args:
            data: List of ``{"symbol", "quantity"}`` dictionaries

        Returns:
            Restored HoldingsLedger

        Raises:
            ValueError: If the data is not a list of valid holdings
        """
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of holdings, got {type(data).__name__}")

        ledger = HoldingsLedger()
        for entry in data:
            try:
                symbol = str(entry["symbol"])
                quantity = int(entry["quantity"])
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid holding entry {entry!r}: {e}") from e
            if quantity > 0:
                ledger.apply_buy(symbol, quantity)
        return ledger
