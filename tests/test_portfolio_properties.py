"""Property-based tests for the holdings ledger.

Tests the ledger invariants and its serialization using Hypothesis.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from stockdemo.trading.portfolio import HoldingsLedger, PortfolioSerializer


symbol_strategy = st.sampled_from(["AAPL", "GOOGL", "MSFT", "AMZN", "TSLA"])
quantity_strategy = st.integers(min_value=1, max_value=1000)
operation_strategy = st.tuples(st.sampled_from(["buy", "sell"]), symbol_strategy, quantity_strategy)


@given(symbol=symbol_strategy, quantity=quantity_strategy)
@settings(max_examples=100)
def test_buy_then_sell_same_amount_removes_holding(symbol: str, quantity: int):
    """
    Buying N shares and then selling N shares of the same symbol starting
    from an empty ledger SHALL leave no entry for that symbol.
    """
    ledger = HoldingsLedger()
    ledger.apply_buy(symbol, quantity)
    ledger.apply_sell(symbol, quantity)

    assert ledger.get_holding(symbol) is None
    assert symbol not in [h["symbol"] for h in PortfolioSerializer.serialize(ledger)]


@given(operations=st.lists(operation_strategy, max_size=40))
@settings(max_examples=100)
def test_ledger_never_holds_duplicates_or_non_positive_quantities(operations):
    """
    For any sequence of buys and sells, the ledger SHALL contain unique
    symbols with strictly positive quantities.
    """
    ledger = HoldingsLedger()
    for side, symbol, quantity in operations:
        if side == "buy":
            ledger.apply_buy(symbol, quantity)
        else:
            ledger.apply_sell(symbol, quantity)

    holdings = ledger.get_holdings()
    symbols = [h.symbol for h in holdings]
    assert len(symbols) == len(set(symbols))
    assert all(h.quantity > 0 for h in holdings)


@given(buys=st.lists(quantity_strategy, min_size=1, max_size=10), symbol=symbol_strategy)
@settings(max_examples=100)
def test_repeated_buys_accumulate(buys, symbol):
    ledger = HoldingsLedger()
    for quantity in buys:
        ledger.apply_buy(symbol, quantity)

    assert ledger.get_holding(symbol).quantity == sum(buys)
    assert len(ledger) == 1


def test_oversell_removes_holding():
    ledger = HoldingsLedger()
    ledger.apply_buy("AAPL", 3)
    ledger.apply_sell("AAPL", 5)
    assert "AAPL" not in ledger


def test_sell_of_unknown_symbol_is_a_no_op():
    ledger = HoldingsLedger()
    ledger.apply_buy("AAPL", 3)
    ledger.apply_sell("MSFT", 1)
    assert [(h.symbol, h.quantity) for h in ledger.get_holdings()] == [("AAPL", 3)]


def test_can_sell_checks_quantity():
    ledger = HoldingsLedger()
    ledger.apply_buy("AAPL", 3)
    assert ledger.can_sell("AAPL", 3)
    assert not ledger.can_sell("AAPL", 4)
    assert not ledger.can_sell("MSFT", 1)


def test_get_holdings_returns_copies():
    ledger = HoldingsLedger()
    ledger.apply_buy("AAPL", 3)
    ledger.get_holdings()[0].quantity = 99
    assert ledger.get_holding("AAPL").quantity == 3


def test_serializer_keeps_first_buy_order():
    ledger = HoldingsLedger()
    ledger.apply_buy("MSFT", 1)
    ledger.apply_buy("AAPL", 2)
    ledger.apply_buy("MSFT", 4)
    assert PortfolioSerializer.serialize(ledger) == [
        {"symbol": "MSFT", "quantity": 5},
        {"symbol": "AAPL", "quantity": 2},
    ]


def test_deserialize_merges_duplicates_and_drops_empty_entries():
    ledger = PortfolioSerializer.deserialize([
        {"symbol": "AAPL", "quantity": 2},
        {"symbol": "AAPL", "quantity": "3"},
        {"symbol": "MSFT", "quantity": 0},
    ])
    assert [(h.symbol, h.quantity) for h in ledger.get_holdings()] == [("AAPL", 5)]


@pytest.mark.parametrize("data", [
    {"symbol": "AAPL", "quantity": 1},
    [{"symbol": "AAPL"}],
    [{"symbol": "AAPL", "quantity": "many"}],
    ["AAPL"],
])
def test_deserialize_rejects_malformed_data(data):
    with pytest.raises(ValueError):
        PortfolioSerializer.deserialize(data)
