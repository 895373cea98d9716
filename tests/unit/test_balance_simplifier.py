"""
tests/unit/test_balance_simplifier.py - Unit tests for balance_simplifier.

What this file proves:
  - compute_net_balances debits debtors, credits creditors, creates no entry
    for uninvolved parties, and is independent of obligation order
  - simplify returns nothing for an all-zero (or empty) ledger
  - simplify settles exactly the total positive balance, never pays oneself,
    and is economically correct: applying its payments reproduces the
    original net positions
  - Greedy order and tie-breaks are deterministic (largest creditor and
    largest debtor first; equal balances keep encounter order)
  - Residue within epsilon is ignored and the epsilon is configurable
  - The input map is never mutated

Unit test constraints:
  - No I/O, no mocks. Every function under test is pure.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from itertools import permutations

from splitledger.models.balance import NetBalance, Obligation, OptimizedSettlement, Party
from splitledger.services.balance_simplifier import (
    compute_net_balances,
    get_simplified_settlements,
    simplify,
)


A = Party("a", "Alice")
B = Party("b", "Bob")
C = Party("c", "Carol")
D = Party("d", "Dave")
E = Party("e", "Erin")


# ── Helpers ────────────────────────────────────────────────────────────────

def _owes(debtor: Party, creditor: Party, amount) -> Obligation:
    return Obligation(debtor=debtor, creditor=creditor, amount=amount)


def _net(**balances) -> dict:
    """Builds a net-balance map from keyword ids, e.g. _net(a=-40, b=40)."""
    names = {p.id: p.name for p in (A, B, C, D, E)}
    return {pid: NetBalance(pid, names[pid], amount) for pid, amount in balances.items()}


def _as_tuples(settlements: list[OptimizedSettlement]) -> list[tuple]:
    return [(s.from_party.id, s.to_party.id, s.amount) for s in settlements]


def _verify_correctness(net_balances: dict, settlements: list[OptimizedSettlement]) -> None:
    """
    Applies the suggested payments and asserts every party ends where the
    net balances said they would: debtors pay what they owe, creditors
    receive what they are owed. No money is invented or lost.
    """
    received = defaultdict(int)
    for s in settlements:
        received[s.from_party.id] -= s.amount
        received[s.to_party.id] += s.amount

    for pid, entry in net_balances.items():
        assert received[pid] == entry.balance, (
            f"party {pid}: expected {entry.balance}, payments give {received[pid]}"
        )


# ── compute_net_balances ───────────────────────────────────────────────────

def test_net_balances_chain():
    """A owes B 100, B owes C 50 → A -100, B +50, C +50."""
    net = compute_net_balances([_owes(A, B, 100), _owes(B, C, 50)])

    assert {pid: e.balance for pid, e in net.items()} == {"a": -100, "b": 50, "c": 50}
    assert net["a"].name == "Alice"


def test_net_balances_opposing_debts_cancel():
    net = compute_net_balances([_owes(A, B, 100), _owes(B, A, 60)])
    assert {pid: e.balance for pid, e in net.items()} == {"a": -40, "b": 40}


def test_net_balances_only_involved_parties_appear():
    net = compute_net_balances([_owes(A, B, 10)])
    assert set(net) == {"a", "b"}


def test_net_balances_empty_input():
    assert compute_net_balances([]) == {}


def test_net_balances_keep_zero_for_involved_parties():
    """A party whose debts cancel out still appears, with balance 0."""
    net = compute_net_balances([_owes(A, B, 25), _owes(B, A, 25)])
    assert net["a"].balance == 0
    assert net["b"].balance == 0


def test_net_balances_order_independent():
    """Every permutation of the obligations yields the same map."""
    obligations = [
        _owes(A, B, 100),
        _owes(B, C, 50),
        _owes(C, A, 30),
        _owes(D, B, 70),
    ]
    expected = compute_net_balances(obligations)

    for ordering in permutations(obligations):
        assert compute_net_balances(list(ordering)) == expected


def test_net_balances_sum_to_zero():
    obligations = [_owes(A, B, 13), _owes(C, D, 7), _owes(E, A, 21), _owes(B, E, 4)]
    net = compute_net_balances(obligations)
    assert sum(e.balance for e in net.values()) == 0


# ── simplify ───────────────────────────────────────────────────────────────

def test_simplify_all_zero_returns_empty_list():
    assert simplify(_net(a=0, b=0, c=0)) == []


def test_simplify_empty_map_returns_empty_list():
    assert simplify({}) == []


def test_simplify_chain_scenario():
    """Net A -100, B +50, C +50 → A pays B 50 and C 50."""
    net = compute_net_balances([_owes(A, B, 100), _owes(B, C, 50)])
    result = simplify(net)

    assert _as_tuples(result) == [("a", "b", 50), ("a", "c", 50)]
    assert result[0].from_party == A
    assert result[0].to_party == B


def test_simplify_opposing_debts_scenario():
    net = compute_net_balances([_owes(A, B, 100), _owes(B, A, 60)])
    assert _as_tuples(simplify(net)) == [("a", "b", 40)]


def test_simplify_triangle():
    """A owes B 10, B owes C 5, C owes A 3 → net A -7, B +5, C +2 → two payments."""
    result = get_simplified_settlements([_owes(A, B, 10), _owes(B, C, 5), _owes(C, A, 3)])
    assert _as_tuples(result) == [("a", "b", 5), ("a", "c", 2)]


def test_simplify_greedy_order_five_members():
    """
    Creditors a(100), b(50); debtors d(-60), e(-50), c(-40).
    Largest debtor meets largest creditor first.
    """
    net = _net(a=100, b=50, c=-40, d=-60, e=-50)
    result = simplify(net)

    assert _as_tuples(result) == [
        ("d", "a", 60),
        ("e", "a", 40),
        ("e", "b", 10),
        ("c", "b", 40),
    ]
    assert len(result) <= len(net) - 1
    _verify_correctness(net, result)


def test_simplify_ties_keep_encounter_order():
    net = _net(c=30, a=30, b=-30, d=-30)
    result = simplify(net)

    assert _as_tuples(result) == [("b", "c", 30), ("d", "a", 30)]


def test_simplify_total_settled_equals_total_credit():
    cases = [
        _net(a=100, b=-40, c=-60),
        _net(a=80, b=-50, c=-50, d=20),
        _net(a=1, b=1, c=1, d=-3),
        _net(a=-999, b=333, c=333, d=333),
    ]
    for net in cases:
        result = simplify(net)
        total_credit = sum(max(e.balance, 0) for e in net.values())
        assert sum(s.amount for s in result) == total_credit
        _verify_correctness(net, result)


def test_simplify_never_generates_self_payments():
    net = _net(a=50, b=-30, c=-20)
    for s in simplify(net):
        assert s.from_party.id != s.to_party.id


def test_simplify_amounts_are_positive_ints():
    net = _net(a=100, b=-60, c=-40)
    for s in simplify(net):
        assert type(s.amount) is int
        assert s.amount > 0


def test_simplify_does_not_mutate_input():
    net = _net(a=100, b=-60, c=-40)
    simplify(net)

    assert {pid: e.balance for pid, e in net.items()} == {"a": 100, "b": -60, "c": -40}


def test_simplify_ignores_residue_within_epsilon():
    net = _net(a=Decimal("0.005"), b=Decimal("-0.005"))
    assert simplify(net) == []


def test_simplify_rounds_fractional_amount_half_up():
    net = _net(a=Decimal("10.5"), b=Decimal("-10.5"))
    assert _as_tuples(simplify(net)) == [("b", "a", 11)]


def test_simplify_accepts_float_balances():
    net = _net(a=10.0, b=-10.0)
    assert _as_tuples(simplify(net)) == [("b", "a", 10)]


def test_simplify_custom_epsilon():
    net = _net(a=3, b=-3, c=10, d=-10)
    result = simplify(net, epsilon=5)

    assert _as_tuples(result) == [("d", "c", 10)]


def test_simplify_zero_epsilon_terminates():
    net = _net(a=100, b=-60, c=-40)
    result = simplify(net, epsilon=0)

    assert _as_tuples(result) == [("b", "a", 60), ("c", "a", 40)]


def test_simplify_unbalanced_input_does_not_crash():
    """Only creditors, no debtors → nothing to match."""
    assert simplify(_net(a=50, b=50)) == []
    assert simplify(_net(a=-50, b=-50)) == []


# ── get_simplified_settlements ─────────────────────────────────────────────

def test_get_simplified_settlements_composes_both_steps():
    obligations = [_owes(A, B, 100), _owes(B, C, 50), _owes(D, C, 25)]

    assert get_simplified_settlements(obligations) == simplify(compute_net_balances(obligations))


def test_get_simplified_settlements_reduces_transaction_count():
    """Four raw debts around a cycle collapse into a single payment."""
    obligations = [_owes(A, B, 40), _owes(B, C, 40), _owes(C, D, 40), _owes(D, A, 10)]
    result = get_simplified_settlements(obligations)

    assert _as_tuples(result) == [("a", "d", 30)]
