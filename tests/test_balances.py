import logging
from decimal import Decimal

import pytest

from app.balances import (
    ParticipantBalance,
    build_equal_split_expense,
    check_split_totals,
    compute_balances,
    equal_split_shares,
    generate_settlements,
)
from app.enums import ExpenseCategory, SplitType
from app.errors import PermissionDenied, ValidationError

ROSTER = ["alice", "bob", "carol", "dave"]


def ledger(*entries):
    """Turn (expense_id, payer, amount, participants) tuples into expense and split rows."""
    expenses, splits = [], []
    for expense_id, payer, amount, participants in entries:
        draft, split_drafts = build_equal_split_expense(
            payer_id=payer,
            amount=amount,
            description=expense_id,
            category="other",
            roster=ROSTER,
            participants=participants,
        )
        expenses.append({"id": expense_id, "payer_id": payer, "amount": draft.amount})
        splits.extend(
            {"expense_id": expense_id, "participant_id": s.participant_id, "amount_owed": s.amount_owed}
            for s in split_drafts
        )
    return expenses, splits


def balance(pid, net):
    net = Decimal(net)
    return ParticipantBalance(participant_id=pid, total_paid=Decimal("0"), total_owed=Decimal("0"), net_balance=net)


def apply(balances, settlements):
    remaining = {b.participant_id: b.net_balance for b in balances}
    for s in settlements:
        remaining[s.from_participant_id] += s.amount
        remaining[s.to_participant_id] -= s.amount
    return remaining


@pytest.fixture
def weekend_ledger():
    return ledger(
        ("hotel", "alice", "100.00", None),
        ("tapas", "bob", "45.50", ["bob", "carol", "dave"]),
        ("taxi", "carol", "10.01", ["alice", "carol"]),
    )


# --- equal splits ---

def test_three_way_split_of_ninety():
    expense, splits = build_equal_split_expense("alice", 90, "Dinner", "food", ["alice", "bob", "carol"])

    assert expense.amount == Decimal("90.00")
    assert expense.category is ExpenseCategory.FOOD
    assert expense.split_type is SplitType.EQUAL
    assert expense.amount_per_person == Decimal("30.00")
    assert [(s.participant_id, s.amount_owed, s.paid) for s in splits] == [
        ("alice", Decimal("30.00"), True),
        ("bob", Decimal("30.00"), False),
        ("carol", Decimal("30.00"), False),
    ]


def test_odd_cent_split_sums_to_amount():
    expense, splits = build_equal_split_expense("alice", Decimal("100.01"), "Museum", "activities", ["alice", "bob"])

    assert [s.amount_owed for s in splits] == [Decimal("50.01"), Decimal("50.00")]
    assert sum(s.amount_owed for s in splits) == Decimal("100.01")
    assert expense.amount_per_person == Decimal("50.01")


@pytest.mark.parametrize("amount, count", [("10.00", 3), ("0.05", 3), ("0.04", 6), ("999.99", 7), ("1", 4)])
def test_shares_always_add_up(amount, count):
    ids = [f"p{i}" for i in range(count)]
    shares = equal_split_shares(Decimal(amount), ids)

    assert sum(shares.values()) == Decimal(amount)
    assert all(share >= 0 for share in shares.values())
    assert max(shares.values()) - min(shares.values()) <= Decimal("0.01")


def test_subset_keeps_roster_order_and_ignores_unknown_ids():
    _, splits = build_equal_split_expense(
        "carol", "9.00", "Coffee", "food", ROSTER, participants=["dave", "ghost", "bob"],
    )

    assert [s.participant_id for s in splits] == ["bob", "dave"]
    # The payer is not in the split, so nobody is marked paid
    assert not any(s.paid for s in splits)


def test_empty_subset_means_everyone():
    _, splits = build_equal_split_expense("alice", "8.00", "Snacks", "shopping", ROSTER, participants=[])

    assert [s.participant_id for s in splits] == ROSTER
    assert {s.amount_owed for s in splits} == {Decimal("2.00")}


def test_non_participant_cannot_add_expense():
    with pytest.raises(PermissionDenied, match="Only trip participants can add expenses"):
        build_equal_split_expense("mallory", 50, "Bribe", "other", ROSTER)


@pytest.mark.parametrize("amount", [0, -5, "-0.01"])
def test_amount_must_be_positive(amount):
    with pytest.raises(ValidationError, match="greater than zero"):
        build_equal_split_expense("alice", amount, "Nothing", "other", ROSTER)


def test_amount_rejects_fractions_of_a_cent():
    with pytest.raises(ValidationError, match="two decimal places"):
        build_equal_split_expense("alice", "10.005", "Gum", "other", ROSTER)


def test_subset_with_nobody_on_the_roster_is_rejected():
    with pytest.raises(ValidationError, match="No participants to split between"):
        build_equal_split_expense("alice", 20, "Gift", "other", ROSTER, participants=["ghost"])


def test_unknown_category_is_rejected():
    with pytest.raises(ValidationError, match="Unknown expense category"):
        build_equal_split_expense("alice", 20, "Gift", "souvenirs", ROSTER)


# --- balances ---

def test_balances_for_single_shared_dinner():
    expenses, splits = ledger(("dinner", "alice", 90, ["alice", "bob", "carol"]))
    balances = compute_balances(expenses, splits, ["alice", "bob", "carol"])

    assert [(b.participant_id, b.total_paid, b.total_owed, b.net_balance) for b in balances] == [
        ("alice", Decimal("90.00"), Decimal("30.00"), Decimal("60.00")),
        ("bob", Decimal("0.00"), Decimal("30.00"), Decimal("-30.00")),
        ("carol", Decimal("0.00"), Decimal("30.00"), Decimal("-30.00")),
    ]


def test_no_expenses_gives_zero_balance_for_everyone():
    balances = compute_balances([], [], ROSTER)

    assert [b.participant_id for b in balances] == ROSTER
    assert all(b.total_paid == b.total_owed == b.net_balance == 0 for b in balances)
    assert generate_settlements(balances) == []


def test_cancelling_expenses_need_no_settlement():
    expenses, splits = ledger(
        ("lunch", "alice", 50, ["alice", "bob"]),
        ("dinner", "bob", 50, ["alice", "bob"]),
    )
    balances = compute_balances(expenses, splits, ["alice", "bob"])

    assert [b.net_balance for b in balances] == [Decimal("0.00"), Decimal("0.00")]
    assert generate_settlements(balances) == []


def test_balances_sum_to_zero(weekend_ledger):
    expenses, splits = weekend_ledger
    balances = compute_balances(expenses, splits, ROSTER)

    assert {b.participant_id: b.net_balance for b in balances} == {
        "alice": Decimal("69.99"),
        "bob": Decimal("5.33"),
        "carol": Decimal("-35.16"),
        "dave": Decimal("-40.16"),
    }
    assert sum(b.net_balance for b in balances) == 0


def test_compute_balances_is_pure(weekend_ledger):
    expenses, splits = weekend_ledger

    assert compute_balances(expenses, splits, ROSTER) == compute_balances(expenses, splits, ROSTER)


def test_mismatched_splits_are_logged_not_raised(caplog):
    expenses = [{"id": "broken", "payer_id": "alice", "amount": Decimal("90.00")}]
    splits = [
        {"expense_id": "broken", "participant_id": "alice", "amount_owed": Decimal("30.00")},
        {"expense_id": "broken", "participant_id": "bob", "amount_owed": Decimal("30.00")},
    ]

    problems = check_split_totals(expenses, splits)
    assert [(p.expense_id, p.split_total) for p in problems] == [("broken", Decimal("60.00"))]

    with caplog.at_level(logging.WARNING, logger="lfg"):
        balances = compute_balances(expenses, splits, ["alice", "bob"])

    assert "Expense splits do not match amount" in caplog.text
    assert balances[0].net_balance == Decimal("60.00")


def test_rows_for_people_off_the_roster_are_ignored():
    expenses, splits = ledger(("dinner", "alice", 90, ["alice", "bob", "carol"]))
    balances = compute_balances(expenses, splits, ["alice", "bob"])

    assert [b.participant_id for b in balances] == ["alice", "bob"]


# --- settlements ---

def test_settlements_for_single_shared_dinner():
    expenses, splits = ledger(("dinner", "alice", 90, ["alice", "bob", "carol"]))
    settlements = generate_settlements(compute_balances(expenses, splits, ["alice", "bob", "carol"]))

    assert [(s.from_participant_id, s.to_participant_id, s.amount) for s in settlements] == [
        ("bob", "alice", Decimal("30.00")),
        ("carol", "alice", Decimal("30.00")),
    ]


def test_largest_creditor_is_matched_with_largest_debtor(weekend_ledger):
    expenses, splits = weekend_ledger
    balances = compute_balances(expenses, splits, ROSTER)
    settlements = generate_settlements(balances)

    assert [(s.from_participant_id, s.to_participant_id, s.amount) for s in settlements] == [
        ("dave", "alice", Decimal("40.16")),
        ("carol", "alice", Decimal("29.83")),
        ("carol", "bob", Decimal("5.33")),
    ]
    assert all(v == 0 for v in apply(balances, settlements).values())


def test_one_debtor_pays_several_creditors_in_roster_order():
    balances = [balance("a", "30"), balance("b", "30"), balance("c", "30"), balance("d", "-90")]
    settlements = generate_settlements(balances)

    assert [(s.from_participant_id, s.to_participant_id, s.amount) for s in settlements] == [
        ("d", "a", Decimal("30")),
        ("d", "b", Decimal("30")),
        ("d", "c", Decimal("30")),
    ]


def test_negligible_balances_are_ignored():
    assert generate_settlements([balance("a", "0.01"), balance("b", "-0.01")]) == []


def test_rounding_drift_is_dropped():
    balances = [balance("a", "10.00"), balance("b", "-5.00"), balance("c", "-5.01")]
    settlements = generate_settlements(balances)

    assert [(s.from_participant_id, s.to_participant_id, s.amount) for s in settlements] == [
        ("c", "a", Decimal("5.01")),
        ("b", "a", Decimal("4.99")),
    ]
    assert all(abs(v) <= Decimal("0.01") for v in apply(balances, settlements).values())


def test_settlement_count_is_bounded():
    balances = [
        balance("a", "120.50"), balance("b", "14.25"), balance("c", "3.10"),
        balance("d", "-60.00"), balance("e", "-44.35"), balance("f", "-33.50"),
    ]
    settlements = generate_settlements(balances)

    assert len(settlements) <= 3 + 3 - 1
    assert all(v == 0 for v in apply(balances, settlements).values())
    assert generate_settlements(balances) == settlements
