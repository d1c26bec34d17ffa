"""Equal splits, balance aggregation and settlement suggestions.

Everything here is pure: callers pass in rows they already loaded (plain
dicts, as produced by ``app.serializers``) and get fresh values back.
Money is handled as Decimal with two places.
"""
import logging
from collections import deque
from datetime import date as date_type
from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel

from app.enums import ExpenseCategory, SplitType
from app.errors import ConsistencyError, PermissionDenied, ValidationError

logger = logging.getLogger("lfg")

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Balances within this distance of zero are treated as settled.
SETTLEMENT_EPSILON = Decimal("0.01")
SPLIT_TOLERANCE = Decimal("0.01")


class ParticipantBalance(BaseModel):
    participant_id: str
    total_paid: Decimal
    total_owed: Decimal
    net_balance: Decimal  # positive = owed money, negative = owes money


class Settlement(BaseModel):
    from_participant_id: str
    to_participant_id: str
    amount: Decimal


class ExpenseDraft(BaseModel):
    trip_id: str | None = None
    payer_id: str
    amount: Decimal
    description: str
    category: ExpenseCategory
    expense_date: date_type
    split_type: SplitType = SplitType.EQUAL
    amount_per_person: Decimal
    participants: list[str]


class SplitDraft(BaseModel):
    participant_id: str
    amount_owed: Decimal
    paid: bool = False


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def qround(value) -> Decimal:
    """Round to cents, half away from zero."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def equal_split_shares(amount, participant_ids: list[str]) -> dict[str, Decimal]:
    """Split ``amount`` evenly, handing leftover cents to the first members.

    The shares always add up to ``amount`` exactly: 100.01 over two people is
    50.01 and 50.00.
    """
    result: dict[str, Decimal] = {}
    count = len(participant_ids)
    if count == 0:
        return result

    total = int(qround(amount) / CENTS)
    base = total // count
    remainder = total - base * count
    for i, pid in enumerate(participant_ids):
        result[pid] = (base + (1 if i < remainder else 0)) * CENTS
    return result


def build_equal_split_expense(
    payer_id: str,
    amount,
    description: str,
    category,
    roster: list[str],
    participants: list[str] | None = None,
    trip_id: str | None = None,
    expense_date: date_type | None = None,
) -> tuple[ExpenseDraft, list[SplitDraft]]:
    """Build an expense and its equal-split rows without touching storage.

    ``roster`` is the trip's approved participants in join order. An empty or
    missing ``participants`` means everyone on the roster; otherwise the
    roster is filtered down to the requested ids, keeping roster order.
    """
    if payer_id not in roster:
        raise PermissionDenied("Only trip participants can add expenses")

    try:
        amount = to_decimal(amount)
    except ArithmeticError:
        raise ValidationError("Amount must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if qround(amount) != amount:
        raise ValidationError("Amount cannot have more than two decimal places")

    try:
        category = ExpenseCategory(category)
    except ValueError:
        raise ValidationError(f"Unknown expense category: {category}")

    if participants:
        wanted = set(participants)
        split_between = [pid for pid in roster if pid in wanted]
    else:
        split_between = list(roster)

    if not split_between:
        raise ValidationError("No participants to split between")

    shares = equal_split_shares(amount, split_between)

    expense = ExpenseDraft(
        trip_id=trip_id,
        payer_id=payer_id,
        amount=qround(amount),
        description=description,
        category=category,
        expense_date=expense_date or date_type.today(),
        split_type=SplitType.EQUAL,
        amount_per_person=qround(amount / len(split_between)),
        participants=split_between,
    )
    splits = [
        SplitDraft(
            participant_id=pid,
            amount_owed=shares[pid],
            # The payer fronted their own share already
            paid=pid == payer_id,
        )
        for pid in split_between
    ]
    return expense, splits


def check_split_totals(expenses: list[dict], splits: list[dict]) -> list[ConsistencyError]:
    """Report expenses whose splits do not add up to the expense amount."""
    totals: dict[str, Decimal] = {}
    for split in splits:
        eid = split["expense_id"]
        totals[eid] = totals.get(eid, ZERO) + to_decimal(split["amount_owed"])

    problems = []
    for expense in expenses:
        amount = to_decimal(expense["amount"])
        split_total = totals.get(expense["id"], ZERO)
        if abs(amount - split_total) > SPLIT_TOLERANCE:
            problems.append(ConsistencyError(expense["id"], amount, split_total))
    return problems


def compute_balances(
    expenses: list[dict],
    splits: list[dict],
    roster: list[str],
) -> list[ParticipantBalance]:
    """Compute paid, owed and net amounts for every roster member.

    Members with no expenses get an all-zero balance. Mismatched split
    totals are logged and otherwise ignored.
    """
    for problem in check_split_totals(expenses, splits):
        logger.warning(
            "Expense splits do not match amount",
            extra={"extra_data": {
                "expense_id": problem.expense_id,
                "amount": str(problem.amount),
                "split_total": str(problem.split_total),
            }},
        )

    paid: dict[str, Decimal] = {pid: ZERO for pid in roster}
    owed: dict[str, Decimal] = {pid: ZERO for pid in roster}

    for expense in expenses:
        payer = expense["payer_id"]
        if payer in paid:
            paid[payer] += to_decimal(expense["amount"])

    for split in splits:
        pid = split["participant_id"]
        if pid in owed:
            owed[pid] += to_decimal(split["amount_owed"])

    return [
        ParticipantBalance(
            participant_id=pid,
            total_paid=qround(paid[pid]),
            total_owed=qround(owed[pid]),
            net_balance=qround(paid[pid] - owed[pid]),
        )
        for pid in roster
    ]


def generate_settlements(
    balances: list[ParticipantBalance],
    epsilon: Decimal = SETTLEMENT_EPSILON,
) -> list[Settlement]:
    """Suggest payments that bring every balance back to zero.

    Greedy: the largest creditor is always matched with the largest debtor.
    This is not guaranteed to produce the fewest possible payments, but the
    output is stable for a given input order.
    """
    creditors = [[b.participant_id, b.net_balance] for b in balances if b.net_balance > epsilon]
    debtors = [[b.participant_id, b.net_balance] for b in balances if b.net_balance < -epsilon]

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1])

    creditors = deque(creditors)
    debtors = deque(debtors)

    settlements: list[Settlement] = []

    while creditors and debtors:
        creditor = creditors[0]
        debtor = debtors[0]

        amount = min(creditor[1], -debtor[1])
        if amount > epsilon:
            settlements.append(Settlement(
                from_participant_id=debtor[0],
                to_participant_id=creditor[0],
                amount=qround(amount),
            ))

        creditor[1] -= amount
        debtor[1] += amount

        if abs(creditor[1]) <= epsilon:
            creditors.popleft()
        if abs(debtor[1]) <= epsilon:
            debtors.popleft()

    return settlements
