"""
Property-based tests for the ledger's accounting invariants.

Verifies, for arbitrary sequences of postings:
- Every accepted entry balances at cent precision, including sub-cent lines
- The trial balance always balances
- The balance sheet always satisfies Assets = Liabilities + Equity
- The validator only ever raises ValidationError
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from ledger_kernel.domain.dtos import AccountInfo, JournalEntryDraft, LineSpec
from ledger_kernel.domain.validation import validate_entry
from ledger_kernel.exceptions import ValidationError

# Three places so lines carry sub-cent remainders; the cap keeps SQLite's
# float sums well inside the nine-place result scale.
AMOUNTS = st.decimals(
    min_value=Decimal("0.010"),
    max_value=Decimal("1000"),
    places=3,
    allow_nan=False,
    allow_infinity=False,
)
ENTRY_DATES = st.dates(min_value=date(2024, 1, 1), max_value=date(2024, 12, 31))

DB_SETTINGS = settings(
    max_examples=25,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


@st.composite
def balanced_lines(draw, account_count: int):
    """
    One credit line per drawn amount, with its debit split across two
    accounts at sub-cent precision.  Debits and credits agree exactly.
    """
    amounts = draw(st.lists(AMOUNTS, min_size=1, max_size=3))
    index = st.integers(min_value=0, max_value=account_count - 1)
    lines = []
    for amount in amounts:
        first = draw(
            st.decimals(
                min_value=Decimal("0.001"),
                max_value=amount - Decimal("0.001"),
                places=3,
            )
        )
        lines.append((draw(index), first, "debit"))
        lines.append((draw(index), amount - first, "debit"))
        lines.append((draw(index), amount, "credit"))
    return draw(st.permutations(lines))


class TestPostingInvariants:
    @DB_SETTINGS
    @given(entries=st.lists(st.tuples(ENTRY_DATES, balanced_lines(7)), min_size=1, max_size=5))
    def test_reports_stay_balanced(self, ledger, writer, system_accounts, test_actor_id, entries):
        accounts = sorted(system_accounts.values(), key=str)
        for entry_date, lines in entries:
            draft = JournalEntryDraft(
                entry_date=entry_date,
                description="Generated entry",
                lines=tuple(
                    LineSpec.dr(accounts[i], amount)
                    if side == "debit"
                    else LineSpec.cr(accounts[i], amount)
                    for i, amount, side in lines
                ),
                actor_id=test_actor_id,
            )
            entry = writer.post(draft)
            assert entry.is_balanced

        trial_balance = ledger.get_trial_balance()
        assert trial_balance.grand_total_debit == trial_balance.grand_total_credit

        as_of = max(d for d, _ in entries)
        balance_sheet = ledger.get_balance_sheet(as_of)
        assert balance_sheet.total_assets == balance_sheet.total_liabilities_and_equity


RAW_AMOUNTS = st.one_of(
    st.none(),
    st.decimals(
        min_value=Decimal("-50"),
        max_value=Decimal("50"),
        places=3,
        allow_nan=False,
        allow_infinity=False,
    ),
    st.sampled_from(["", "abc", "1e3", "0"]),
)

KNOWN = [
    AccountInfo(id=uuid4(), name=f"A{i}", code=str(i), account_type="asset", is_active=i != 2)
    for i in range(4)
]


class TestValidatorFuzzing:
    @settings(max_examples=200, deadline=None)
    @given(
        lines=st.lists(
            st.tuples(st.sampled_from(KNOWN + [None]), RAW_AMOUNTS, RAW_AMOUNTS),
            max_size=6,
        )
    )
    def test_accepts_only_balanced_non_zero(self, lines):
        draft = JournalEntryDraft(
            entry_date=date(2024, 1, 15),
            description="Fuzzed",
            lines=tuple(
                LineSpec(
                    account_id=account.id if account is not None else uuid4(),
                    debit=debit,
                    credit=credit,
                )
                for account, debit, credit in lines
            ),
            actor_id=uuid4(),
        )
        try:
            result = validate_entry(draft, {a.id: a for a in KNOWN})
        except ValidationError:
            return
        assert result.total_debit == result.total_credit
        assert result.total_debit > 0
        assert len(result.lines) >= 2
        for line in result.lines:
            assert (line.debit > 0) != (line.credit > 0)
            assert line.debit >= 0 and line.credit >= 0
