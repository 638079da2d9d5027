"""
Event Poster (``ledger_modules.posting.service``).

Responsibility
--------------
Translates committed business events (goods received, sale recorded,
payment recorded / corrected / deleted) into balanced journal entry
drafts and submits them to the kernel's ``JournalWriter``.

Architecture position
---------------------
**Modules layer.**  Uses ``RoleResolver`` for accounts, ``JournalWriter``
for persistence and the profiles in ``profiles.py`` for line mappings.

Failure policy
--------------
The business operation that produced the event has already happened.
The poster therefore never raises a ledger error back into it:

* A required role with no active account  -> ``PostingSkipped`` is logged
  as a warning and the outcome is SKIPPED.
* The synthesized entry fails validation   -> logged, outcome REJECTED.
* Nothing to book (draft, zero value)      -> outcome NOT_REQUIRED.

Database errors are not ledger errors and propagate to the caller's
transaction.  A SKIPPED or REJECTED outcome means the books now diverge
from the business record; ``PostingOutcome.books_diverge`` surfaces that.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import CorrectionOf, JournalEntryDraft, LineSpec
from ledger_kernel.domain.money import ZERO, round2, to_decimal
from ledger_kernel.domain.roles import AccountRole
from ledger_kernel.exceptions import (
    LedgerKernelError,
    PostingSkipped,
    RoleResolutionError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.services.journal_writer import JournalWriter
from ledger_kernel.services.role_resolver import RoleResolver

from ledger_modules.posting.events import (
    BusinessEvent,
    GoodsReceived,
    PaymentAmountCorrected,
    PaymentDeleted,
    PaymentRecorded,
    SaleItem,
    SaleRecorded,
)
from ledger_modules.posting.models import LedgerPostingStatus, PostingOutcome
from ledger_modules.posting.profiles import (
    GOODS_RECEIVED,
    PAYMENT_DECREASED,
    PAYMENT_DELETED,
    PAYMENT_INCREASED,
    PAYMENT_RECORDED,
    SALE_RECORDED,
    PostingProfile,
    Side,
)

logger = get_logger("modules.posting.service")

DRAFT_STATUS = "draft"


def payment_edit_reference(payment_id: str) -> str:
    return f"PAY-EDIT-{payment_id}"


def payment_delete_reference(payment_id: str) -> str:
    return f"PAY-DEL-{payment_id}"


class EventPoster:
    """
    Business event -> journal entry translator.

    Contract
    --------
    * Every public method returns a ``PostingOutcome`` and flushes at most
      one journal entry.
    * Never commits; the caller's transaction decides.
    """

    def __init__(
        self,
        session: Session,
        role_resolver: RoleResolver,
        clock: Clock | None = None,
        writer: JournalWriter | None = None,
    ):
        self._session = session
        self._roles = role_resolver
        self._clock = clock or SystemClock()
        self._writer = writer or JournalWriter(session, self._clock)
        self._accounts = AccountSelector(session)

    # =========================================================================
    # Public API
    # =========================================================================

    def post_event(self, event: BusinessEvent) -> PostingOutcome:
        """Dispatch any supported business event."""
        handlers = {
            GoodsReceived: self.goods_received,
            SaleRecorded: self.sale_recorded,
            PaymentRecorded: self.payment_recorded,
            PaymentAmountCorrected: self.payment_corrected,
            PaymentDeleted: self.payment_deleted,
        }
        handler = handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported business event: {type(event).__name__}")
        return handler(event)

    def goods_received(self, event: GoodsReceived) -> PostingOutcome:
        """Dr Inventory / Cr Accounts Payable for the value newly received."""
        total = round2(
            sum(
                (
                    to_decimal(item.quantity_received) * to_decimal(item.unit_price)
                    for item in event.items
                    if to_decimal(item.quantity_received) > 0
                ),
                ZERO,
            )
        )
        if total <= 0:
            return self._not_required(event.event_type, event.po_number, "nothing received")

        return self._post(
            GOODS_RECEIVED,
            event_type=event.event_type,
            reference=event.po_number,
            entry_date=event.received_on or self._clock.today(),
            actor_id=event.actor_id,
            amounts={"total": total},
        )

    def sale_recorded(self, event: SaleRecorded) -> PostingOutcome:
        """Revenue, receivable, tax and cost of sales for a finalized invoice."""
        grand_total = round2(event.grand_total)
        if (event.status or "").lower() == DRAFT_STATUS or grand_total <= 0:
            return self._not_required(
                event.event_type, event.invoice_number, "draft or zero-value invoice"
            )

        return self._post(
            SALE_RECORDED,
            event_type=event.event_type,
            reference=event.invoice_number,
            entry_date=event.invoice_date,
            actor_id=event.actor_id,
            amounts={
                "grand_total": grand_total,
                "sub_total": round2(event.sub_total),
                "tax": round2(event.tax_amount),
                "cogs": self._cost_of_sale(event.invoice_number, event.items),
            },
        )

    def payment_recorded(self, event: PaymentRecorded) -> PostingOutcome:
        """Dr Cash / Cr Accounts Receivable."""
        amount = round2(event.amount)
        if amount == 0:
            return self._not_required(event.event_type, event.invoice_number, "zero payment")

        return self._post(
            PAYMENT_RECORDED,
            event_type=event.event_type,
            reference=event.invoice_number,
            entry_date=event.payment_date,
            actor_id=event.actor_id,
            amounts={"amount": amount},
        )

    def payment_corrected(self, event: PaymentAmountCorrected) -> PostingOutcome:
        """Book the difference between the old and new payment amount."""
        delta = round2(event.new_amount) - round2(event.old_amount)
        reference = payment_edit_reference(event.payment_id)
        if delta == 0:
            return self._not_required(event.event_type, reference, "amount unchanged")

        profile = PAYMENT_INCREASED if delta > 0 else PAYMENT_DECREASED
        change = f"+{delta:.2f}" if delta > 0 else f"{delta:.2f}"
        return self._post(
            profile,
            event_type=event.event_type,
            reference=reference,
            entry_date=self._clock.today(),
            actor_id=event.actor_id,
            amounts={"delta": abs(delta)},
            description_args={"reference": event.invoice_number, "change": change},
            correction_of=event.original_entry_id,
        )

    def payment_deleted(self, event: PaymentDeleted) -> PostingOutcome:
        """Reverse a payment: Dr Accounts Receivable / Cr Cash."""
        amount = round2(event.amount)
        reference = payment_delete_reference(event.payment_id)
        if amount == 0:
            return self._not_required(event.event_type, reference, "zero payment")

        return self._post(
            PAYMENT_DELETED,
            event_type=event.event_type,
            reference=reference,
            entry_date=self._clock.today(),
            actor_id=event.actor_id,
            amounts={"amount": amount},
            description_args={
                "reference": event.invoice_number,
                "amount": f"{amount:.2f}",
            },
            correction_of=event.original_entry_id,
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _cost_of_sale(self, invoice_number: str, items: Iterable[SaleItem]) -> Decimal:
        total = ZERO
        for item in items:
            if item.unit_cost is None:
                logger.warning(
                    "sale_item_cost_unknown",
                    extra={
                        "invoice_number": invoice_number,
                        "product_id": item.product_id,
                    },
                )
                continue
            total += to_decimal(item.unit_cost) * to_decimal(item.quantity)
        return round2(total)

    def _not_required(
        self, event_type: str, reference: str | None, reason: str
    ) -> PostingOutcome:
        logger.info(
            "ledger_posting_not_required",
            extra={
                "event_type": event_type,
                "reference_number": reference,
                "reason": reason,
            },
        )
        return PostingOutcome(
            status=LedgerPostingStatus.NOT_REQUIRED,
            event_type=event_type,
            reference_number=reference,
            message=reason,
        )

    def _resolve_roles(
        self,
        event_type: str,
        roles: Iterable[AccountRole],
    ) -> dict[AccountRole, UUID]:
        """
        Map each role to an active account id.

        Raises:
            PostingSkipped: naming every role that did not resolve.
        """
        resolved: dict[AccountRole, UUID] = {}
        missing: list[str] = []
        for role in roles:
            try:
                binding = self._roles.resolve(role)
            except RoleResolutionError:
                missing.append(role.value)
                continue
            account = self._accounts.get_info(binding.account_id)
            if account is None or not account.is_active:
                missing.append(role.value)
                continue
            resolved[role] = account.id
        if missing:
            raise PostingSkipped(event_type, tuple(missing))
        return resolved

    def _build_lines(
        self,
        profile: PostingProfile,
        accounts: Mapping[AccountRole, UUID],
        amounts: Mapping[str, Decimal],
    ) -> tuple[LineSpec, ...]:
        lines = []
        for mapping in profile.lines:
            amount = amounts.get(mapping.amount_key, ZERO)
            if amount == 0:
                continue
            account_id = accounts[mapping.role]
            if mapping.side == Side.DEBIT:
                lines.append(LineSpec.dr(account_id, amount))
            else:
                lines.append(LineSpec.cr(account_id, amount))
        return tuple(lines)

    def _post(
        self,
        profile: PostingProfile,
        *,
        event_type: str,
        reference: str,
        entry_date: date,
        actor_id: UUID,
        amounts: Mapping[str, Decimal],
        description_args: Mapping[str, str] | None = None,
        correction_of: UUID | None = None,
    ) -> PostingOutcome:
        with LogContext.bind(
            event_type=event_type,
            reference_number=reference,
            actor_id=actor_id,
        ):
            try:
                accounts = self._resolve_roles(
                    event_type, profile.required_roles(amounts)
                )
            except PostingSkipped as exc:
                logger.warning(
                    "ledger_posting_skipped",
                    extra={
                        "profile": profile.name,
                        "missing_roles": list(exc.missing_roles),
                    },
                )
                return PostingOutcome(
                    status=LedgerPostingStatus.SKIPPED,
                    event_type=event_type,
                    reference_number=reference,
                    message=str(exc),
                    missing_roles=exc.missing_roles,
                )

            draft = JournalEntryDraft(
                entry_date=entry_date,
                description=profile.description.format(
                    **(description_args or {"reference": reference})
                ),
                lines=self._build_lines(profile, accounts, amounts),
                actor_id=actor_id,
                reference_number=reference,
                correction_of=(
                    CorrectionOf(correction_of) if correction_of is not None else None
                ),
            )

            try:
                entry = self._writer.post(draft)
            except LedgerKernelError as exc:
                logger.warning(
                    "ledger_posting_rejected",
                    extra={
                        "profile": profile.name,
                        "error_code": exc.code,
                        "reason": str(exc),
                    },
                )
                return PostingOutcome(
                    status=LedgerPostingStatus.REJECTED,
                    event_type=event_type,
                    reference_number=reference,
                    message=str(exc),
                )

            logger.info(
                "ledger_posting_completed",
                extra={"profile": profile.name, "entry_id": str(entry.id)},
            )
            return PostingOutcome(
                status=LedgerPostingStatus.POSTED,
                event_type=event_type,
                reference_number=reference,
                entry_id=entry.id,
            )
