"""
Requisition workflow: draft, submit, approve (and fulfill), reject, cancel.

Every transition locks the requisition row, checks the current status
against TRANSITIONS, asks the ApprovalPolicy where approvers are involved,
and appends a RequisitionEvent. Notifications are registered with
transaction.on_commit() and therefore never fire for a rolled back
transition.
"""

import logging

from django.db import transaction
from django.utils import timezone

from storeroom.adapters import get_approval_policy, get_item_catalog, get_notifier
from storeroom.conf import storeroom_settings
from storeroom.exceptions import RequisitionError, StockError
from storeroom.models.enums import (
    TRANSITIONS,
    AdjustmentType,
    RequestedForType,
    RequisitionAction,
    RequisitionStatus,
    Urgency,
)
from storeroom.models.location import Location
from storeroom.models.record import parse_money
from storeroom.models.requisition import Requisition, RequisitionEvent, RequisitionItem
from storeroom.services.locking import locked_transaction
from storeroom.services.movements import StockMovements
from storeroom.services.numbering import next_document_number

logger = logging.getLogger('storeroom')


# ══════════════════════════════════════════════════════════════
# Input validation (runs before any transaction opens)
# ══════════════════════════════════════════════════════════════


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _requisition_no(requisition) -> str:
    if isinstance(requisition, Requisition):
        return requisition.requisition_no
    return str(requisition)


def _require_actor(actor, requisition_no=None):
    if actor is None or not getattr(actor, 'is_authenticated', False):
        raise RequisitionError('UNAUTHORIZED', requisition_no=requisition_no)


def _clean_purpose(purpose) -> str:
    purpose = (purpose or '').strip()
    if not purpose:
        raise RequisitionError('INVALID_REQUISITION', field='purpose')
    return purpose


def _clean_urgency(urgency) -> str:
    try:
        return Urgency(urgency).value
    except ValueError:
        raise RequisitionError('INVALID_REQUISITION', field='urgency', value=str(urgency)) from None


def _clean_estimated_cost(value, line_no):
    if value is None or value == '':
        return None
    cost = parse_money(value)
    if cost is None:
        raise RequisitionError(
            'INVALID_REQUISITION',
            field='estimated_unit_cost',
            line_no=line_no,
            value=str(value),
        )
    return cost


def _clean_lines(items) -> list[dict]:
    """
    Validate requested lines.

    Args:
        items: [{"item_id": 7, "quantity": 3, "estimated_unit_cost"?: "1.50",
                 "source_location_id"?: 2}, ...]

    Returns:
        Normalized line dicts numbered from 1
    """
    if not items:
        raise RequisitionError('EMPTY_REQUISITION')

    lines = []
    for line_no, raw in enumerate(items, start=1):
        item_id = raw.get('item_id')
        quantity = raw.get('quantity')

        if not _is_positive_int(item_id):
            raise RequisitionError('ITEM_NOT_FOUND', item_id=item_id, line_no=line_no)
        if not _is_positive_int(quantity):
            raise RequisitionError(
                'INVALID_QUANTITY',
                item_id=item_id,
                line_no=line_no,
                requested=quantity,
            )

        lines.append({
            'line_no': line_no,
            'item_id': item_id,
            'quantity': quantity,
            'estimated_unit_cost': _clean_estimated_cost(raw.get('estimated_unit_cost'), line_no),
            'source_location_id': raw.get('source_location_id'),
        })

    if storeroom_settings.VALIDATE_ITEMS:
        known = get_item_catalog().get_items(sorted({line['item_id'] for line in lines}))
        for line in lines:
            if line['item_id'] not in known:
                raise RequisitionError('ITEM_NOT_FOUND', item_id=line['item_id'], line_no=line['line_no'])

    location_ids = {line['source_location_id'] for line in lines if line['source_location_id'] is not None}
    if location_ids:
        active = Location.objects.active().in_bulk(location_ids)
        for line in lines:
            location_id = line['source_location_id']
            if location_id is not None and location_id not in active:
                raise RequisitionError(
                    'LOCATION_NOT_FOUND',
                    location_id=location_id,
                    line_no=line['line_no'],
                )

    return lines


# ══════════════════════════════════════════════════════════════
# Helpers used inside the transaction
# ══════════════════════════════════════════════════════════════


def _lock(requisition_no: str) -> Requisition:
    try:
        return Requisition.objects.select_for_update().get(requisition_no=requisition_no)
    except Requisition.DoesNotExist:
        raise RequisitionError('REQUISITION_NOT_FOUND', requisition_no=requisition_no) from None


def _check_transition(requisition: Requisition, to_status: str, action: str):
    if to_status not in TRANSITIONS.get(RequisitionStatus(requisition.status), ()):
        raise RequisitionError(
            'INVALID_STATE',
            requisition_no=requisition.requisition_no,
            status=requisition.status,
            action=action,
        )


def _check_requester(requisition: Requisition, actor, action: str):
    if requisition.requested_by_id != actor.pk:
        raise RequisitionError(
            'UNAUTHORIZED',
            requisition_no=requisition.requisition_no,
            action=action,
        )


def _create_lines(requisition: Requisition, lines: list[dict]):
    for line in lines:
        RequisitionItem.objects.create(requisition=requisition, **line)


def _record_event(requisition, action, from_status, actor, level=None, comment='', **metadata):
    return RequisitionEvent.objects.create(
        requisition=requisition,
        action=action,
        from_status=from_status or '',
        to_status=requisition.status,
        level=level,
        actor=actor if getattr(actor, 'pk', None) else None,
        comment=comment or '',
        metadata=metadata,
    )


def _notify_on_commit(event: str, requisition: Requisition):
    """Queue a notification for after commit. Failures are logged, never raised."""

    def send():
        try:
            get_notifier().notify(event, requisition)
        except Exception:
            logger.warning(
                "requisition.notify_failed",
                extra={"event": event, "requisition_no": requisition.requisition_no},
                exc_info=True,
            )

    transaction.on_commit(send)


class RequisitionWorkflow:
    """State-changing requisition methods."""

    @classmethod
    def create(cls, actor, department_id, purpose, items,
               requested_for_type=RequestedForType.DEPARTMENT, requested_for=None,
               urgency=Urgency.NORMAL, comments=''):
        """
        Create a draft requisition numbered REQ-YYYY-NNNN.

        Args:
            actor: Requesting user (becomes requested_by)
            department_id: Requesting department
            purpose: Why the items are needed (required)
            items: Line dicts, see _clean_lines()
            requested_for_type: 'department' or 'personal'
            requested_for: User the items are for (personal only)
            urgency: low / normal / high / urgent

        Raises:
            RequisitionError('INVALID_REQUISITION'): bad header field
            RequisitionError('EMPTY_REQUISITION'): no lines
            RequisitionError('INVALID_QUANTITY' / 'ITEM_NOT_FOUND' / 'LOCATION_NOT_FOUND'): bad line
        """
        _require_actor(actor)
        if not _is_positive_int(department_id):
            raise RequisitionError('INVALID_REQUISITION', field='department_id', value=department_id)
        purpose = _clean_purpose(purpose)
        urgency = _clean_urgency(urgency)

        try:
            requested_for_type = RequestedForType(requested_for_type).value
        except ValueError:
            raise RequisitionError(
                'INVALID_REQUISITION', field='requested_for_type', value=str(requested_for_type),
            ) from None
        if (requested_for_type == RequestedForType.PERSONAL) != (requested_for is not None):
            raise RequisitionError(
                'INVALID_REQUISITION',
                field='requested_for',
                requested_for_type=requested_for_type,
            )

        lines = _clean_lines(items)

        with locked_transaction(RequisitionError):
            requisition = Requisition.objects.create(
                requisition_no=next_document_number(
                    storeroom_settings.REQUISITION_PREFIX,
                    storeroom_settings.REQUISITION_NUMBER_WIDTH,
                ),
                department_id=department_id,
                requested_by=actor,
                requested_for_type=requested_for_type,
                requested_for=requested_for,
                purpose=purpose,
                urgency=urgency,
                comments=comments or '',
            )
            _create_lines(requisition, lines)
            _record_event(requisition, RequisitionAction.CREATED, '', actor, lines=len(lines))

        logger.info(
            "requisition.created",
            extra={
                "requisition_no": requisition.requisition_no,
                "department_id": department_id,
                "lines": len(lines),
            },
        )
        return requisition

    @classmethod
    def update_draft(cls, requisition, actor, purpose=None, urgency=None,
                     comments=None, items=None):
        """
        Edit a draft. Only given fields change; items replaces every line.

        Raises:
            RequisitionError('INVALID_STATE'): not a draft
            RequisitionError('UNAUTHORIZED'): actor is not the requester
        """
        requisition_no = _requisition_no(requisition)
        _require_actor(actor, requisition_no)

        changes = {}
        if purpose is not None:
            changes['purpose'] = _clean_purpose(purpose)
        if urgency is not None:
            changes['urgency'] = _clean_urgency(urgency)
        if comments is not None:
            changes['comments'] = comments
        lines = _clean_lines(items) if items is not None else None

        with locked_transaction(RequisitionError, requisition_no=requisition_no):
            req = _lock(requisition_no)
            if req.status != RequisitionStatus.DRAFT:
                raise RequisitionError(
                    'INVALID_STATE',
                    requisition_no=requisition_no,
                    status=req.status,
                    action='update',
                )
            _check_requester(req, actor, 'update')

            for field_name, value in changes.items():
                setattr(req, field_name, value)
            req.save()

            if lines is not None:
                req.items.all().delete()
                _create_lines(req, lines)

            _record_event(
                req,
                RequisitionAction.UPDATED,
                req.status,
                actor,
                fields=sorted(changes) + (['items'] if lines is not None else []),
            )

        return req

    @classmethod
    def submit(cls, requisition, actor):
        """
        Send a draft for approval. Lines are frozen from here on.

        Lines without an estimated unit cost get the catalog's current
        unit cost (when it has one).

        Raises:
            RequisitionError('INVALID_STATE'): not a draft
            RequisitionError('UNAUTHORIZED'): actor is not the requester
            RequisitionError('EMPTY_REQUISITION'): no lines
        """
        requisition_no = _requisition_no(requisition)
        _require_actor(actor, requisition_no)

        with locked_transaction(RequisitionError, requisition_no=requisition_no):
            req = _lock(requisition_no)
            _check_transition(req, RequisitionStatus.PENDING, 'submit')
            _check_requester(req, actor, 'submit')

            lines = list(req.items.all())
            if not lines:
                raise RequisitionError('EMPTY_REQUISITION', requisition_no=requisition_no)

            # Snapshot while still draft; lines are read-only once pending
            missing = [line for line in lines if line.estimated_unit_cost is None]
            if missing:
                catalog = get_item_catalog().get_items(sorted({line.item_id for line in missing}))
                for line in missing:
                    info = catalog.get(line.item_id)
                    if info is not None and info.unit_cost is not None:
                        line.estimated_unit_cost = info.unit_cost
                        line.save(update_fields=['estimated_unit_cost'])

            req.status = RequisitionStatus.PENDING
            req.submitted_at = timezone.now()
            req.save(update_fields=['status', 'submitted_at', 'updated_at'])

            _record_event(req, RequisitionAction.SUBMITTED, RequisitionStatus.DRAFT, actor)
            _notify_on_commit(RequisitionAction.SUBMITTED, req)

        logger.info(
            "requisition.submitted",
            extra={"requisition_no": requisition_no, "lines": len(lines)},
        )
        return req

    @classmethod
    def approve(cls, requisition, actor, comment=''):
        """
        Record an approval at the current level.

        When this fills the last required level the requisition becomes
        approved and is fulfilled in the same transaction: every line is
        debited with adjust('remove') from its source location (or the
        department's default location). Any failure, e.g.
        INSUFFICIENT_STOCK on one line, rolls everything back and the
        requisition stays pending with its previous approvals.

        Returns:
            The requisition, pending (more levels needed) or fulfilled

        Raises:
            RequisitionError('INVALID_STATE'): not pending
            RequisitionError('UNAUTHORIZED'): policy refuses actor at this level
            RequisitionError('NO_FULFILLMENT_LOCATION'): no source and no default location
            StockError('INSUFFICIENT_STOCK'): data carries requisition_no and line_no
        """
        requisition_no = _requisition_no(requisition)
        _require_actor(actor, requisition_no)
        policy = get_approval_policy()

        with locked_transaction(RequisitionError, requisition_no=requisition_no):
            req = _lock(requisition_no)
            _check_transition(req, RequisitionStatus.APPROVED, 'approve')

            level = req.current_level
            if not policy.can_act(actor, req, level):
                raise RequisitionError(
                    'UNAUTHORIZED',
                    requisition_no=requisition_no,
                    action='approve',
                    level=level,
                )

            now = timezone.now()
            if level == 1:
                req.approved_by_l1 = actor
                req.approved_by_l1_at = now
            else:
                req.approved_by_l2 = actor
                req.approved_by_l2_at = now

            if comment:
                note = f"{actor.get_username()}: {comment}"
                req.comments = f"{req.comments}\n{note}" if req.comments else note

            required = policy.required_levels(req)
            if level >= required:
                req.status = RequisitionStatus.APPROVED
            req.save()

            _record_event(
                req,
                RequisitionAction.APPROVED,
                RequisitionStatus.PENDING,
                actor,
                level=level,
                comment=comment,
                required_levels=required,
            )

            if req.status == RequisitionStatus.APPROVED:
                cls._fulfill(req, actor)
                _notify_on_commit(RequisitionAction.FULFILLED, req)
            else:
                _notify_on_commit(RequisitionAction.APPROVED, req)

        logger.info(
            "requisition.approved",
            extra={
                "requisition_no": requisition_no,
                "level": level,
                "required_levels": required,
                "status": req.status,
            },
        )
        return req

    @classmethod
    def _fulfill(cls, req: Requisition, actor):
        """Debit every line and mark fulfilled. Caller holds the requisition lock."""
        default_location = None
        debits = []
        for line in req.items.select_related('source_location'):
            location = line.source_location
            if location is None:
                if default_location is None:
                    default_location = Location.objects.default_for_department(req.department_id)
                if default_location is None:
                    raise RequisitionError(
                        'NO_FULFILLMENT_LOCATION',
                        requisition_no=req.requisition_no,
                        department_id=req.department_id,
                        line_no=line.line_no,
                    )
                location = default_location
            debits.append((location.pk, line.item_id, line))

        # Global lock order: location, then item
        for location_id, item_id, line in sorted(debits, key=lambda d: (d[0], d[1], d[2].line_no)):
            try:
                StockMovements.adjust(
                    item_id,
                    location_id,
                    line.quantity,
                    AdjustmentType.REMOVE,
                    reason=f"Requisition {req.requisition_no}",
                    user=actor,
                    reference=req.requisition_no,
                )
            except StockError as exc:
                exc.data.update(requisition_no=req.requisition_no, line_no=line.line_no)
                raise

        req.status = RequisitionStatus.FULFILLED
        req.fulfilled_at = timezone.now()
        req.save(update_fields=['status', 'fulfilled_at', 'updated_at'])
        _record_event(req, RequisitionAction.FULFILLED, RequisitionStatus.APPROVED, actor, lines=len(debits))

        logger.info(
            "requisition.fulfilled",
            extra={"requisition_no": req.requisition_no, "lines": len(debits)},
        )

    @classmethod
    def reject(cls, requisition, actor, reason=''):
        """
        Reject a pending requisition. Same authorization as approve().

        Raises:
            RequisitionError('INVALID_STATE'): not pending
            RequisitionError('UNAUTHORIZED'): policy refuses actor at this level
        """
        requisition_no = _requisition_no(requisition)
        _require_actor(actor, requisition_no)
        policy = get_approval_policy()

        with locked_transaction(RequisitionError, requisition_no=requisition_no):
            req = _lock(requisition_no)
            _check_transition(req, RequisitionStatus.REJECTED, 'reject')

            level = req.current_level
            if not policy.can_act(actor, req, level):
                raise RequisitionError(
                    'UNAUTHORIZED',
                    requisition_no=requisition_no,
                    action='reject',
                    level=level,
                )

            req.status = RequisitionStatus.REJECTED
            req.rejected_by = actor
            req.rejected_at = timezone.now()
            req.rejection_reason = reason or ''
            req.save()

            _record_event(req, RequisitionAction.REJECTED, RequisitionStatus.PENDING, actor,
                          level=level, comment=reason)
            _notify_on_commit(RequisitionAction.REJECTED, req)

        logger.info(
            "requisition.rejected",
            extra={"requisition_no": requisition_no, "level": level},
        )
        return req

    @classmethod
    def cancel(cls, requisition, actor):
        """
        Withdraw a draft or pending requisition. Requester only.

        Raises:
            RequisitionError('INVALID_STATE'): not draft/pending
            RequisitionError('UNAUTHORIZED'): actor is not the requester
        """
        requisition_no = _requisition_no(requisition)
        _require_actor(actor, requisition_no)

        with locked_transaction(RequisitionError, requisition_no=requisition_no):
            req = _lock(requisition_no)
            if req.status not in (RequisitionStatus.DRAFT, RequisitionStatus.PENDING):
                raise RequisitionError(
                    'INVALID_STATE',
                    requisition_no=requisition_no,
                    status=req.status,
                    action='cancel',
                )
            _check_requester(req, actor, 'cancel')

            from_status = req.status
            req.status = RequisitionStatus.CANCELLED
            req.cancelled_at = timezone.now()
            req.save(update_fields=['status', 'cancelled_at', 'updated_at'])

            _record_event(req, RequisitionAction.CANCELLED, from_status, actor)
            _notify_on_commit(RequisitionAction.CANCELLED, req)

        logger.info("requisition.cancelled", extra={"requisition_no": requisition_no})
        return req


class RequisitionQueries:
    """Read-only requisition methods."""

    @classmethod
    def get(cls, requisition_no: str) -> Requisition:
        """
        Raises:
            RequisitionError('REQUISITION_NOT_FOUND')
        """
        try:
            return Requisition.objects.prefetch_related('items').get(requisition_no=requisition_no)
        except Requisition.DoesNotExist:
            raise RequisitionError('REQUISITION_NOT_FOUND', requisition_no=requisition_no) from None

    @classmethod
    def list_requisitions(cls, status=None, department_id=None, requested_by=None):
        qs = Requisition.objects.select_related('requested_by')

        if status:
            qs = qs.filter(status=status)

        if department_id is not None:
            qs = qs.filter(department_id=department_id)

        if requested_by is not None:
            qs = qs.filter(requested_by=requested_by)

        return qs

    @classmethod
    def awaiting_approval(cls, user) -> list[Requisition]:
        """Pending requisitions the user may approve or reject right now."""
        policy = get_approval_policy()
        return [
            req for req in Requisition.objects.filter(status=RequisitionStatus.PENDING)
            if policy.can_act(user, req, req.current_level)
        ]

    @classmethod
    def history(cls, requisition_no: str):
        return RequisitionEvent.objects.filter(
            requisition__requisition_no=requisition_no,
        ).select_related('actor')
