"""
Approval policy: how many levels a requisition needs and who may fill them.

The default policy reads the department's chain from the configured
ApprovalDirectory:

- two levels when the chain defines level-2 approvers, unless the
  requisition's urgency is listed in STOREROOM['SINGLE_LEVEL_URGENCIES']
- an actor may act at a level when listed in that level of the chain, or
  when holding the 'storeroom.approve_requisition' permission
- nobody approves both levels of the same requisition
"""

from __future__ import annotations

from storeroom.conf import storeroom_settings
from storeroom.protocols.approval import ApprovalDirectory

APPROVE_PERMISSION = 'storeroom.approve_requisition'


class ChainApprovalPolicy:
    """ApprovalPolicy driven by the department approval chain."""

    def __init__(self, directory: ApprovalDirectory | None = None):
        self._directory = directory

    @property
    def directory(self) -> ApprovalDirectory:
        if self._directory is not None:
            return self._directory
        from storeroom.adapters import get_approval_directory
        return get_approval_directory()

    def required_levels(self, requisition) -> int:
        chain = self.directory.approval_chain(requisition.department_id)
        if not chain.has_second_level:
            return 1
        if requisition.urgency in tuple(storeroom_settings.SINGLE_LEVEL_URGENCIES):
            return 1
        return 2

    def can_act(self, actor, requisition, level: int) -> bool:
        if actor is None or not getattr(actor, 'is_authenticated', False) or not actor.is_active:
            return False
        if level not in (1, 2):
            return False
        if level == 2 and requisition.approved_by_l1_id == actor.pk:
            return False

        chain = self.directory.approval_chain(requisition.department_id)
        if actor.pk in chain.approvers(level):
            return True
        return actor.has_perm(APPROVE_PERMISSION)
