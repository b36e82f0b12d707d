"""
Settings Approval Directory: approval chains read from Django settings.

Settings:
    STOREROOM = {
        "APPROVAL_CHAINS": {
            12: [[4, 5], [9]],      # department 12: L1 = 4 or 5, L2 = 9
            "7": [[4]],             # string keys work too (env/JSON config)
            "default": [[1]],       # departments without their own chain
        },
    }

Chains are re-read on every call, so changing settings takes effect
immediately.
"""

from __future__ import annotations

from storeroom.conf import storeroom_settings
from storeroom.protocols.approval import ApprovalChain


class SettingsApprovalDirectory:
    """ApprovalDirectory backed by STOREROOM['APPROVAL_CHAINS']."""

    def approval_chain(self, department_id: int) -> ApprovalChain:
        chains = storeroom_settings.APPROVAL_CHAINS or {}
        raw = chains.get(department_id)
        if raw is None:
            raw = chains.get(str(department_id))
        if raw is None:
            raw = chains.get('default', [])

        levels = tuple(
            frozenset(int(user_id) for user_id in level)
            for level in raw[:2]
        )
        return ApprovalChain(department_id=department_id, levels=levels)
