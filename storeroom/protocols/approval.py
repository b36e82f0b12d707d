"""
Approval Protocols: who may approve a requisition, and how many times.

ApprovalDirectory is implemented by the host's user/role/department
directory. ApprovalPolicy turns the directory's answer into decisions the
workflow engine can use; it must be a pure function of its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storeroom.models import Requisition


@dataclass(frozen=True)
class ApprovalChain:
    """
    Configured approvers of a department.

    levels[0] holds the user ids allowed to approve at level 1,
    levels[1] (optional) those allowed at level 2.
    """

    department_id: int
    levels: tuple[frozenset[int], ...] = ()

    def approvers(self, level: int) -> frozenset[int]:
        if 1 <= level <= len(self.levels):
            return self.levels[level - 1]
        return frozenset()

    @property
    def has_second_level(self) -> bool:
        return bool(self.approvers(2))


@runtime_checkable
class ApprovalDirectory(Protocol):
    """Resolves a department's approval chain."""

    def approval_chain(self, department_id: int) -> ApprovalChain:
        """
        Args:
            department_id: Department of the requisition

        Returns:
            ApprovalChain (possibly with no levels)
        """
        ...


@runtime_checkable
class ApprovalPolicy(Protocol):
    """
    Decides who may act on a requisition and how many levels are needed.

    Evaluated fresh on every transition attempt. Must not cache
    authorization state nor have side effects.
    """

    def required_levels(self, requisition: Requisition) -> int:
        """Return 1 or 2."""
        ...

    def can_act(self, actor, requisition: Requisition, level: int) -> bool:
        """May actor approve/reject requisition at the given level?"""
        ...
