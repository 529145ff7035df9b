"""Application services orchestrating the ledger, the clock and the proposal helper."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext
from .proposals import ProposalError, ProposalResult, ProposalService

__all__ = ["CalendarService", "ProposalError", "ProposalResult", "ProposalService", "ServiceContext"]
