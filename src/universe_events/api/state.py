from __future__ import annotations

from typing import Optional

from ..services import CalendarService, ServiceContext


class ApiState:
    """Process-wide service wiring, built on first use."""

    def __init__(self) -> None:
        self._context: Optional[ServiceContext] = None
        self._calendar: Optional[CalendarService] = None

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            self.use(ServiceContext())
        assert self._context is not None
        return self._context

    @property
    def calendar(self) -> CalendarService:
        if self._calendar is None:
            self.use(self.context)
        assert self._calendar is not None
        return self._calendar

    def use(self, context: ServiceContext) -> None:
        self._context = context
        self._calendar = CalendarService(context)

    def reset(self) -> None:
        self._context = None
        self._calendar = None


api_state = ApiState()
