from collections.abc import Callable
from typing import Optional

import anyio

from src.platform.exception.exceptions import (
    LimitExceededError,
    LimitReachedError,
    PoolClosedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.participant.attempt_strategy import AttemptStrategy
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.enum.pool_state import PoolState
from src.service.marketplace.domain.enum.participant_role import ParticipantRole
from src.service.marketplace.domain.enum.runner_state import RunnerState


class ParticipantRunner:
    """
    Periodic release/purchase loop of one vendor or customer.

    Lifecycle: CREATED -> RUNNING -> (STOPPING) -> STOPPED | COMPLETED

    - Waits while the pool is unconfigured
    - Completes once the participant's lifetime cap is reached, or when the
      controller answers LimitReached/LimitExceeded
    - Logs any other error and retries after `error_backoff` seconds
    - stop() is observed at every iteration and interrupts sleeps; a
      controller call already in flight runs to completion
    """

    def __init__(
        self,
        *,
        strategy: AttemptStrategy,
        controller: TicketPoolController,
        error_backoff: float = 1.0,
        on_finished: Optional[Callable[['ParticipantRunner'], None]] = None,
    ) -> None:
        self.strategy = strategy
        self.controller = controller
        self.error_backoff = error_backoff
        self.on_finished = on_finished
        self._state = RunnerState.CREATED
        self._stop_event = anyio.Event()
        self._finished = anyio.Event()
        self._completion_reason: Optional[str] = None

    @property
    def participant_id(self) -> str:
        return self.strategy.participant_id

    @property
    def role(self) -> ParticipantRole:
        return self.strategy.role

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def completion_reason(self) -> Optional[str]:
        return self._completion_reason

    @property
    def is_finished(self) -> bool:
        return self._state in (RunnerState.STOPPED, RunnerState.COMPLETED)

    def stop(self) -> None:
        if self.is_finished:
            return
        if self._state == RunnerState.CREATED:
            # Never scheduled; run() will return immediately
            self._finish(RunnerState.STOPPED)
            return
        self._state = RunnerState.STOPPING
        self._stop_event.set()

    async def wait_finished(self) -> None:
        await self._finished.wait()

    async def run(self) -> None:
        if self._state != RunnerState.CREATED:
            return
        self._state = RunnerState.RUNNING
        Logger.base.info(
            f'▶️ [RUNNER] {self.role} {self.strategy.participant_name} started '
            f'(interval={self.strategy.interval}s)'
        )
        try:
            await self._loop()
        finally:
            self._finish(
                RunnerState.COMPLETED if self._completion_reason is not None else RunnerState.STOPPED
            )

    async def _loop(self) -> None:
        strategy = self.strategy
        while not self._stop_event.is_set():
            status = self.controller.get_status()
            if status.state == PoolState.SHUT_DOWN:
                return
            if not status.configured:
                await self._pause(strategy.interval)
                continue

            if strategy.cap_reached():
                self._complete('lifetime cap reached')
                return

            size = strategy.next_attempt_size(status)
            if size <= 0:
                # Pool full (vendor) or empty (customer)
                await self._pause(strategy.interval)
                continue

            try:
                await strategy.attempt(controller=self.controller, size=size)
            except (LimitReachedError, LimitExceededError) as e:
                self._complete(e.message)
                return
            except PoolClosedError:
                return
            except Exception as e:
                Logger.base.warning(
                    f'⚠️ [RUNNER] {self.role} {strategy.participant_name} attempt failed: '
                    f'{type(e).__name__}: {e}; retrying in {self.error_backoff}s'
                )
                await self._pause(self.error_backoff)
                continue

            if strategy.cap_reached():
                self._complete('lifetime cap reached')
                return
            await self._pause(strategy.interval)

    async def _pause(self, seconds: float) -> None:
        with anyio.move_on_after(seconds):
            await self._stop_event.wait()

    def _complete(self, reason: str) -> None:
        self._completion_reason = reason
        Logger.base.info(
            f'🏁 [RUNNER] {self.role} {self.strategy.participant_name} completed: {reason}'
        )

    def _finish(self, state: RunnerState) -> None:
        self._state = state
        self._finished.set()
        if state == RunnerState.STOPPED:
            Logger.base.info(f'⏹️ [RUNNER] {self.role} {self.strategy.participant_name} stopped')
        if self.on_finished is not None:
            self.on_finished(self)
