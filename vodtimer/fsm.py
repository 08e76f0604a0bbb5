from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from vodtimer.api.models import TimerStatus


class TimerFSM(StateMachine):
    """Status machine for the countdown.

    Only guards which status changes are legal; queue position and remaining
    time are owned by `TimerEngine`.
    - idle -> running (run) -> paused (halt) -> running ...
    - any -> idle (reload) when a new queue is loaded
    - running/paused/finished -> idle (rewind)
    - idle/running/paused -> running (advance) or finished (finish)
    """

    idle = State(TimerStatus.idle.value, value=TimerStatus.idle.value, initial=True)
    running = State(TimerStatus.running.value, value=TimerStatus.running.value)
    paused = State(TimerStatus.paused.value, value=TimerStatus.paused.value)
    # Not final: loading a new queue leaves it.
    finished = State(TimerStatus.finished.value, value=TimerStatus.finished.value)

    reload = idle.to.itself() | running.to(idle) | paused.to(idle) | finished.to(idle)
    run = idle.to(running) | paused.to(running)
    halt = running.to(paused)
    rewind = running.to(idle) | paused.to(idle) | finished.to(idle)
    advance = idle.to(running) | paused.to(running) | running.to.itself()
    finish = idle.to(finished) | running.to(finished) | paused.to(finished)

    @property
    def status(self) -> TimerStatus:
        return TimerStatus(str(self.current_state.value))

    def try_send(self, event: str) -> bool:
        """Fire `event` if the current state allows it; report whether it fired."""

        try:
            self.send(event)
        except TransitionNotAllowed:
            return False
        return True
