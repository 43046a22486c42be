import asyncio
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .commands import classify
from .game import FrameOutcome, RoundState, RoundStateMachine

logger = logging.getLogger(__name__)

OutcomeSink = Callable[[FrameOutcome], None]


class RoundSession:
    """
    Owns the state of one round and processes keystrokes one at a time.

    Keystrokes are queued and a single consumer task applies them in arrival
    order, so a keystroke pressed while a guess is being looked up waits for
    that submission to finish instead of racing it.

        async with RoundSession("TABLE", machine, sink=ui) as session:
            await session.type_all(["T", "A", "B", "L", "E", "ENTER"])
    """

    def __init__(self, secret: str, machine: RoundStateMachine, sink: Optional[OutcomeSink] = None):
        self._state = RoundState.new(secret)
        self.machine = machine
        self.sink = sink
        self._queue: "asyncio.Queue[Tuple[str, asyncio.Future]]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def state(self) -> RoundState:
        return self._state

    async def __aenter__(self) -> "RoundSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def start(self):
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(self._run())

    def press(self, raw_key: str) -> "asyncio.Future[FrameOutcome]":
        if self._worker is None:
            raise RuntimeError("Session is not running; use it as 'async with' or call start().")
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((raw_key, future))
        return future

    async def type(self, raw_key: str) -> FrameOutcome:
        return await self.press(raw_key)

    async def type_all(self, raw_keys: Iterable[str]) -> List[FrameOutcome]:
        futures = [self.press(key) for key in raw_keys]
        return [await future for future in futures]

    async def close(self):
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

        while not self._queue.empty():
            _, future = self._queue.get_nowait()
            future.cancel()
            self._queue.task_done()

    async def _run(self):
        while True:
            raw_key, future = await self._queue.get()
            try:
                if future.cancelled():
                    continue
                try:
                    self._state, outcome = await self.machine.apply(self._state, classify(raw_key))
                    if self.sink is not None:
                        self.sink(outcome)
                except asyncio.CancelledError:
                    future.cancel()
                    raise
                except Exception as e:
                    logger.exception("Keystroke %r failed", raw_key)
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(outcome)
            finally:
                self._queue.task_done()
