"""Test doubles shared by the orchestrator and API tests."""
import asyncio

from raillovable.events import EventPublisher
from raillovable.llm.base import Cancelled


LANDING_PAGE_REPLY = (
    "Here you go:\n"
    "```tsx:App.tsx\n"
    "export default function App(){return <div/>}\n"
    "```"
)


class StubGateway:
    """Gateway double: canned reply or error, optionally held until released."""

    def __init__(self, reply: str = "", error: Exception = None, block: bool = False):
        self.reply = reply
        self.error = error
        self.block = block
        self.calls = []
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, history, config, cancel):
        self.calls.append(list(history))
        self.started.set()
        if self.block:
            released = asyncio.ensure_future(self.release.wait())
            cancelled = asyncio.ensure_future(cancel.wait())
            done, pending = await asyncio.wait(
                {released, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()
            if cancelled in done:
                raise Cancelled()
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingPublisher(EventPublisher):
    """Publisher that remembers every event it was asked to send."""

    def __init__(self):
        super().__init__()
        self.events = []
        self.on_publish = None
        self.closed = []

    async def publish(self, project_id, event_type, message, turn_id, data=None):
        self.events.append((project_id, event_type.value, message, turn_id))
        if self.on_publish is not None:
            self.on_publish(project_id, event_type)
        await super().publish(project_id, event_type, message, turn_id, data)

    def types(self, project_id=None):
        return [e[1] for e in self.events if project_id is None or e[0] == project_id]

    async def close_all(self, project_id):
        self.closed.append(project_id)
        await super().close_all(project_id)
