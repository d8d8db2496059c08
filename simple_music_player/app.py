"""Main Simple Music Player class."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any, TypeVar, cast
from uuid import uuid4

from mashumaro.exceptions import InvalidFieldValue, MissingField

from simple_music_player.constants import LOGGER_NAME, VERBOSE_LOG_LEVEL
from simple_music_player.controllers.config import ConfigController
from simple_music_player.controllers.interrupts import InterruptGate
from simple_music_player.controllers.library import MediaLibraryController
from simple_music_player.controllers.playback import PlaybackController
from simple_music_player.helpers.api import APICommandHandler, api_command, parse_arguments
from simple_music_player.models.enums import EventType
from simple_music_player.models.errors import InvalidCommand
from simple_music_player.models.event import PlayerEvent

if TYPE_CHECKING:
    from simple_music_player.models.config import PlayerConfig
    from simple_music_player.models.engine import PlaybackEngine

EventCallBackType = (
    Callable[[PlayerEvent], None] | Callable[[PlayerEvent], Coroutine[Any, Any, None]]
)
EventSubscriptionType = tuple[EventCallBackType, tuple[EventType, ...] | None]
EngineFactory = Callable[["PlayerConfig"], "PlaybackEngine"]

LOGGER = logging.getLogger(LOGGER_NAME)

_R = TypeVar("_R")


class SimpleMusicPlayer:
    """Main SimpleMusicPlayer object, hosting the controllers and the event bus."""

    loop: asyncio.AbstractEventLoop
    config: ConfigController
    library: MediaLibraryController
    playback: PlaybackController
    interrupts: InterruptGate

    def __init__(
        self,
        storage_path: str,
        engine_factory: EngineFactory,
        config_overrides: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the SimpleMusicPlayer."""
        self.storage_path = storage_path
        self.engine_factory = engine_factory
        self.config_overrides = config_overrides or {}
        # we dynamically register command handlers which can be consumed by the apis
        self.command_handlers: dict[str, APICommandHandler] = {}
        self._subscribers: list[EventSubscriptionType] = []
        self._tracked_tasks: dict[str, asyncio.Task[Any]] = {}
        self._tracked_timers: dict[str, asyncio.TimerHandle] = {}
        self.closing = False

    async def start(self) -> None:
        """Start running the player."""
        self.loop = asyncio.get_running_loop()
        self.loop_thread_id = threading.get_ident()
        self.closing = False
        # setup config controller first and fetch important config values
        self.config = ConfigController(self)
        await self.config.setup()
        LOGGER.info("Starting Simple Music Player (library: %s)", self.config.values.library_path)
        self.library = MediaLibraryController(self)
        self.playback = PlaybackController(self, self.engine_factory(self.config.values))
        self.interrupts = InterruptGate(self)
        await self.library.setup()
        await self.playback.setup()
        await self.interrupts.setup()
        self._register_api_commands()

    async def stop(self) -> None:
        """Stop running the player, this forces a reset of the playback."""
        LOGGER.info("Stop called, cleaning up...")
        self.signal_event(EventType.SHUTDOWN)
        self.closing = True
        for handle in self._tracked_timers.values():
            handle.cancel()
        self._tracked_timers.clear()
        # stop core controllers
        await self.interrupts.close()
        await self.playback.close()
        await self.library.close()
        await self.config.close()
        # cancel all remaining tasks
        for task in list(self._tracked_tasks.values()):
            task.cancel()
        self.command_handlers.clear()

    @api_command("info")
    def get_info(self) -> dict[str, Any]:
        """Return basic info about this player."""
        return {
            "storage_path": self.storage_path,
            "library_path": self.config.values.library_path,
            "commands": sorted(self.command_handlers),
        }

    def signal_event(self, event: EventType, data: Any = None) -> None:
        """Signal event to subscribers, in the order the events are signalled."""
        if self.closing:
            return

        self.verify_event_loop_thread("signal_event")

        if LOGGER.isEnabledFor(VERBOSE_LOG_LEVEL):
            LOGGER.getChild("event").log(VERBOSE_LOG_LEVEL, "%s", event.value)

        event_obj = PlayerEvent(event=event, data=data)
        for cb_func, event_filter in list(self._subscribers):
            if not (event_filter is None or event in event_filter):
                continue
            if asyncio.iscoroutinefunction(cb_func):
                if TYPE_CHECKING:
                    cb_func = cast("Callable[[PlayerEvent], Coroutine[Any, Any, None]]", cb_func)
                self.create_task(cb_func, event_obj)
            else:
                if TYPE_CHECKING:
                    cb_func = cast("Callable[[PlayerEvent], None]", cb_func)
                self.loop.call_soon(cb_func, event_obj)

    def subscribe(
        self,
        cb_func: EventCallBackType,
        event_filter: EventType | tuple[EventType, ...] | None = None,
    ) -> Callable[[], None]:
        """Add callback to event listeners.

        Returns function to remove the listener.
            :param cb_func: callback function or coroutine
            :param event_filter: Optionally only listen for these events
        """
        if isinstance(event_filter, EventType):
            event_filter = (event_filter,)
        listener = (cb_func, event_filter)
        self._subscribers.append(listener)

        def remove_listener() -> None:
            self._subscribers.remove(listener)

        return remove_listener

    def create_task(
        self,
        target: Callable[..., Coroutine[Any, Any, _R]] | Awaitable[_R],
        *args: Any,
        task_id: str | None = None,
        abort_existing: bool = False,
        **kwargs: Any,
    ) -> asyncio.Task[_R]:
        """Create Task on (main) event loop from Coroutine(function).

        Tasks created by this helper will be properly cancelled on stop.
        """
        if task_id and (existing := self._tracked_tasks.get(task_id)) and not existing.done():
            # prevent duplicate tasks if task_id is given and already present
            if abort_existing:
                existing.cancel()
            else:
                return existing
        self.verify_event_loop_thread("create_task")

        if asyncio.iscoroutinefunction(target):
            # coroutine function
            task = self.loop.create_task(target(*args, **kwargs))
        elif asyncio.iscoroutine(target):
            # coroutine
            task = self.loop.create_task(target)
        elif callable(target):
            raise RuntimeError("Function is not a coroutine or coroutine function")
        else:
            raise RuntimeError("Target is missing")

        if task_id is None:
            task_id = uuid4().hex

        def task_done_callback(_task: asyncio.Task[Any]) -> None:
            if self._tracked_tasks.get(task_id) is _task:
                self._tracked_tasks.pop(task_id, None)
            # log unhandled exceptions
            if not _task.cancelled() and (err := _task.exception()):
                task_name = _task.get_name() if hasattr(_task, "get_name") else str(_task)
                LOGGER.warning(
                    "Exception in task %s - target: %s: %s",
                    task_name,
                    str(target),
                    str(err),
                    exc_info=err if LOGGER.isEnabledFor(logging.DEBUG) else None,
                )

        self._tracked_tasks[task_id] = task
        task.add_done_callback(task_done_callback)
        return task

    def call_later(
        self,
        delay: float,
        target: Callable[..., Coroutine[Any, Any, _R]] | Callable[..., _R],
        *args: Any,
        task_id: str | None = None,
    ) -> asyncio.TimerHandle:
        """
        Run callable/coroutine function after given delay.

        Use task_id for debouncing.
        """
        self.verify_event_loop_thread("call_later")

        if not task_id:
            task_id = uuid4().hex

        if existing := self._tracked_timers.get(task_id):
            existing.cancel()

        def _run() -> None:
            self._tracked_timers.pop(task_id, None)
            if asyncio.iscoroutinefunction(target):
                self.create_task(target, *args, task_id=task_id, abort_existing=True)
            else:
                target(*args)

        handle = self.loop.call_later(delay, _run)
        self._tracked_timers[task_id] = handle
        return handle

    def cancel_timer(self, task_id: str) -> None:
        """Cancel existing scheduled timer."""
        if existing := self._tracked_timers.pop(task_id, None):
            existing.cancel()

    def register_api_command(
        self,
        command: str,
        handler: Callable[..., Coroutine[Any, Any, Any] | Any],
    ) -> Callable[[], None]:
        """Dynamically register a command on the API.

        Returns handle to unregister.
        """
        if command in self.command_handlers:
            msg = f"Command {command} is already registered"
            raise RuntimeError(msg)
        self.command_handlers[command] = APICommandHandler.parse(command, handler)

        def unregister() -> None:
            self.command_handlers.pop(command, None)

        return unregister

    async def execute_command(self, command: str, args: dict[str, Any] | None = None) -> Any:
        """Execute a (registered) API command and return its result."""
        if not (handler := self.command_handlers.get(command)):
            raise InvalidCommand(f"Invalid command: {command}")
        try:
            parsed_args = parse_arguments(handler, args)
        except (KeyError, TypeError, ValueError, MissingField, InvalidFieldValue) as err:
            raise InvalidCommand(f"Invalid arguments for {command}: {err}") from err
        result: Any = handler.target(**parsed_args)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    def verify_event_loop_thread(self, what: str) -> None:
        """Report and raise if we are not running in the event loop thread."""
        if self.loop_thread_id != threading.get_ident():
            raise RuntimeError(
                f"Non-Async operation detected: {what} may only be called from the eventloop."
            )

    def _register_api_commands(self) -> None:
        """Register all methods decorated as api_command within a class(instance)."""
        for cls in (
            self,
            self.library,
            self.playback,
            self.interrupts,
        ):
            for attr_name in dir(cls):
                if attr_name.startswith("__"):
                    continue
                try:
                    obj = getattr(cls, attr_name)
                except (AttributeError, RuntimeError):
                    # Skip properties that fail during initialization
                    continue
                if hasattr(obj, "api_cmd"):
                    # method is decorated with our api decorator
                    self.register_api_command(obj.api_cmd, obj)
