"""Local state bound to a partition key, with automatic load and save.

A binding owns one state slot. ``bind()`` is called with the current key on
every render; when the key changes a load is started. Calling the setter is
the only way to start a save: values a load assigns are never written back.

Loads are not cancelled. When the key changes twice, both loads land in the
order they complete, so a slow first load can overwrite the result of a
faster second one (last completed wins). A load is dropped only when the
setter was called for the same key while it was in flight.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any

from PySide6.QtCore import QObject, Signal

from chessahoochee.db.partitions import StoreError
from chessahoochee.domain.guards import TypeValidationError
from chessahoochee.services.error_policy import IoErrorPolicy

logger = logging.getLogger(__name__)


class BindingStatus(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"


class UpdateSource(enum.Enum):
    LOAD = "load"
    USER = "user"


class RecordBinding(QObject):
    valueChanged = Signal(object)
    statusChanged = Signal(str)
    errorOccurred = Signal(object)

    def __init__(
        self,
        initial: Any,
        *,
        policy: IoErrorPolicy | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._value = initial
        self._status = BindingStatus.UNINITIALIZED
        self._bound = False
        self._policy = policy or IoErrorPolicy.from_settings()
        self._tasks: set[asyncio.Task] = set()
        self._loads_in_flight = 0
        self._saves_in_flight = 0
        self._error: BaseException | None = None
        # user edits per key, used to drop loads that started before an edit
        self._edits: dict[Any, int] = {}

    @property
    def value(self) -> Any:
        return self._value

    @property
    def status(self) -> BindingStatus:
        return self._status

    @property
    def policy(self) -> IoErrorPolicy:
        return self._policy

    @property
    def error(self) -> BaseException | None:
        return self._error

    async def settled(self) -> None:
        """Wait for every in-flight load and save, then raise a surfaced error."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
        error, self._error = self._error, None
        if error is not None:
            raise error

    async def _read(self, key: Any) -> Any:
        raise NotImplementedError

    async def _write(self, key: Any, value: Any) -> None:
        raise NotImplementedError(f"{type(self).__name__} is read-only")

    def _edit_key(self, load_key: Any) -> Any:
        return load_key

    def _apply_load(self, key: Any, loaded: Any) -> None:
        self._set_state(loaded, UpdateSource.LOAD)

    def _mark_bound(self) -> None:
        self._bound = True
        self._refresh_status()

    def _set_state(self, value: Any, source: UpdateSource, key: Any = None) -> None:
        self._value = value
        self.valueChanged.emit(value)
        if source is UpdateSource.USER:
            self._edits[key] = self._edits.get(key, 0) + 1
            self._persist(key, value)

    def _start_load(self, key: Any) -> None:
        edits_at_start = self._edits.get(self._edit_key(key), 0)
        self._spawn(self._run_load(key, edits_at_start))
        self._bound = True
        self._loads_in_flight += 1
        self._refresh_status()

    def _persist(self, key: Any, value: Any) -> None:
        self._spawn(self._run_save(key, value))
        self._saves_in_flight += 1
        self._refresh_status()

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_load(self, key: Any, edits_at_start: int) -> None:
        edit_key = self._edit_key(key)
        try:
            value = await self._read(key)
        except StoreError as exc:
            self._surface(self._policy.handle(exc, f"{type(self).__name__} load of {key!r}"))
        except TypeValidationError as exc:
            logger.error("%s load of %r: %s", type(self).__name__, key, exc)
            self._surface(exc)
        else:
            if self._edits.get(edit_key, 0) != edits_at_start:
                logger.debug("dropping load of %r, edited while loading", key)
            else:
                self._apply_load(key, value)
        finally:
            self._loads_in_flight -= 1
            self._refresh_status()

    async def _run_save(self, key: Any, value: Any) -> None:
        try:
            await self._write(key, value)
            logger.debug("updated %r %r", key, value)
        except StoreError as exc:
            self._surface(self._policy.handle(exc, f"{type(self).__name__} save of {key!r}"))
        finally:
            self._saves_in_flight -= 1
            self._refresh_status()

    def _surface(self, error: BaseException | None) -> None:
        if error is None:
            return
        if self._error is None:
            self._error = error
        self.errorOccurred.emit(error)

    def _refresh_status(self) -> None:
        if self._loads_in_flight:
            status = BindingStatus.LOADING
        elif self._saves_in_flight:
            status = BindingStatus.SAVING
        elif self._bound:
            status = BindingStatus.READY
        else:
            status = BindingStatus.UNINITIALIZED
        if status is not self._status:
            self._status = status
            self.statusChanged.emit(status.value)
