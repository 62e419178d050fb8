from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QObject

from chessahoochee.bindings.base import RecordBinding, UpdateSource
from chessahoochee.db.repositories import OptionRepository
from chessahoochee.domain.guards import TypeValidationError, ensure_number
from chessahoochee.services.error_policy import IoErrorPolicy

logger = logging.getLogger(__name__)


class OptionBinding(RecordBinding):
    """A numeric option with a caller-supplied default.

    Until the first load completes the value is the default. When the store
    has nothing under the key, the default becomes the value and is written
    once so the key is materialized.
    """

    def __init__(
        self,
        repository: OptionRepository,
        *,
        policy: IoErrorPolicy | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(None, policy=policy, parent=parent)
        self._repository = repository
        self._key: str | None = None
        self._default: int | float | None = None

    @property
    def key(self) -> str | None:
        return self._key

    def state(self) -> tuple[int | float, Callable[[int | float], None]]:
        return self._value, self.set_value

    def bind(self, key: str, default: int | float) -> OptionBinding:
        default = ensure_number(default, f"default for option {key!r}")
        if not isinstance(key, str):
            raise TypeValidationError(f"option key must be a string, got {key!r}")
        if (key, default) == (self._key, self._default):
            return self
        if self._key is None:
            self._value = default
        self._key = key
        self._default = default
        self._start_load((key, default))
        return self

    def set_value(self, value: int | float) -> None:
        value = ensure_number(value, f"option {self._key!r}")
        if self._key is None:
            raise RuntimeError("OptionBinding.bind() has not been called")
        self._set_state(value, UpdateSource.USER, self._key)

    def _edit_key(self, load_key: tuple[str, int | float]) -> str:
        return load_key[0]

    async def _read(self, key: tuple[str, int | float]) -> tuple[int | float, bool]:
        option_key, default = key
        logger.debug("getting %s from store", option_key)
        stored = await self._repository.get(option_key)
        if stored is None:
            return default, True
        return ensure_number(stored, f"stored option {option_key!r}"), False

    def _apply_load(self, key: tuple[str, int | float], loaded: tuple[int | float, bool]) -> None:
        value, missing = loaded
        if missing:
            self._persist(key[0], value)
        super()._apply_load(key, value)

    async def _write(self, key: str, value: int | float) -> None:
        await self._repository.save(key, value)
