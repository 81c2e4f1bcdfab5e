"""Game switches and variables with clock-owned reserved slots."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from daynight.errors import ReservedIdentifierError

LOGGER = logging.getLogger(__name__)


class SessionState:
    """Boolean switches and numeric variables addressed by positive integer id.

    Ids handed to :meth:`reserve` can only be written through the returned
    :class:`ReservedWriter`. Everyone else gets a
    :class:`~daynight.errors.ReservedIdentifierError` naming the id.
    """

    def __init__(self) -> None:
        self._switches: defaultdict[int, bool] = defaultdict(bool)
        self._variables: defaultdict[int, int] = defaultdict(int)
        self._reserved_switches: frozenset[int] = frozenset()
        self._reserved_variables: frozenset[int] = frozenset()

    def reserve(self, switches: Iterable[int], variables: Iterable[int]) -> ReservedWriter:
        """Mark ids as reserved and return the only handle allowed to write them."""
        self._reserved_switches = self._reserved_switches | {identifier for identifier in switches if identifier > 0}
        self._reserved_variables = self._reserved_variables | {identifier for identifier in variables if identifier > 0}
        LOGGER.debug(
            "Reserved switches %s and variables %s",
            sorted(self._reserved_switches),
            sorted(self._reserved_variables),
        )
        return ReservedWriter(self)

    def is_reserved_switch(self, switch_id: int) -> bool:
        return switch_id in self._reserved_switches

    def is_reserved_variable(self, variable_id: int) -> bool:
        return variable_id in self._reserved_variables

    def switch(self, switch_id: int) -> bool:
        return self._switches.get(switch_id, False)

    def variable(self, variable_id: int) -> int:
        return self._variables.get(variable_id, 0)

    def set_switch(self, switch_id: int, value: bool) -> None:
        if self.is_reserved_switch(switch_id):
            raise ReservedIdentifierError("switch", switch_id)
        self._write_switch(switch_id, value)

    def set_variable(self, variable_id: int, value: int) -> None:
        if self.is_reserved_variable(variable_id):
            raise ReservedIdentifierError("variable", variable_id)
        self._write_variable(variable_id, value)

    def _write_switch(self, switch_id: int, value: bool) -> None:
        if switch_id > 0:
            self._switches[switch_id] = bool(value)

    def _write_variable(self, variable_id: int, value: int) -> None:
        if variable_id > 0:
            self._variables[variable_id] = value


class ReservedWriter:
    """Write access to reserved ids, held by the component that owns them."""

    def __init__(self, state: SessionState) -> None:
        self._state = state

    def set_switch(self, switch_id: int, value: bool) -> None:
        self._state._write_switch(switch_id, value)

    def set_variable(self, variable_id: int, value: int) -> None:
        self._state._write_variable(variable_id, value)
