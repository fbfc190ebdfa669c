from __future__ import annotations
from typing import Sequence, Union

from core.logger import AppLogger
from midi.params import ParamDef, ParamMap
from model.errors import AddressOutOfRangeError, ParamNotFoundError

ParamKey = Union[int, str, tuple[int, int]]

NUM_PARAMS = 17


class ParameterTable:
    """The EWI-USB configuration: 17 parameters in two address banks.

    Values live only here; every mutation goes through range validation
    against the parameter's ParamDef, and a rejected value leaves the table
    unchanged.  Parameters can be addressed by index (0-16), by name, or by
    a ``(bank, offset)`` tuple.

    Not thread-safe.  Callers receiving frames on another thread must
    serialize access themselves (see ``midi.receiver.ConfigReceiver``).
    """

    def __init__(self, logger: AppLogger | None = None) -> None:
        self._map = ParamMap()
        self._params = self._map.list_all()
        self._values = [p.default for p in self._params]
        self._logger = logger or AppLogger()

    # -- lookup --

    def count(self) -> int:
        return len(self._params)

    def __len__(self) -> int:
        return self.count()

    def _index(self, key: ParamKey) -> int:
        if isinstance(key, bool):
            raise TypeError("Parameter key must be an index, name or (bank, offset)")
        if isinstance(key, int):
            if not (0 <= key < len(self._params)):
                raise ParamNotFoundError(f"Index {key} out of range (0-{len(self._params) - 1})")
            return key
        if isinstance(key, str):
            param = self._map.get(key)
            if param is None:
                raise ParamNotFoundError(f"Unknown parameter '{key}'")
            return self._map.index_of(param)
        if isinstance(key, tuple) and len(key) == 2:
            param = self._map.at(*key)
            if param is None:
                raise ParamNotFoundError(f"No parameter at address bank={key[0]} offset={key[1]}")
            return self._map.index_of(param)
        raise TypeError(f"Parameter key must be an index, name or (bank, offset), got {key!r}")

    def param(self, key: ParamKey) -> ParamDef:
        return self._params[self._index(key)]

    def name(self, index: int) -> str:
        return self.param(index).name

    def names(self) -> list[str]:
        return self._map.names()

    def get(self, key: ParamKey) -> int:
        return self._values[self._index(key)]

    # -- mutation --

    def set(self, key: ParamKey, value: int) -> None:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError(f"Address key must be (bank, offset), got {key!r}")
            self.set_address(key[0], key[1], value)
            return
        if isinstance(key, str) and self._map.get(key) is None:
            # Unknown names are ignored rather than rejected.
            self._logger.general(f"set: no parameter named '{key}', ignored")
            return
        index = self._index(key)
        self._values[index] = self._params[index].check(value)

    def set_address(self, bank: int, offset: int, value: int) -> None:
        param = self._map.at(bank, offset)
        if param is None:
            raise AddressOutOfRangeError(bank, offset)
        self._values[self._map.index_of(param)] = param.check(value)

    def apply_block(self, bank: int, offset: int, values: Sequence[int]) -> None:
        """Set consecutive offsets in *bank* starting at *offset*.

        Every value is validated before any is written, so a bad address or
        value raises with the table untouched.
        """
        updates: list[tuple[int, int]] = []
        for i, value in enumerate(values):
            param = self._map.at(bank, offset + i)
            if param is None:
                raise AddressOutOfRangeError(bank, offset + i)
            updates.append((self._map.index_of(param), param.check(value)))
        for index, value in updates:
            self._values[index] = value

    def reset(self) -> None:
        self._values = [p.default for p in self._params]

    # -- views --

    def snapshot(self) -> list[tuple[int, int, int]]:
        """Return ``(bank, offset, value)`` triples ordered by bank then offset."""
        return sorted(
            (p.bank, p.offset, v) for p, v in zip(self._params, self._values)
        )

    def bank_values(self, bank: int) -> list[int]:
        return [v for b, _, v in self.snapshot() if b == bank]

    def banks(self) -> list[int]:
        return self._map.banks()

    def to_dict(self) -> dict[str, int]:
        return {p.name: v for p, v in zip(self._params, self._values)}

    def copy(self) -> ParameterTable:
        other = ParameterTable(logger=self._logger)
        other._values = list(self._values)
        return other

    def diff(self, other: ParameterTable) -> list[tuple[str, int, int]]:
        """Return ``(name, ours, theirs)`` for every parameter that differs."""
        return [
            (p.name, mine, theirs)
            for p, mine, theirs in zip(self._params, self._values, other._values)
            if mine != theirs
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterTable):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"ParameterTable({fields})"


def _named_property(name: str) -> property:
    def fget(self: ParameterTable) -> int:
        return self.get(name)

    def fset(self: ParameterTable, value: int) -> None:
        self.set(name, value)

    return property(fget, fset, doc=f"Current value of '{name}'.")


for _name in ParamMap().names():
    setattr(ParameterTable, _name, _named_property(_name))
del _name
