from __future__ import annotations
from dataclasses import dataclass

from model.errors import OutOfRangeError


@dataclass(frozen=True)
class ParamDef:
    name: str
    bank: int
    offset: int
    default: int
    min_val: int
    max_val: int
    display_name: str = ""
    value_labels: dict[int, str] | None = None

    def __post_init__(self) -> None:
        self.check(self.default)

    @property
    def address(self) -> tuple[int, int]:
        return (self.bank, self.offset)

    @property
    def title(self) -> str:
        return self.display_name or self.name

    def in_range(self, value: int) -> bool:
        return self.min_val <= value <= self.max_val

    def check(self, value: int) -> int:
        """Return *value* unchanged, or raise naming this param.

        Non-integers (bools included) raise TypeError; integers outside
        the range raise OutOfRangeError.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{self.name} must be an integer, got {value!r}")
        if not self.in_range(value):
            raise OutOfRangeError(self.name, value, self.min_val, self.max_val)
        return value

    def label(self, value: int) -> str:
        if self.value_labels and value in self.value_labels:
            return self.value_labels[value]
        return str(value)


# ---------------------------------------------------------------------------
# Parameter definitions
# ---------------------------------------------------------------------------

_PARAMS: list[ParamDef] = [
    # -----------------------------------------------------------------------
    # Bank 0: setup
    # -----------------------------------------------------------------------
    ParamDef("breath_gain", 0, 0, 64, 0, 127, display_name="Breath Gain"),
    ParamDef("bite_gain", 0, 1, 64, 0, 127, display_name="Bite Gain"),
    ParamDef("bite_ac_gain", 0, 2, 64, 0, 127, display_name="Bite AC Gain"),
    ParamDef("pitch_bend_gain", 0, 3, 64, 0, 127, display_name="PB Gain"),
    ParamDef("key_delay", 0, 4, 8, 0, 15, display_name="Key Delay"),
    ParamDef("reserved", 0, 5, 127, 0, 127),  # undocumented

    # -----------------------------------------------------------------------
    # Bank 2: controller
    # -----------------------------------------------------------------------
    ParamDef("midi_channel", 2, 0, 0, 0, 15, display_name="MIDI Channel"),
    ParamDef("fingering", 2, 1, 0, 0, 5, display_name="Fingering"),
    ParamDef("transpose", 2, 2, 64, 34, 93, display_name="Transpose",
             value_labels={64: "Middle C"}),
    ParamDef("velocity", 2, 3, 32, 0, 127, display_name="Velocity",
             value_labels={32: "Fixed"}),
    ParamDef("breath_cc1", 2, 4, 2, 0, 127, display_name="Breath CC1",
             value_labels={2: "CC2/Breath"}),
    ParamDef("breath_cc2", 2, 5, 0, 0, 127, display_name="Breath CC2",
             value_labels={0: "Off"}),
    ParamDef("reserved2", 2, 6, 0, 0, 127),  # undocumented
    ParamDef("bite_cc1", 2, 7, 127, 0, 127, display_name="Bite CC1"),
    ParamDef("bite_cc2", 2, 8, 0, 0, 127, display_name="Bite CC2",
             value_labels={0: "Off"}),
    ParamDef("pitch_bend_up", 2, 9, 127, 0, 127, display_name="PB Up"),
    ParamDef("pitch_bend_down", 2, 10, 127, 0, 127, display_name="PB Down"),
]


class ParamMap:
    def __init__(self) -> None:
        self._params = list(_PARAMS)
        self._by_name = {p.name: p for p in self._params}
        self._by_address = {p.address: p for p in self._params}
        if len(self._by_name) != len(self._params) or len(self._by_address) != len(self._params):
            raise ValueError("Parameter names and addresses must be unique")

    def get(self, name: str) -> ParamDef | None:
        return self._by_name.get(name)

    def at(self, bank: int, offset: int) -> ParamDef | None:
        return self._by_address.get((bank, offset))

    def index_of(self, param: ParamDef) -> int:
        return self._params.index(param)

    def list_all(self) -> list[ParamDef]:
        return list(self._params)

    def names(self) -> list[str]:
        return [p.name for p in self._params]

    def banks(self) -> list[int]:
        return sorted({p.bank for p in self._params})
