import pytest
from midi.params import ParamMap
from model.errors import AddressOutOfRangeError, OutOfRangeError, ParamNotFoundError
from model.parameter_table import NUM_PARAMS, ParameterTable

DEFAULTS = {
    "breath_gain": 64, "bite_gain": 64, "bite_ac_gain": 64, "pitch_bend_gain": 64,
    "key_delay": 8, "reserved": 127,
    "midi_channel": 0, "fingering": 0, "transpose": 64, "velocity": 32,
    "breath_cc1": 2, "breath_cc2": 0, "reserved2": 0, "bite_cc1": 127,
    "bite_cc2": 0, "pitch_bend_up": 127, "pitch_bend_down": 127,
}


def test_factory_defaults():
    table = ParameterTable()
    assert table.to_dict() == DEFAULTS


def test_count():
    table = ParameterTable()
    assert table.count() == NUM_PARAMS == 17
    assert len(table) == 17


def test_get_by_index_name_and_address():
    table = ParameterTable()
    assert table.get(0) == 64
    assert table.get(4) == 8
    assert table.get("velocity") == 32
    assert table.get((2, 10)) == 127
    assert table.name(6) == "midi_channel"


@pytest.mark.parametrize("key", [-1, 17, "volume", (1, 0), (0, 6), (2, 11)])
def test_get_not_found(key):
    with pytest.raises(ParamNotFoundError):
        ParameterTable().get(key)


def test_set_by_index_name_and_address():
    table = ParameterTable()
    table.set(0, 100)
    table.set("key_delay", 15)
    table.set((2, 1), 5)
    assert table.get("breath_gain") == 100
    assert table.get(4) == 15
    assert table.get("fingering") == 5


def test_transpose_scenario():
    table = ParameterTable()
    with pytest.raises(OutOfRangeError):
        table.set("transpose", 33)
    table.set("transpose", 34)
    assert table.get("transpose") == 34


@pytest.mark.parametrize("param", ParamMap().list_all(), ids=lambda p: p.name)
def test_range_enforced_for_every_param(param):
    table = ParameterTable()
    for bad in (param.min_val - 1, param.max_val + 1):
        with pytest.raises(OutOfRangeError) as info:
            table.set(param.name, bad)
        assert info.value.name == param.name
        assert param.name in str(info.value)
        assert table.get(param.name) == param.default
    table.set(param.name, param.min_val)
    assert table.get(param.name) == param.min_val
    table.set(param.address, param.max_val)
    assert table.get(param.name) == param.max_val


@pytest.mark.parametrize("bank,offset", [(1, 0), (3, 0), (0, 6), (2, 11), (127, 127)])
def test_set_address_rejected(bank, offset):
    table = ParameterTable()
    with pytest.raises(AddressOutOfRangeError):
        table.set((bank, offset), 0)
    with pytest.raises(AddressOutOfRangeError):
        table.set_address(bank, offset, 0)
    assert table.to_dict() == DEFAULTS


def test_set_index_out_of_range():
    with pytest.raises(ParamNotFoundError):
        ParameterTable().set(17, 0)


def test_set_unknown_name_is_noop():
    table = ParameterTable()
    table.set("volume", 99)
    assert table.to_dict() == DEFAULTS


def test_set_unknown_name_is_logged():
    from core.logger import AppLogger
    logger = AppLogger(echo=False)
    received = []
    logger.message_logged.connect(lambda cat, msg: received.append(msg))
    ParameterTable(logger=logger).set("volume", 99)
    assert received and "volume" in received[0]


def test_bool_key_rejected():
    with pytest.raises(TypeError):
        ParameterTable().get(True)


def test_snapshot_order():
    snap = ParameterTable().snapshot()
    assert [(b, o) for b, o, _ in snap] == (
        [(0, i) for i in range(6)] + [(2, i) for i in range(11)]
    )
    assert snap[0] == (0, 0, 64)
    assert snap[-1] == (2, 10, 127)


def test_bank_values():
    table = ParameterTable()
    assert table.bank_values(0) == [64, 64, 64, 64, 8, 127]
    assert table.bank_values(2) == [0, 0, 64, 32, 2, 0, 0, 127, 0, 127, 127]
    assert table.banks() == [0, 2]


def test_apply_block():
    table = ParameterTable()
    table.apply_block(2, 2, [40, 100])
    assert table.transpose == 40
    assert table.velocity == 100


def test_apply_block_bad_value_leaves_table_untouched():
    table = ParameterTable()
    with pytest.raises(OutOfRangeError, match="key_delay"):
        table.apply_block(0, 0, [1, 2, 3, 4, 99, 6])
    assert table.to_dict() == DEFAULTS


def test_apply_block_past_end_of_bank():
    table = ParameterTable()
    with pytest.raises(AddressOutOfRangeError):
        table.apply_block(0, 4, [1, 2, 3])
    assert table.to_dict() == DEFAULTS


def test_named_properties():
    table = ParameterTable()
    assert table.breath_gain == 64
    table.pitch_bend_down = 12
    assert table.get("pitch_bend_down") == 12
    with pytest.raises(OutOfRangeError):
        table.midi_channel = 16


def test_reset():
    table = ParameterTable()
    table.set("velocity", 1)
    table.reset()
    assert table.to_dict() == DEFAULTS


def test_copy_and_diff():
    table = ParameterTable()
    other = table.copy()
    assert other == table
    other.set("bite_cc2", 5)
    assert other != table
    assert table.diff(other) == [("bite_cc2", 0, 5)]
    assert table.get("bite_cc2") == 0


@pytest.mark.parametrize("value", [64.5, True])
def test_set_rejects_non_integer_values(value):
    table = ParameterTable()
    with pytest.raises(TypeError):
        table.set("velocity", value)
    with pytest.raises(TypeError):
        table.set((2, 3), value)
    assert table.get("velocity") == 32


def test_non_integer_in_block_applies_nothing():
    table = ParameterTable()
    with pytest.raises(TypeError):
        table.apply_block(0, 0, [1, 2.5])
    assert table.to_dict() == DEFAULTS


@pytest.mark.parametrize("key", [(0,), (0, 1, 2)])
def test_set_bad_tuple_key(key):
    table = ParameterTable()
    with pytest.raises(TypeError):
        table.set(key, 1)
    with pytest.raises(TypeError):
        table.get(key)
    assert table.to_dict() == DEFAULTS
