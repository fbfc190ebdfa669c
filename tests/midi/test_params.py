import pytest
from midi.params import ParamMap, ParamDef
from model.errors import OutOfRangeError


def test_param_map_lookup():
    pm = ParamMap()
    p = pm.get("transpose")
    assert p is not None
    assert p.name == "transpose"
    assert p.min_val == 34
    assert p.max_val == 93
    assert p.address == (2, 2)


def test_param_map_list_all():
    pm = ParamMap()
    params = pm.list_all()
    assert len(params) == 17
    assert all(isinstance(p, ParamDef) for p in params)


def test_param_map_unknown():
    pm = ParamMap()
    assert pm.get("volume") is None
    assert pm.at(1, 0) is None
    assert pm.at(0, 6) is None


def test_param_map_banks():
    pm = ParamMap()
    assert pm.banks() == [0, 2]


def test_addresses_are_unique():
    addresses = [p.address for p in ParamMap().list_all()]
    assert len(set(addresses)) == len(addresses)


def test_key_delay_is_four_bits():
    p = ParamMap().get("key_delay")
    assert p.in_range(15)
    assert not p.in_range(16)


def test_check_names_param():
    p = ParamMap().get("fingering")
    with pytest.raises(OutOfRangeError, match="fingering"):
        p.check(6)
    assert p.check(5) == 5


def test_default_must_be_in_range():
    with pytest.raises(OutOfRangeError):
        ParamDef("bad", 0, 0, 200, 0, 127)


def test_label():
    pm = ParamMap()
    assert pm.get("breath_cc2").label(0) == "Off"
    assert pm.get("breath_cc2").label(11) == "11"


@pytest.mark.parametrize("value", [64.5, 64.0, True, "64", None])
def test_check_rejects_non_integers(value):
    p = ParamMap().get("velocity")
    with pytest.raises(TypeError, match="velocity"):
        p.check(value)


def test_title_falls_back_to_name():
    pm = ParamMap()
    assert pm.get("key_delay").title == "Key Delay"
    assert pm.get("reserved").title == "reserved"
