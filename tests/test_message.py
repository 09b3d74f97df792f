import pytest

from py_fix_tools.fix_errors import FieldMapError
from py_fix_tools.fix_message import FieldMap, FixMessage

SOH = FixMessage.SOH


def test_encode_framing():
    msg = FixMessage(msg_type="0", sender_id="A", target_id="B")
    msg.header.add_tag(34, 1)
    raw = msg.encode()

    content = f"35=0{SOH}49=A{SOH}56=B{SOH}34=1{SOH}"
    assert raw.startswith(f"8=FIX.4.4{SOH}9={len(content)}{SOH}{content}")
    assert raw.endswith(SOH)
    assert raw.split(SOH)[-2].startswith("10=")
    assert FixMessage.validate_message(raw)


def test_validate_rejects_tampered_message():
    raw = FixMessage(msg_type="0", sender_id="A", target_id="B").encode()
    assert not FixMessage.validate_message(raw.replace("49=A", "49=C"))
    assert not FixMessage.validate_message("8=FIX.4.4" + SOH)


def test_checksum():
    assert FixMessage.calculate_checksum("") == "000"
    assert FixMessage.calculate_checksum("A") == "065"


def test_encode_non_ascii_value():
    msg = FixMessage(msg_type="D")
    msg.add_tag(58, "Caf\u00e9")
    raw = msg.encode()

    assert "\x019=13\x01" in raw
    assert FixMessage.validate_message(raw)
    assert FixMessage.calculate_checksum("\u00e9") == "233"


def test_groups_encoded_after_count():
    msg = FixMessage(msg_type="D")
    msg.add_tag(11, "1")
    msg.add_group(555, [{600: "X"}, {600: "Y"}])
    msg.add_tag(38, "5")
    raw = msg.encode()

    assert f"11=1{SOH}555=2{SOH}600=X{SOH}600=Y{SOH}38=5{SOH}" in raw
    assert msg.get_tag(555) == "2"
    assert [row.get_tag(600) for row in msg.get_group(555)] == ["X", "Y"]


def test_get_tag_searches_all_parts():
    msg = FixMessage(msg_type="D", sender_id="A")
    msg.add_tag(11, "7")
    msg.trailer.add_tag(93, "0")
    assert msg.get_tag(49) == "A"
    assert msg.get_tag(11) == "7"
    assert msg.get_tag(93) == "0"
    assert msg.get_tag(58) is None
    assert msg.msg_type == "D"


def test_get_group():
    fm = FieldMap()
    fm.add_group(555, [{600: "X"}, {600: "Y", 624: "1"}])
    rows = fm.get_group(555, [600, 624])
    assert len(rows) == 2
    assert rows[1].get_tag(624) == "1"


def test_get_group_empty_count():
    fm = FieldMap({555: "0"})
    assert fm.get_group(555, [600]) == []


@pytest.mark.parametrize("tags, rows", [
    ({555: "2"}, None),
    ({555: "3"}, [{600: "X"}, {600: "Y"}]),
    ({555: "x"}, [{600: "X"}]),
    ({555: "1"}, [{600: "X", 11: "stray"}]),
    ({}, [{600: "X"}]),
])
def test_get_group_errors(tags, rows):
    fm = FieldMap(tags)
    if rows is not None:
        fm.set_group(555, [FieldMap(r) for r in rows])
    with pytest.raises(FieldMapError):
        fm.get_group(555, [600, 624])
