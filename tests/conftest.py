import pathlib

import pytest

from py_fix_tools.fix_beautifier import Beautifier
from py_fix_tools.fix_dictionary import Dictionary, FieldDef, MessageDescriptor, MessagePart, load_dictionary
from py_fix_tools.fix_message import FixMessage
from py_fix_tools.fix_tags import FixTag

DATA_DIR = pathlib.Path(__file__).parent / "data"
DICTIONARY_PATH = DATA_DIR / "FIX44-test.xml"


@pytest.fixture(scope="session")
def dictionary_path():
    return DICTIONARY_PATH


@pytest.fixture(scope="session")
def dictionary():
    return load_dictionary(DICTIONARY_PATH)


@pytest.fixture
def beautifier(dictionary):
    return Beautifier(dictionary)


@pytest.fixture
def empty_group_dictionary():
    """Built by hand: message X carries NoLegs whose only member is an empty component."""
    begin, length, checksum, msg_type = (
        FieldDef(8, "BeginString", "STRING"), FieldDef(9, "BodyLength", "LENGTH"),
        FieldDef(10, "CheckSum", "STRING"), FieldDef(35, "MsgType", "STRING"),
    )
    legs = FieldDef(555, "NoLegs", "NUMINGROUP")
    layout = (MessagePart(field=legs.with_members([MessagePart(component="Empty")])),)
    return Dictionary(
        "FIX.4.4",
        [begin, length, checksum, msg_type, legs],
        [MessageDescriptor("X", "Empty", "app", layout)],
        [MessagePart(field=begin), MessagePart(field=length), MessagePart(field=msg_type)],
        [MessagePart(field=checksum)],
    )


@pytest.fixture
def new_order():
    """A NewOrderSingle with a party, two legs (one with alt ids) and a price."""
    msg = FixMessage(msg_type="D", sender_id="CLIENT", target_id="SERVER")
    msg.header.add_tag(FixTag.MSG_SEQ_NUM, 7)
    msg.header.add_tag(FixTag.SENDING_TIME, "20260101-12:00:00.000")
    msg.add_tag(11, "42")
    msg.add_group(453, [{448: "ACME", 447: "D", 452: 3}])
    msg.add_tag(55, "BTC-USD")
    msg.add_tag(54, "1")
    msg.add_group(555, [
        {600: "BTC-USD", 624: "1"},
        {600: "ETH-USD", 624: "2"},
    ])
    msg.body.groups[555][0].add_group(604, [{605: "XBT", 606: "8"}, {605: "BTC", 606: "8"}])
    msg.add_tag(38, "10")
    msg.add_tag(40, "2")
    msg.add_tag(44, "101.5")
    msg.add_tag(60, "20260101-12:00:00.000")
    return msg

