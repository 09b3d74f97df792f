"""
FIX message parser utilities.

Responsibility: Purely structural parsing of raw FIX strings.
Functions: parse(), split_fields(), extract_tag()

Which tags form the header and trailer, and which tags open a repeating
group, comes from the protocol dictionary. BodyLength and CheckSum are
not verified here.
"""

from py_fix_tools.fix_dictionary import flatten_parts
from py_fix_tools.fix_errors import FixParseError
from py_fix_tools.fix_message import FieldMap, FixMessage
from py_fix_tools.fix_tags import FRAMING_HEAD, FixTag

SOH = FixMessage.SOH


def as_text(raw):
    if isinstance(raw, (bytes, bytearray)):
        # latin-1 maps every byte, so nothing on the wire is lost
        return bytes(raw).decode('latin-1')
    return raw


def extract_tag(raw_str, tag_num):
    """Fast single-tag extraction from a raw FIX string.

    Returns the string value for the given tag number, or None if not found.
    """
    prefix = f"{tag_num}="
    for part in as_text(raw_str).split(SOH):
        if part.startswith(prefix):
            return part[len(prefix):]
    return None


def split_fields(raw):
    """Split a raw message into an ordered list of (tag, value) pairs.

    Raises FixParseError on a field that isn't tag=value with a positive
    integer tag.
    """
    parts = as_text(raw).split(SOH)
    if parts and parts[-1] == "":
        parts.pop()

    pairs = []
    for part in parts:
        tag_str, sep, value = part.partition('=')
        if not sep:
            raise FixParseError(f"Field without '=': {part!r}")
        # Tags are plain ASCII digits
        if not (tag_str.isascii() and tag_str.isdigit()):
            raise FixParseError(f"Invalid tag {tag_str!r}")
        tag_num = int(tag_str)
        if tag_num <= 0:
            raise FixParseError(f"Invalid tag {tag_str!r}")
        pairs.append((tag_num, value))
    return pairs


def _check_framing(pairs):
    if len(pairs) < 4:
        raise FixParseError(f"Message too short: {len(pairs)} fields")
    expected = ((0, FixTag.BEGIN_STRING), (1, FixTag.BODY_LENGTH), (2, FixTag.MSG_TYPE))
    for pos, tag in expected:
        if pairs[pos][0] != tag:
            raise FixParseError(f"Expected tag {tag} at position {pos}, found {pairs[pos][0]}")
    if pairs[-1][0] != FixTag.CHECKSUM:
        raise FixParseError(f"Message does not end with tag {FixTag.CHECKSUM}")


def _read_group(pairs, i, count, group_def):
    """Read up to count rows starting at pairs[i].

    The first member tag is the "delimiter" that starts each row.
    Returns (rows, next_index).
    """
    member_defs = {f.tag: f for f in flatten_parts(group_def.members or ())}
    if not member_defs:
        return [], i
    delimiter_tag = next(iter(member_defs))
    rows = []

    for _ in range(count):
        if i >= len(pairs) or pairs[i][0] != delimiter_tag:
            break

        row = FieldMap()
        while i < len(pairs):
            tag_num, value = pairs[i]
            if tag_num not in member_defs or (tag_num == delimiter_tag and len(row)):
                break
            row.add_tag(tag_num, value)
            i += 1

            member = member_defs[tag_num]
            if member.is_group:
                nested_count = _count(value)
                if nested_count is not None:
                    nested_rows, i = _read_group(pairs, i, nested_count, member)
                    row.set_group(tag_num, nested_rows)

        rows.append(row)

    return rows, i


def _count(value):
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def _group_defs(parts):
    return {f.tag: f for f in flatten_parts(parts) if f.is_group}


def parse(raw_str, dictionary):
    """Parse a raw FIX message into a FixMessage with header, body and trailer.

    Raises FixParseError if the message framing is broken.
    """
    pairs = split_fields(raw_str)
    _check_framing(pairs)

    msg = FixMessage(begin_string=pairs[0][1])
    msg_type = pairs[2][1]

    segments = (
        (dictionary.trailer_tags() | {FixTag.CHECKSUM}, msg.trailer, _group_defs(dictionary.trailer_parts())),
        (dictionary.header_tags() | set(FRAMING_HEAD), msg.header, _group_defs(dictionary.header_parts())),
    )
    body_groups = _group_defs(dictionary.message_parts(msg_type))

    i = 0
    while i < len(pairs):
        tag_num, value = pairs[i]
        target, groups = msg.body, body_groups
        for tags, field_map, segment_groups in segments:
            if tag_num in tags:
                target, groups = field_map, segment_groups
                break

        target.add_tag(tag_num, value)
        i += 1

        group_def = groups.get(tag_num)
        if group_def is not None:
            count = _count(value)
            if count is not None:
                rows, i = _read_group(pairs, i, count, group_def)
                target.set_group(tag_num, rows)

    return msg
