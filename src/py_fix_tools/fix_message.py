"""
Docstring for FixMessage

Responsibility: To hold the data for a single message
Attributes: header, body and trailer FieldMaps, an 'encode()' method

A FieldMap keeps raw tag values plus the rows of any repeating group keyed
by the group's count tag. Each row is itself a FieldMap.
"""

from py_fix_tools.fix_errors import FieldMapError
from py_fix_tools.fix_tags import FRAMING_HEAD, FixTag


class FieldMap:

    def __init__(self, tags=None):
        # {tag: raw_value}, in insertion order
        self.tags = {}
        # Repeating groups: {count_tag: [FieldMap, ...]}
        self.groups = {}
        for tag, value in (tags or {}).items():
            self.add_tag(tag, value)

    def __len__(self):
        return len(self.tags)

    def __contains__(self, tag):
        return tag in self.tags

    def add_tag(self, tag: int, value):
        """Adds or updates a tag in the field map."""
        self.tags[int(tag)] = str(value)

    def get_tag(self, tag_num: int):
        return self.tags.get(tag_num)

    def add_group(self, count_tag, entries):
        """Add a repeating group and set its count field.

        Args:
            count_tag: The NoXxx tag (e.g. 555 for NoLegs).
            entries: List of FieldMaps or dicts [{tag: value, ...}, ...].
        """
        rows = [e if isinstance(e, FieldMap) else FieldMap(e) for e in entries]
        self.add_tag(count_tag, len(rows))
        self.groups[int(count_tag)] = rows

    def set_group(self, count_tag, rows):
        """Attach rows as read off the wire, leaving the count field untouched."""
        self.groups[int(count_tag)] = list(rows)

    def get_group(self, count_tag, template):
        """Return the rows of a repeating group.

        Raises FieldMapError if the rows are missing, disagree with the count
        field, or carry a tag the template doesn't allow.
        """
        count = self.tags.get(count_tag)
        try:
            expected = int(count)
        except (TypeError, ValueError):
            raise FieldMapError(f"Group {count_tag} has invalid count {count!r}") from None

        rows = self.groups.get(count_tag)
        if rows is None:
            if expected == 0:
                return []
            raise FieldMapError(f"Group {count_tag} not found")
        if len(rows) != expected:
            raise FieldMapError(f"Group {count_tag} declares {expected} rows, found {len(rows)}")

        allowed = set(template)
        for i, row in enumerate(rows):
            stray = [tag for tag in row.tags if tag not in allowed]
            if stray:
                raise FieldMapError(f"Group {count_tag} row {i} has unexpected tags {stray}")
        return list(rows)

    def encode(self, skip=()) -> str:
        """Tag=value pairs in insertion order, group rows right after their count tag."""
        raw = ""
        for tag, val in self.tags.items():
            if tag in skip:
                continue
            raw += f"{tag}={val}{FixMessage.SOH}"
            for row in self.groups.get(tag, ()):
                raw += row.encode()
        return raw


class FixMessage:

    SOH = "\x01"

    def __init__(self, msg_type=None, sender_id=None, target_id=None, begin_string="FIX.4.4"):
        self.header = FieldMap()
        self.body = FieldMap()
        self.trailer = FieldMap()

        self.header.add_tag(FixTag.BEGIN_STRING, begin_string)
        if msg_type is not None:
            self.header.add_tag(FixTag.MSG_TYPE, msg_type)
        if sender_id is not None:
            self.header.add_tag(FixTag.SENDER_COMP_ID, sender_id)
        if target_id is not None:
            self.header.add_tag(FixTag.TARGET_COMP_ID, target_id)

    @property
    def msg_type(self):
        return self.header.get_tag(FixTag.MSG_TYPE)

    def add_tag(self, tag: int, value):
        """Adds or updates a body tag."""
        self.body.add_tag(tag, value)

    def get_tag(self, tag_num: int):
        for field_map in (self.header, self.body, self.trailer):
            value = field_map.get_tag(tag_num)
            if value is not None:
                return value
        return None

    def add_group(self, count_tag, entries):
        self.body.add_group(count_tag, entries)

    def get_group(self, count_tag):
        """Return the list of body rows for a repeating group, or None."""
        return self.body.groups.get(count_tag)

    @staticmethod
    def calculate_checksum(raw_message: str) -> str:
        """Sum of all bytes modulo 256, as the three digit string carried by tag 10."""
        msg_bytes = raw_message.encode('latin-1')

        total_sum = sum(msg_bytes)
        checksum_val = total_sum % 256

        return f"{checksum_val:03}"

    @staticmethod
    def validate_message(full_message: str) -> bool:

        # Separate the message from the checksum tag (10)
        marker = f"{FixMessage.SOH}{FixTag.CHECKSUM}="
        idx = full_message.rfind(marker)
        if idx == -1:
            return False

        body_to_check = full_message[:idx + 1]
        received_checksum = full_message[idx + len(marker):].rstrip(FixMessage.SOH)

        expected = FixMessage.calculate_checksum(body_to_check)
        return expected == received_checksum

    def encode(self) -> str:

        # 1. Everything after BodyLength: MsgType first, rest of header, body, trailer.
        #    Tag 10 is skipped because we're about to calculate it.
        content = ""
        msg_type = self.msg_type
        if msg_type is not None:
            content += f"{FixTag.MSG_TYPE}={msg_type}{FixMessage.SOH}"
        content += self.header.encode(skip=FRAMING_HEAD)
        content += self.body.encode()
        content += self.trailer.encode(skip=(FixTag.CHECKSUM,))

        # 2. BeginString and BodyLength lead the message
        begin_string = self.header.get_tag(FixTag.BEGIN_STRING)
        raw = (f"{FixTag.BEGIN_STRING}={begin_string}{FixMessage.SOH}"
               f"{FixTag.BODY_LENGTH}={len(content.encode('latin-1'))}{FixMessage.SOH}"
               f"{content}")

        check_sum = FixMessage.calculate_checksum(raw)
        return f"{raw}{FixTag.CHECKSUM}={check_sum}{FixMessage.SOH}"
