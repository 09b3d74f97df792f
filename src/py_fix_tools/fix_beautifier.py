"""
Human readable rendering of FIX messages.

Responsibility: Turn a raw message into a report with four sections
(original text, header, body, trailer). Fields are listed in the order the
dictionary declares them, components expanded in place, repeating groups
rendered row by row with a deeper indent:

    [  35]                         MsgType: D [NEW_ORDER_SINGLE]
    [ 555]                          NoLegs: 2
    [ 600]                    #0 LegSymbol: BTC-USD
    [ 600]                    #1 LegSymbol: ETH-USD

Problems with a single field or group are reported inline and never stop
the rest of the message from being rendered.
"""

import logging

from py_fix_tools.fix_dictionary import flatten_parts
from py_fix_tools.fix_errors import FieldMapError, FixParseError, GroupTemplateError
from py_fix_tools.fix_group_template import resolve_template
from py_fix_tools.fix_message import FixMessage
from py_fix_tools.fix_parser import as_text, parse

logger = logging.getLogger(__name__)

# Which part of a message a field map belongs to
HEADER = 0
BODY = 1
TRAILER = 2
GROUP = 3

PRINT_PREFIX = 32
PRINT_PREFIX_INC = 4

SEPARATOR = "-" * 68 + "\n"


def beautify_string(raw) -> str:
    """Raw message with SOH shown as '|'."""
    return as_text(raw).replace(FixMessage.SOH, "|")


class Beautifier:

    def __init__(self, dictionary):
        self.dictionary = dictionary

    def beautify(self, raw) -> str:
        """Render a raw message.

        A message that can't be parsed comes back as an error line followed by
        the raw text, SOH delimiters included.
        """
        try:
            msg = parse(raw, self.dictionary)
        except FixParseError as e:
            logger.debug("Cannot parse message: %s", e)
            return f"Error: {e}\n{as_text(raw)}"

        return "\nORIG:\n{}\n\nHEADER:\n{}\nBODY:\n{}\nTRAILER:\n{}\n".format(
            beautify_string(raw),
            self.render_field_map(msg.header, self.dictionary.header_parts(), HEADER),
            self.render_field_map(msg.body, self.dictionary.message_parts(msg.msg_type), BODY),
            self.render_field_map(msg.trailer, self.dictionary.trailer_parts(), TRAILER),
        )

    @staticmethod
    def render_field(tag, name, value, desc, prefix, index=None) -> str:
        label = name if index is None else f"#{index} {name}"
        line = f"\t[{tag:4d}]\t{label:>{prefix}}: {value}"
        if desc:
            line += f" [{desc}]"
        return line + "\n"

    def render_field_map(self, field_map, parts, message_part, prefix=PRINT_PREFIX, index=None) -> str:
        """
        Render one field map against its layout.

        :param field_map: header, body, trailer or a single group row
        :param parts: the layout (message parts) declared for it
        :param message_part: HEADER, BODY, TRAILER or GROUP
        :param prefix: width of the name column
        :param index: row number shown on the first line of a group row, None to omit it
        """
        res = []
        if message_part != GROUP:
            res.append(SEPARATOR)

        field_defs = flatten_parts(parts)
        declared = {f.tag for f in field_defs}

        for field_def in field_defs:
            value = field_map.get_tag(field_def.tag)
            if value is None:
                continue
            res.append(self._render_entry(field_map, field_def, value, field_defs, prefix, index))
            index = None

        # Present on the wire but not declared for this layout
        for tag in sorted(set(field_map.tags) - declared):
            value = field_map.get_tag(tag)
            field_def = self.dictionary.field_by_tag(tag)
            if field_def is None:
                logger.debug("Tag %d is not in the dictionary", tag)
                res.append(f"ERROR: TAG[{tag}]=VALUE[{value}]\n")
            else:
                res.append(self._render_entry(field_map, field_def, value, field_defs, prefix, index))
            index = None

        return "".join(res)

    def _render_entry(self, field_map, field_def, value, field_defs, prefix, index):
        tag = field_def.tag
        if not field_def.is_group:
            return self.render_field(tag, field_def.name, value, field_def.enum_description(value), prefix, index)

        res = self.render_field(tag, field_def.name, value, "", prefix, index)

        try:
            template = resolve_template(tag, field_defs)
        except GroupTemplateError as e:
            logger.debug("%s", e)
            return res + f"ERROR: GROUP[{tag}]=VALUE[{value}]\n"

        try:
            rows = field_map.get_group(tag, template)
        except FieldMapError as e:
            logger.debug("%s", e)
            template_str = ",".join(str(t) for t in template)
            return res + f"ERROR: GROUP[{tag}]=VALUE[{value}] TEMPLATE[{template_str}]\n"

        numbered = len(rows) > 1
        for i, row in enumerate(rows):
            res += self.render_field_map(
                row, field_def.members, GROUP, prefix + PRINT_PREFIX_INC, i if numbered else None)
        return res
