"""
Repeating group templates.

A template is the flat, depth-first list of tags that may legally appear in
one row of a repeating group, nested sub-groups included. The parser uses it
to delimit rows on the wire and the beautifier uses it to fetch them back.
"""

from py_fix_tools.fix_dictionary import flatten_parts
from py_fix_tools.fix_errors import GroupTemplateError


def find_group_def(group_tag, field_defs):
    """Return the group-count FieldDef for group_tag among field_defs.

    Raises GroupTemplateError if the tag is not declared there as a group.
    """
    for field_def in field_defs:
        if field_def.tag == group_tag:
            if not field_def.is_group or not flatten_parts(field_def.members or ()):
                raise GroupTemplateError(f"Tag {group_tag} ({field_def.name}) is not a repeating group")
            return field_def
    raise GroupTemplateError(f"Group {group_tag} is not declared in the enclosing layout")


def resolve_template(group_tag, field_defs) -> list:
    """
    Ordered list of tags making up one row of the group counted by group_tag.

    :param group_tag: the NoXxx tag
    :param field_defs: flattened field definitions of the enclosing layout
    :return: e.g. [600, 602, 604, 605] for a leg row with a nested security-alt-id group
    """
    group_def = find_group_def(group_tag, field_defs)
    member_defs = flatten_parts(group_def.members)

    template = []
    for member in member_defs:
        template.append(member.tag)
        if member.is_group:
            # Nested rows follow their count tag
            template.extend(resolve_template(member.tag, member_defs))
    return template
