import pytest

from py_fix_tools.fix_dictionary import flatten_parts
from py_fix_tools.fix_errors import GroupTemplateError
from py_fix_tools.fix_group_template import find_group_def, resolve_template


def test_nested_group_is_spliced_after_its_count(dictionary):
    field_defs = flatten_parts(dictionary.message_parts("D"))
    assert resolve_template(555, field_defs) == [600, 624, 604, 605, 606]


def test_group_declared_in_component(dictionary):
    field_defs = flatten_parts(dictionary.message_parts("D"))
    assert resolve_template(453, field_defs) == [448, 447, 452]
    assert resolve_template(454, field_defs) == [455, 456]


def test_component_inside_group(dictionary):
    field_defs = flatten_parts(dictionary.message_parts("y"))
    assert resolve_template(146, field_defs) == [55, 48, 454, 455, 456, 15]


def test_resolve_from_row_layout(dictionary):
    legs = find_group_def(555, flatten_parts(dictionary.message_parts("D")))
    assert resolve_template(604, flatten_parts(legs.members)) == [605, 606]


def test_header_group(dictionary):
    field_defs = flatten_parts(dictionary.header_parts())
    assert resolve_template(627, field_defs) == [628, 629]


def test_group_not_in_enclosing_layout(dictionary):
    # NoRelatedSym exists in the dictionary but not in a NewOrderSingle
    field_defs = flatten_parts(dictionary.message_parts("D"))
    with pytest.raises(GroupTemplateError):
        resolve_template(146, field_defs)


def test_scalar_field_has_no_template(dictionary):
    field_defs = flatten_parts(dictionary.message_parts("D"))
    with pytest.raises(GroupTemplateError):
        resolve_template(54, field_defs)


def test_group_without_member_fields(empty_group_dictionary):
    field_defs = flatten_parts(empty_group_dictionary.message_parts("X"))
    with pytest.raises(GroupTemplateError):
        resolve_template(555, field_defs)
