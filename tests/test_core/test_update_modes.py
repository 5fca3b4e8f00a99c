"""
Tests the update modes and their application to group records.
"""

from groupdir.core.group import GroupData, GroupFields
from groupdir.core.models import FullReplace, GroupUpdateRequest, Patch
from groupdir.service.directory import apply_update


def make_group() -> GroupData:
    return GroupData(
        group_name="g",
        description="old",
        external_name="old_ext",
        extension={"a": {"x": 1}, "b": 2},
    )


def test_patch_replaces_top_level_extension_keys():
    group = make_group()
    updated = apply_update(group, Patch(data=GroupFields(extension={"a": {"y": 2}})))

    assert updated.extension == {"a": {"y": 2}, "b": 2}
    assert updated.description == "old"
    assert updated.external_name == "old_ext"

    # The input is left untouched
    assert group.extension == {"a": {"x": 1}, "b": 2}


def test_patch_only_touches_supplied_fields():
    updated = apply_update(make_group(), Patch(data=GroupFields(description="new")))

    assert updated.description == "new"
    assert updated.external_name == "old_ext"
    assert updated.extension == {"a": {"x": 1}, "b": 2}


def test_patch_explicit_null():
    updated = apply_update(make_group(), Patch(data=GroupFields(external_name=None)))

    assert updated.external_name is None
    assert updated.description == "old"


def test_patch_empty_extension_is_a_no_op():
    updated = apply_update(make_group(), Patch(data=GroupFields(extension={})))

    assert updated.extension == {"a": {"x": 1}, "b": 2}


def test_patch_null_extension_is_a_no_op():
    mode = Patch(data=GroupFields(extension=None))
    assert mode.data.model_fields_set == {"extension"}

    updated = apply_update(make_group(), mode)

    assert updated.extension == {"a": {"x": 1}, "b": 2}


def test_patch_into_absent_extension():
    group = make_group()
    group.extension = None

    updated = apply_update(group, Patch(data=GroupFields(extension={"k": "v"})))

    assert updated.extension == {"k": "v"}


def test_full_replace_clears_omitted_fields():
    updated = apply_update(make_group(), FullReplace(data=GroupFields(description="d")))

    assert updated.group_name == "g"
    assert updated.description == "d"
    assert updated.external_name is None
    assert updated.extension is None


def test_update_request_modes():
    request = GroupUpdateRequest.model_validate(
        {"data": {"groupname": "g", "externalName": None}, "patch": True}
    )
    mode = request.to_mode()

    assert isinstance(mode, Patch)
    assert mode.data.model_fields_set == {"external_name"}

    request = GroupUpdateRequest.model_validate(
        {"data": {"groupname": "g", "description": "d"}}
    )
    mode = request.to_mode()

    assert isinstance(mode, FullReplace)
    assert mode.data.description == "d"
    assert mode.data.extension is None
