import pytest
from filetracker.errors import EmptySelection, UnknownFiles, CrossDepartment
from filetracker.scope import validate_files_in_department


def test_files_of_own_department_pass(app_ctx):
    assert validate_files_in_department([101, 102], 7) == [101, 102]


def test_duplicate_ids_are_collapsed(app_ctx):
    assert validate_files_in_department([102, 101, 102], 7) == [102, 101]


def test_empty_selection(app_ctx):
    with pytest.raises(EmptySelection):
        validate_files_in_department([], 7)
    with pytest.raises(EmptySelection):
        validate_files_in_department([None], 7)


def test_unknown_files_are_enumerated(app_ctx):
    with pytest.raises(UnknownFiles) as excinfo:
        validate_files_in_department([101, 999, 5000], 7)
    assert excinfo.value.files == [999, 5000]
    assert excinfo.value.to_dict()['error'] == 'unknown_files'


def test_unknown_files_reported_before_department(app_ctx):
    with pytest.raises(UnknownFiles) as excinfo:
        validate_files_in_department([201, 999], 7)
    assert excinfo.value.files == [999]


def test_cross_department_names_only_offending_files(app_ctx):
    with pytest.raises(CrossDepartment) as excinfo:
        validate_files_in_department([101, 201, 201], 7)
    assert excinfo.value.files == [201]
    assert '201' in excinfo.value.message
