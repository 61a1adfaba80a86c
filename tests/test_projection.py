from datetime import datetime
from filetracker import workflow
from filetracker.extensions import db
from filetracker.models import Movement, MovementFile
from filetracker.movements import projection
from conftest import ADMIN, STAFF, HR, FINANCE_STAFF


def _serialized(move_id):
    return projection.serialize_movement(db.session.get(Movement, move_id))


def test_serialized_movement_is_enriched(app_ctx):
    move_id = workflow.submit_request(STAFF, [101, 102], remark='Audit').move_id
    workflow.approve(ADMIN, move_id)

    data = _serialized(move_id)
    assert data['move_id'] == move_id
    assert data['status_id'] == 3
    assert data['status_name'] == 'Approved'
    assert data['status_label'] == 'approved'
    assert data['requested_by'] == STAFF.id
    assert data['requested_by_name'] == 'Sam Staff'
    assert data['approved_by_name'] == 'Ada Admin'
    assert data['department_id'] == 7
    assert data['department_name'] == 'Records'
    assert data['remark'] == 'Audit'
    assert data['approved_at'].endswith('+00:00')
    assert data['taken_at'] is None
    assert data['return_at'] is None


def test_files_ordered_by_folder_then_name(app_ctx):
    move_id = workflow.submit_request(STAFF, [103, 101, 102]).move_id
    files = _serialized(move_id)['files']
    assert [f['file_id'] for f in files] == [102, 101, 103]
    assert files[0] == {
        'file_id': 102,
        'file_name': 'Appraisals',
        'folder_id': 2,
        'folder_name': 'A-Contracts',
    }


def test_file_without_folder_is_listed(app_ctx):
    movement = Movement(move_type='Take Out', requested_by=STAFF.id)
    db.session.add(movement)
    db.session.flush()
    db.session.add(MovementFile(move_id=movement.move_id, file_id=999))
    db.session.commit()

    data = _serialized(movement.move_id)
    assert data['files'] == [{
        'file_id': 999,
        'file_name': 'Loose Sheet',
        'folder_id': None,
        'folder_name': None,
    }]
    # No folder: the department falls back to the requester's
    assert data['department_id'] == 7


def test_unknown_requester_renders_as_none(app_ctx):
    movement = Movement(move_type='Take Out', requested_by=4242)
    db.session.add(movement)
    db.session.flush()
    db.session.add(MovementFile(move_id=movement.move_id, file_id=201))
    db.session.commit()

    data = _serialized(movement.move_id)
    assert data['requested_by'] == 4242
    assert data['requested_by_name'] is None
    assert data['approved_by_name'] is None
    assert data['department_name'] == 'Finance'


def test_timestamps_use_configured_timezone(app_ctx):
    app_ctx.config['TIMEZONE'] = 'Asia/Kuala_Lumpur'
    movement = Movement(
        move_type='Take Out',
        requested_by=STAFF.id,
        approved_at=datetime(2024, 3, 1, 23, 30)
    )
    db.session.add(movement)
    db.session.commit()

    assert _serialized(movement.move_id)['approved_at'] == '2024-03-02T07:30:00+08:00'


def test_listing_queries(app_ctx):
    first = workflow.submit_request(STAFF, [101]).move_id
    second = workflow.submit_request(HR, [102]).move_id
    finance = workflow.submit_request(FINANCE_STAFF, [201]).move_id
    workflow.reject(ADMIN, first, 'No')

    assert [m.move_id for m in projection.all_movements()] == [finance, second, first]
    assert [m.move_id for m in projection.movements_requested_by(STAFF.id)] == [first]
    assert [m.move_id for m in projection.movements_for_department(7)] == [second, first]
    assert [m.move_id for m in projection.movements_for_department(8)] == [finance]
    assert [m.move_id for m in projection.pending_movements()] == [finance, second]
    assert [m.move_id for m in projection.notifications_for(STAFF.id)] == [first]
    assert list(projection.notifications_for(HR.id)) == []


def test_serialize_many_keeps_order(app_ctx):
    ids = [
        workflow.submit_request(STAFF, [101]).move_id,
        workflow.submit_request(FINANCE_STAFF, [201]).move_id,
    ]
    rows = projection.serialize_movements(projection.all_movements().all())
    assert [row['move_id'] for row in rows] == list(reversed(ids))
    assert [row['department_name'] for row in rows] == ['Finance', 'Records']
    assert projection.serialize_movements([]) == []


def test_department_of(app_ctx):
    move_id = workflow.submit_request(FINANCE_STAFF, [201]).move_id
    assert projection.department_of(db.session.get(Movement, move_id)) == 8
