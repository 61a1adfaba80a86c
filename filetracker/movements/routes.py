# filetracker/movements/routes.py

from flask import current_app, jsonify, request
from flask_login import login_required

from filetracker import workflow
from filetracker.auth.decorators import admin_required, current_identity, require_role
from filetracker.errors import Forbidden, InvalidPayload, MissingDepartment, NotFound
from filetracker.extensions import db, limiter
from filetracker.models import File, Folder, Movement, MovementLog
from filetracker.movements import bp
from filetracker.movements.forms import MovementRequestForm, RejectForm
from filetracker.movements import projection
from filetracker.utils import format_timestamp


def _department_of(identity):
    if not identity.department_id:
        raise MissingDepartment()
    return identity.department_id


#######################################################################
# REQUEST
#######################################################################

@bp.route('', methods=['POST'])
@login_required
@limiter.limit("30 per hour")
def create_movement():
    """Submit a request to take files out."""
    identity = current_identity()
    form = MovementRequestForm()
    if not form.validate_on_submit():
        raise InvalidPayload(form.errors)

    movement = workflow.submit_request(
        identity,
        form.files.data,
        move_type=form.move_type.data,
        remark=form.remark.data,
        folder_id=form.folder_id.data
    )
    return jsonify({
        'success': True,
        'message': 'Movement request submitted',
        'move_id': movement.move_id,
        'movement': projection.serialize_movement(movement)
    }), 201


#######################################################################
# LISTINGS
#######################################################################

@bp.route('', methods=['GET'])
@login_required
def list_movements():
    """All movements for privileged roles, the caller's own otherwise."""
    identity = current_identity()
    if identity.has_role(current_app.config['VIEW_ALL_ROLES']):
        query = projection.all_movements()
    else:
        query = projection.movements_requested_by(identity.id)
    return jsonify(projection.serialize_movements(query.all()))


@bp.route('/mine')
@login_required
def my_movements():
    identity = current_identity()
    movements = projection.movements_requested_by(identity.id).all()
    return jsonify(projection.serialize_movements(movements))


@bp.route('/department')
@login_required
def department_movements():
    identity = current_identity()
    movements = projection.movements_for_department(_department_of(identity)).all()
    return jsonify(projection.serialize_movements(movements))


@bp.route('/pending')
@login_required
@admin_required
def pending_movements():
    return jsonify(projection.serialize_movements(projection.pending_movements().all()))


@bp.route('/notifications')
@login_required
def notifications():
    """The caller's approved or rejected requests."""
    identity = current_identity()
    movements = projection.notifications_for(identity.id).all()
    return jsonify(projection.serialize_movements(movements))


@bp.route('/check-duplicate')
@login_required
def check_duplicate():
    """Tell whether a user already has a pending request for a file."""
    identity = current_identity()
    file_id = request.args.get('file_id', type=int)
    if file_id is None:
        raise InvalidPayload({'file_id': ['file_id is required and must be an integer']})

    user_id = identity.id
    if request.args.get('user_id') not in (None, ''):
        user_id = request.args.get('user_id', type=int)
        if user_id is None:
            raise InvalidPayload({'user_id': ['user_id must be an integer']})
    if user_id != identity.id:
        require_role(identity, current_app.config['ADMIN_ROLES'])

    return jsonify({
        'user_id': user_id,
        'file_id': file_id,
        'has_pending_request': Movement.has_pending_request(user_id, file_id)
    })


@bp.route('/files/my-department')
@login_required
def department_files():
    """Files the caller may request, by folder name then file name."""
    identity = current_identity()
    rows = File.for_department(_department_of(identity))
    return jsonify([
        {
            'file_id': file.file_id,
            'file_name': file.file_name,
            'folder_id': folder.folder_id,
            'folder_name': folder.folder_name,
        }
        for file, folder in rows
    ])


@bp.route('/folders/my-department')
@login_required
def department_folders():
    identity = current_identity()
    folders = Folder.for_department(_department_of(identity))
    return jsonify([
        {'folder_id': folder.folder_id, 'folder_name': folder.folder_name}
        for folder in folders
    ])


@bp.route('/logs')
@login_required
@admin_required
def movement_logs():
    """Paginated workflow audit trail, newest first."""
    page = request.args.get('page', 1, type=int)
    logs = MovementLog.query.order_by(
        MovementLog.timestamp.desc(),
        MovementLog.id.desc()
    ).paginate(
        page=page,
        per_page=current_app.config['LOGS_PER_PAGE'],
        error_out=False
    )
    return jsonify({
        'page': logs.page,
        'pages': logs.pages,
        'total': logs.total,
        'items': [
            {
                'id': log.id,
                'user_id': log.user_id,
                'action_type': log.action_type,
                'move_id': log.move_id,
                'notes': log.notes,
                'timestamp': format_timestamp(log.timestamp),
            }
            for log in logs.items
        ]
    })


#######################################################################
# SINGLE MOVEMENT
#######################################################################

@bp.route('/<int:move_id>')
@login_required
def get_movement(move_id):
    """Movement detail, for privileged roles, the requester or its department."""
    identity = current_identity()
    movement = db.session.get(Movement, move_id)
    if movement is None:
        raise NotFound(move_id)

    allowed = (
        identity.has_role(current_app.config['VIEW_ALL_ROLES'])
        or movement.requested_by == identity.id
        or (identity.department_id is not None
            and projection.department_of(movement) == identity.department_id)
    )
    if not allowed:
        raise Forbidden('You may only view movements of your department.')

    return jsonify(projection.serialize_movement(movement))


def _transition_response(movement, message):
    return jsonify({
        'success': True,
        'message': message,
        'movement': projection.serialize_movement(movement)
    })


@bp.route('/<int:move_id>/approve', methods=['PUT'])
@login_required
def approve_movement(move_id):
    movement = workflow.approve(current_identity(), move_id)
    return _transition_response(movement, 'Approved')


@bp.route('/<int:move_id>/reject', methods=['PUT'])
@login_required
def reject_movement(move_id):
    identity = current_identity()
    form = RejectForm()
    if not form.validate_on_submit():
        raise InvalidPayload(form.errors)
    movement = workflow.reject(identity, move_id, form.remark.data)
    return _transition_response(movement, 'Rejected')


@bp.route('/<int:move_id>/take-out', methods=['PUT'])
@login_required
def take_out_movement(move_id):
    movement = workflow.take_out(current_identity(), move_id)
    return _transition_response(movement, 'File taken out')


@bp.route('/<int:move_id>/return', methods=['PUT'])
@login_required
def return_movement(move_id):
    movement = workflow.return_files(current_identity(), move_id)
    return _transition_response(movement, 'File returned')


@bp.route('/<int:move_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_movement(move_id):
    workflow.delete_movement(current_identity(), move_id)
    return jsonify({'success': True, 'message': 'File movement deleted successfully'})
