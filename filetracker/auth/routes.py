from flask import current_app, jsonify
from flask_login import current_user, login_user, logout_user, login_required
from filetracker.auth import bp
from filetracker.auth.decorators import current_identity, identity_for
from filetracker.auth.forms import LoginForm
from filetracker.errors import InvalidPayload, Unauthenticated
from filetracker.extensions import limiter
from filetracker.models import DirectoryUser


def _user_payload(identity):
    return {
        'id': identity.id,
        'name': identity.name,
        'role': identity.role,
        'dept': identity.department_id,
    }


@bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute")  # Protect against brute force
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise InvalidPayload(form.errors)

    user = DirectoryUser.query.filter_by(usr_email=form.usr_email.data).first()
    if user is None or not user.check_password(str(form.usr_pwd.data)):
        current_app.logger.info(f'Failed login for {form.usr_email.data}')
        raise Unauthenticated('Invalid email or password.')

    login_user(user, remember=form.remember_me.data)
    current_app.logger.info(f'User {user.user_id} logged in')
    return jsonify({'user': _user_payload(identity_for(user))})


@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    user_id = current_user.user_id
    logout_user()
    current_app.logger.info(f'User {user_id} logged out')
    return jsonify({'success': True})


@bp.route('/me')
@login_required
def me():
    return jsonify({'user': _user_payload(current_identity())})
