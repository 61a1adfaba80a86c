from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired


def strip_value(value):
    """Coerce a JSON scalar to a stripped string; blank becomes None."""
    if value is None:
        return None
    return str(value).strip() or None


class ApiForm(FlaskForm):
    """Base form for JSON request bodies.

    Flask-WTF reads ``request.get_json()`` for submitted JSON requests.
    The API authenticates with the session cookie and does not use CSRF
    tokens.
    """
    class Meta:
        csrf = False


class LoginForm(ApiForm):
    """Form for user login.

    Fields:
        usr_email: Directory e-mail address
        usr_pwd: Password
        remember_me: Remember login flag
    """
    usr_email = StringField(
        'Email',
        filters=[strip_value],
        validators=[DataRequired(message='Email is required')]
    )
    usr_pwd = PasswordField(
        'Password',
        validators=[DataRequired(message='Password is required')]
    )
    remember_me = BooleanField('Remember Me')
