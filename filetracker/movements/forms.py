from wtforms import Field, StringField, TextAreaField
from wtforms.validators import Length

from filetracker.auth.forms import ApiForm, strip_value


def _to_id(value):
    if isinstance(value, bool):
        raise ValueError
    return int(value)


class IdField(Field):
    """Optional integer id; JSON null and empty strings mean no value."""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] in (None, ''):
            self.data = None
            return
        try:
            self.data = _to_id(valuelist[0])
        except (TypeError, ValueError):
            self.data = None
            raise ValueError('Not a valid id.')


class IdListField(Field):
    """List of integer ids, read from every value submitted under the name."""

    def process_data(self, value):
        self.data = list(value) if value else []

    def process_formdata(self, valuelist):
        ids = []
        for value in valuelist:
            try:
                ids.append(_to_id(value))
            except (TypeError, ValueError):
                self.data = []
                raise ValueError(f'Not a valid file id: {value!r}')
        self.data = ids


class MovementRequestForm(ApiForm):
    """Body of a new movement request.

    Fields:
        move_type: Free-form label such as "Take Out"
        remark: Optional note from the requester
        folder_id: Optional folder the request is scoped to
        files: Ids of the requested files
    """
    move_type = StringField('Move Type', filters=[strip_value], validators=[Length(max=50)])
    remark = TextAreaField('Remark', filters=[strip_value])
    folder_id = IdField('Folder')
    files = IdListField('Files')


class RejectForm(ApiForm):
    remark = TextAreaField('Remark', filters=[strip_value])
