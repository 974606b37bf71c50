"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length

from canvasfriends.constants import GROUP_CODE_LENGTH, GROUP_NAME_MAX_LENGTH


def _strip(value):
    if value is None:
        return ""
    return str(value).strip()


class ApiForm(FlaskForm):
    """Base form for JSON bodies authenticated with a bearer token."""

    class Meta:
        csrf = False


class GroupForm(ApiForm):
    """Form for creating a new group."""

    name = StringField(
        "Group Name",
        filters=[_strip],
        validators=[DataRequired(), Length(max=GROUP_NAME_MAX_LENGTH)],
    )


class JoinGroupForm(ApiForm):
    """Form for joining a group by its code."""

    code = StringField(
        "Group Code",
        filters=[_strip],
        validators=[
            DataRequired(),
            Length(
                min=GROUP_CODE_LENGTH,
                max=GROUP_CODE_LENGTH,
                message=f"Group codes are {GROUP_CODE_LENGTH} characters long.",
            ),
        ],
    )
