from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    """Name/password login, accepted as JSON or form data.

    The CSRF token travels in the X-CSRFToken header checked by CSRFProtect.
    """

    class Meta:
        csrf = False

    name = StringField("Nome", validators=[DataRequired(), Length(max=80)])
    password = PasswordField("Senha", validators=[DataRequired(), Length(max=128)])
