from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField
from wtforms.validators import DataRequired

from bolao.utils.outcome import Outcome


class MakePickForm(FlaskForm):
    class Meta:
        csrf = False

    gameId = IntegerField("Jogo", validators=[DataRequired()])
    choice = SelectField(
        "Palpite",
        validators=[DataRequired()],
        choices=[(o.value, o.value) for o in Outcome],
    )
