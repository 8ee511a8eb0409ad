from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Length, Regexp


class LoginForm(FlaskForm):
    class Meta:
        csrf = False  # API JSON; a sessão é protegida pelo cookie assinado

    email = StringField('E-mail', validators=[
        DataRequired(message="E-mail é obrigatório"),
        Regexp(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", message="E-mail inválido"),
    ])
    senha = PasswordField('Senha', validators=[DataRequired(message="Senha é obrigatória")])


class PortalResponsavelForm(FlaskForm):
    class Meta:
        csrf = False

    matricula = StringField('Matrícula', validators=[
        DataRequired(message="Matrícula é obrigatória"),
        Length(max=30),
    ])
    nascimento = StringField('Data de Nascimento', validators=[
        DataRequired(message="Data de nascimento é obrigatória"),
        Regexp(r'^\d{4}-\d{2}-\d{2}', message="Use o formato AAAA-MM-DD"),
    ])
