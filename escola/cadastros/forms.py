from flask_wtf import FlaskForm
from wtforms import BooleanField, FieldList, IntegerField, PasswordField, StringField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional, Regexp

from escola.core.constants import PAPEIS, TURNOS


class TurmaForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField('Nome', validators=[DataRequired(message="Nome da turma é obrigatório"), Length(max=100)])
    grade = StringField('Série', validators=[DataRequired(message="Série é obrigatória"), Length(max=50)])
    year = IntegerField('Ano Letivo', validators=[
        InputRequired(message="Ano letivo é obrigatório"),
        NumberRange(min=2000, max=2100, message="Ano letivo inválido"),
    ])
    shift = StringField('Turno', validators=[Optional(), AnyOf(TURNOS, message="Turno inválido")])
    teacher_ids = FieldList(StringField('Professor'))
    is_remediation = BooleanField('Turma de Reforço')


class AlunoForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField('Nome', validators=[
        DataRequired(message="Nome é obrigatório"),
        Length(min=3, max=100, message="Nome deve ter entre 3 e 100 caracteres"),
    ])
    class_id = StringField('Turma', validators=[DataRequired(message="Turma é obrigatória")])
    registration_number = StringField('Matrícula', validators=[Optional(), Length(max=30)])
    birth_date = StringField('Data de Nascimento', validators=[
        Optional(),
        Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Use o formato AAAA-MM-DD"),
    ])
    parent_name = StringField('Responsável', validators=[Optional(), Length(max=100)])
    phone = StringField('Telefone', validators=[Optional(), Length(max=30)])
    avatar_url = StringField('Foto', validators=[Optional(), Length(max=500)])
    has_specificities = BooleanField('Possui Especificidades')
    specificity_description = StringField('Descrição das Especificidades', validators=[Optional(), Length(max=1000)])


class HabilidadeForm(FlaskForm):
    class Meta:
        csrf = False

    code = StringField('Código', validators=[DataRequired(message="Código BNCC é obrigatório"), Length(max=20)])
    description = StringField('Descrição', validators=[DataRequired(message="Descrição é obrigatória")])
    subject = StringField('Disciplina', validators=[Optional(), Length(max=100)])
    year = StringField('Ano/Série', validators=[Optional(), Length(max=50)])


class VinculoTurmasForm(FlaskForm):
    class Meta:
        csrf = False

    turma_ids = FieldList(StringField('Turma'))


class DisciplinaForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField('Nome', validators=[DataRequired(message="Nome da disciplina é obrigatório"), Length(max=100)])


class UsuarioForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField('Nome', validators=[DataRequired(message="Nome é obrigatório"), Length(max=100)])
    email = StringField('E-mail', validators=[
        DataRequired(message="E-mail é obrigatório"),
        Regexp(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", message="E-mail inválido"),
    ])
    role = StringField('Perfil', validators=[DataRequired(message="Perfil é obrigatório"), AnyOf(PAPEIS, message="Perfil inválido")])
    senha = PasswordField('Senha', validators=[Optional(), Length(min=6, message="A senha deve ter ao menos 6 caracteres")])
