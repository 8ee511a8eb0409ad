from flask_wtf import FlaskForm
from wtforms import BooleanField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, Regexp


class TurmaReforcoForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField('Nome', validators=[DataRequired(message="Nome da turma é obrigatório"), Length(max=100)])
    teacher_id = StringField('Professor', validators=[Optional()])


class MatriculaForm(FlaskForm):
    class Meta:
        csrf = False

    aluno_id = StringField('Aluno', validators=[DataRequired(message="Aluno é obrigatório")])
    turma_id = StringField('Turma de Reforço', validators=[DataRequired(message="Turma de reforço é obrigatória")])


class ConclusaoForm(FlaskForm):
    class Meta:
        csrf = False

    aluno_id = StringField('Aluno', validators=[DataRequired(message="Aluno é obrigatório")])
    confirmado = BooleanField('Confirmo a conclusão do ciclo')


class DiarioForm(FlaskForm):
    """A chamada (attendance) chega como objeto JSON e é lida à parte."""
    class Meta:
        csrf = False

    class_id = StringField('Turma', validators=[DataRequired(message="Turma é obrigatória")])
    date = StringField('Data', validators=[
        DataRequired(message="Data é obrigatória"),
        Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Use o formato AAAA-MM-DD"),
    ])
    content = TextAreaField('Conteúdo', validators=[DataRequired(message="Conteúdo é obrigatório"), Length(max=5000)])
