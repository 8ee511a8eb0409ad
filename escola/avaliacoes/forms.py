from flask_wtf import FlaskForm
from wtforms import FloatField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, NumberRange, Optional, Regexp

from escola.core.constants import TRIMESTRES
from escola.core.modelos import StatusAvaliacao

STATUS_VALIDOS = [status.value for status in StatusAvaliacao]
NOTA = [Optional(), NumberRange(min=0, max=10, message="A nota deve estar entre 0 e 10")]
DATA = [Optional(), Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Use o formato AAAA-MM-DD")]


class AvaliacaoForm(FlaskForm):
    class Meta:
        csrf = False

    student_id = StringField('Aluno', validators=[DataRequired(message="Aluno é obrigatório")])
    skill_id = StringField('Habilidade', validators=[Optional()])
    subject_id = StringField('Disciplina', validators=[Optional()])
    status = StringField('Resultado', validators=[
        DataRequired(message="Resultado é obrigatório"),
        AnyOf(STATUS_VALIDOS, message="Resultado inválido"),
    ])
    date = StringField('Data', validators=DATA)
    term = StringField('Trimestre', validators=[Optional(), AnyOf(TRIMESTRES, message="Trimestre inválido")])
    notes = TextAreaField('Observações', validators=[Optional(), Length(max=2000)])
    participation_score = FloatField('Participação', validators=NOTA)
    behavior_score = FloatField('Comportamento', validators=NOTA)
    exam_score = FloatField('Prova', validators=NOTA)


class LoteNotasForm(FlaskForm):
    class Meta:
        csrf = False

    turma_id = StringField('Turma', validators=[DataRequired(message="Turma é obrigatória")])
    habilidade_id = StringField('Habilidade', validators=[DataRequired(message="Habilidade é obrigatória")])
    trimestre = StringField('Trimestre', validators=[
        DataRequired(message="Trimestre é obrigatório"),
        AnyOf(TRIMESTRES, message="Trimestre inválido"),
    ])
    date = StringField('Data', validators=DATA)


class LinhaGradeForm(FlaskForm):
    """Uma linha da grade; 'status' vazio = aluno não avaliado."""
    class Meta:
        csrf = False

    id = StringField('Avaliação', validators=[Optional()])
    student_id = StringField('Aluno', validators=[DataRequired(message="Aluno é obrigatório")])
    status = StringField('Resultado', validators=[Optional(), AnyOf(STATUS_VALIDOS, message="Resultado inválido")])
    notes = TextAreaField('Observações', validators=[Optional(), Length(max=2000)])
    participation_score = FloatField('Participação', validators=NOTA)
    behavior_score = FloatField('Comportamento', validators=NOTA)
    exam_score = FloatField('Prova', validators=NOTA)
