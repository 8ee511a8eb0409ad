from flask_wtf import FlaskForm
from wtforms import FieldList, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, Regexp


class PlanoAulaForm(FlaskForm):
    class Meta:
        csrf = False

    title = StringField('Tema', validators=[DataRequired(message="Tema da aula é obrigatório"), Length(max=200)])
    date = StringField('Data', validators=[
        DataRequired(message="Data é obrigatória"),
        Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Use o formato AAAA-MM-DD"),
    ])
    class_id = StringField('Turma', validators=[DataRequired(message="Turma é obrigatória")])
    subject_id = StringField('Disciplina', validators=[Optional()])
    duration = StringField('Duração', validators=[Optional(), Length(max=30)])
    objectives = TextAreaField('Objetivos', validators=[Optional()])
    content = TextAreaField('Conteúdo', validators=[Optional()])
    methodology = TextAreaField('Metodologia', validators=[Optional()])
    resources = TextAreaField('Recursos', validators=[Optional()])
    evaluation = TextAreaField('Avaliação', validators=[Optional()])
    bncc_skill_ids = FieldList(StringField('Habilidade'))


class GerarPlanoForm(FlaskForm):
    class Meta:
        csrf = False

    title = StringField('Tema', validators=[DataRequired(message="Informe o tema da aula"), Length(max=200)])
    class_id = StringField('Turma', validators=[DataRequired(message="Selecione a turma")])
    subject_id = StringField('Disciplina', validators=[DataRequired(message="Selecione a disciplina")])
    bncc_skill_ids = FieldList(StringField('Habilidade'))
