from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional, Regexp

from escola.core.constants import CATEGORIAS_MATERIAL, TIPOS_AVISO


class AvisoForm(FlaskForm):
    class Meta:
        csrf = False

    title = StringField('Título', validators=[DataRequired(message="Título é obrigatório"), Length(max=200)])
    content = TextAreaField('Conteúdo', validators=[DataRequired(message="Conteúdo é obrigatório"), Length(max=5000)])
    date = StringField('Data', validators=[Optional(), Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Use o formato AAAA-MM-DD")])
    type = StringField('Tipo', validators=[Optional(), AnyOf(TIPOS_AVISO, message="Tipo de aviso inválido")])
    attachment_url = StringField('Anexo', validators=[Optional(), Length(max=500)])


class MaterialForm(FlaskForm):
    class Meta:
        csrf = False

    title = StringField('Título', validators=[DataRequired(message="Título é obrigatório"), Length(max=200)])
    category = StringField('Categoria', validators=[
        DataRequired(message="Categoria é obrigatória"),
        AnyOf(CATEGORIAS_MATERIAL, message="Categoria inválida"),
    ])
    description = TextAreaField('Descrição', validators=[Optional(), Length(max=2000)])
    subject_id = StringField('Disciplina', validators=[Optional()])
    file_url = StringField('Link', validators=[Optional(), Length(max=500)])
