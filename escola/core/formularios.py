"""
Validação de payloads JSON com WTForms.

O front-end envia JSON; os formulários do Flask-WTF esperam formdata.
carregar_form converte o dicionário (listas viram 'campo-0', 'campo-1',
como o FieldList espera) e lança ErroValidacao com a primeira mensagem.
"""

from typing import Any, Dict, Type, TypeVar

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from .erros import ErroValidacao

F = TypeVar('F', bound=FlaskForm)


def dados_json() -> Dict[str, Any]:
    dados = request.get_json(silent=True)
    if dados is None:
        return {}
    if not isinstance(dados, dict):
        raise ErroValidacao("O corpo da requisição deve ser um objeto JSON.")
    return dados


def _para_formdata(dados: Dict[str, Any]) -> MultiDict:
    formdata = MultiDict()
    for chave, valor in dados.items():
        if valor is None:
            continue
        if isinstance(valor, (list, tuple)):
            for indice, item in enumerate(valor):
                formdata.add(f"{chave}-{indice}", str(item))
        elif isinstance(valor, bool):
            # BooleanField: ausente = False
            if valor:
                formdata.add(chave, 'y')
        elif isinstance(valor, dict):
            continue
        else:
            formdata.add(chave, str(valor))
    return formdata


def _primeira_mensagem(erros: Any, campo: str = '') -> str:
    if isinstance(erros, dict):
        for nome, valor in erros.items():
            return _primeira_mensagem(valor, str(nome))
    if isinstance(erros, (list, tuple)) and erros:
        return _primeira_mensagem(erros[0], campo)
    return f"{campo}: {erros}" if campo else str(erros)


def carregar_form(form_cls: Type[F], dados: Dict[str, Any]) -> F:
    if dados is not None and not isinstance(dados, dict):
        raise ErroValidacao("Dados inválidos: esperado um objeto JSON.")
    form = form_cls(formdata=_para_formdata(dados or {}), meta={'csrf': False})
    if not form.validate():
        raise ErroValidacao(_primeira_mensagem(form.errors))
    return form
