"""
Rotas do Módulo do Mural

Avisos: qualquer usuário lê; admin e coordenação publicam e editam.
Biblioteca: upload para o GCS com validação de extensão; o download é
sempre por Signed URL temporária.
"""

from dataclasses import replace

from flask import abort, jsonify, request
from werkzeug.utils import secure_filename

from . import mural_bp
from .forms import AvisoForm, MaterialForm
from escola.auth import services as auth_services
from escola.core import storage
from escola.core.constants import PAPEIS_EDICAO_AVISOS, PAPEIS_EXCLUSAO
from escola.core.datas import hoje_iso, timestamp_ou_zero
from escola.core.estado import obter_coordenador
from escola.core.formularios import carregar_form, dados_json
from escola.core.logger import get_logger
from escola.core.modelos import Aviso, Material, novo_id
from escola.core.respostas import resposta_gravacao

logger = get_logger(__name__)

EXTENSOES_PERMITIDAS = {'pdf', 'doc', 'docx', 'ppt', 'pptx', 'xls', 'xlsx', 'odt', 'png', 'jpg', 'jpeg'}


@mural_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


def _arquivo_enviado():
    """Arquivo do multipart 'arquivo', já validado. None se não enviado."""
    arquivo = request.files.get('arquivo')
    if arquivo is None or arquivo.filename == '':
        return None

    nome = secure_filename(arquivo.filename)
    extensao = nome.rsplit('.', 1)[-1].lower() if '.' in nome else ''
    if extensao not in EXTENSOES_PERMITIDAS:
        logger.warning(f"Upload rejeitado (extensão '{extensao}'): {arquivo.filename}")
        abort(400, "Tipo de arquivo não permitido.")
    return arquivo, nome


def _gravar_removendo_orfao(gravar, blob):
    """Se o registro não for gravado, o arquivo recém-enviado é apagado do bucket."""
    try:
        return gravar()
    except Exception:
        if blob:
            logger.warning(f"Registro não gravado; removendo o upload {blob}.")
            storage.delete_file(blob)
        raise


def _dados_requisicao() -> dict:
    """Aceita JSON ou multipart (quando há arquivo)."""
    if request.files or request.form:
        return request.form.to_dict()
    return dados_json()


# === AVISOS ===

@mural_bp.route('/avisos')
def listar_avisos():
    estado = obter_coordenador().estado
    avisos = sorted(estado.avisos, key=lambda aviso: timestamp_ou_zero(aviso.date), reverse=True)
    return jsonify([aviso.para_registro() for aviso in avisos])


def _campos_aviso(form: AvisoForm, anexo: str = None) -> dict:
    return {
        'title': form.title.data.strip(),
        'content': form.content.data.strip(),
        'date': form.date.data or hoje_iso(obter_coordenador().relogio()),
        'type': form.type.data or 'general',
        'attachment_url': anexo or form.attachment_url.data or None,
    }


@mural_bp.route('/avisos', methods=['POST'])
def criar_aviso():
    auth_services.exigir_papel(*PAPEIS_EDICAO_AVISOS)
    form = carregar_form(AvisoForm, _dados_requisicao())

    enviado = _arquivo_enviado()
    anexo = storage.upload_file(enviado[0], enviado[1], pasta='avisos') if enviado else None

    aviso = Aviso(id=novo_id(), **_campos_aviso(form, anexo))
    persistido = _gravar_removendo_orfao(lambda: obter_coordenador().adicionar_aviso(aviso), anexo)
    return resposta_gravacao(persistido, 201, id=aviso.id)


@mural_bp.route('/avisos/<aviso_id>', methods=['PUT'])
def atualizar_aviso(aviso_id):
    auth_services.exigir_papel(*PAPEIS_EDICAO_AVISOS)
    coordenador = obter_coordenador()
    existente = next((a for a in coordenador.estado.avisos if a.id == aviso_id), None)
    if existente is None:
        abort(404, "Aviso não encontrado.")

    form = carregar_form(AvisoForm, _dados_requisicao())
    enviado = _arquivo_enviado()
    novo_anexo = storage.upload_file(enviado[0], enviado[1], pasta='avisos') if enviado else None
    anexo = novo_anexo or form.attachment_url.data or existente.attachment_url

    persistido = _gravar_removendo_orfao(
        lambda: coordenador.atualizar_aviso(replace(existente, **_campos_aviso(form, anexo))),
        novo_anexo,
    )
    return resposta_gravacao(persistido, id=aviso_id)


@mural_bp.route('/avisos/<aviso_id>', methods=['DELETE'])
def excluir_aviso(aviso_id):
    auth_services.exigir_papel(*PAPEIS_EDICAO_AVISOS)
    coordenador = obter_coordenador()
    existente = next((a for a in coordenador.estado.avisos if a.id == aviso_id), None)

    persistido = coordenador.excluir_aviso(aviso_id)
    if existente and existente.attachment_url and not existente.attachment_url.startswith(('http://', 'https://')):
        storage.delete_file(existente.attachment_url)
    return resposta_gravacao(persistido, id=aviso_id)


# === BIBLIOTECA DIGITAL ===

@mural_bp.route('/materiais')
def listar_materiais():
    estado = obter_coordenador().estado
    busca = (request.args.get('busca') or '').strip().lower()
    categoria = request.args.get('categoria')
    disciplina = request.args.get('disciplina_id')

    materiais = []
    for material in estado.materiais:
        if categoria and material.category != categoria:
            continue
        if disciplina and material.subject_id != disciplina:
            continue
        if busca and busca not in material.title.lower() and busca not in material.description.lower():
            continue
        materiais.append(material)

    materiais.sort(key=lambda m: timestamp_ou_zero(m.created_at), reverse=True)
    return jsonify([material.para_registro() for material in materiais])


@mural_bp.route('/materiais', methods=['POST'])
def criar_material():
    form = carregar_form(MaterialForm, _dados_requisicao())

    enviado = _arquivo_enviado()
    enviado_blob = None
    if enviado:
        arquivo = enviado_blob = storage.upload_file(enviado[0], enviado[1], pasta='materiais')
    elif form.file_url.data:
        arquivo = form.file_url.data
    else:
        abort(400, "Envie um arquivo ou informe um link.")

    material = Material(
        id=novo_id(),
        title=form.title.data.strip(),
        file_url=arquivo,
        category=form.category.data,
        description=form.description.data or '',
        subject_id=form.subject_id.data or None,
    )
    persistido = _gravar_removendo_orfao(lambda: obter_coordenador().adicionar_material(material), enviado_blob)
    return resposta_gravacao(persistido, 201, id=material.id)


@mural_bp.route('/materiais/<material_id>/download')
def baixar_material(material_id):
    estado = obter_coordenador().estado
    material = next((m for m in estado.materiais if m.id == material_id), None)
    if material is None:
        abort(404, "Material não encontrado.")

    # Links externos são devolvidos como estão
    if material.file_url.startswith(('http://', 'https://')):
        return jsonify({'url': material.file_url})

    url = storage.generate_signed_url(material.file_url)
    if not url:
        abort(502, "Não foi possível gerar o link de download.")
    return jsonify({'url': url})


@mural_bp.route('/materiais/<material_id>', methods=['DELETE'])
def excluir_material(material_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    coordenador = obter_coordenador()
    material = next((m for m in coordenador.estado.materiais if m.id == material_id), None)

    persistido = coordenador.excluir_material(material_id)
    if material and not material.file_url.startswith(('http://', 'https://')):
        storage.delete_file(material.file_url)
    return resposta_gravacao(persistido, id=material_id)
