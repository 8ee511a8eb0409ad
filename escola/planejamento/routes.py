"""
Rotas do Módulo do Planejador de Aulas
"""

from dataclasses import replace

from flask import abort, jsonify, request

from . import planejamento_bp
from . import services as planejamento_services
from .forms import GerarPlanoForm, PlanoAulaForm
from escola.auth import services as auth_services
from escola.core.constants import PAPEIS_EXCLUSAO
from escola.core.estado import obter_coordenador
from escola.core.formularios import carregar_form, dados_json
from escola.core.modelos import PlanoDeAula, novo_id
from escola.core.respostas import resposta_gravacao


@planejamento_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


def _campos_plano(form: PlanoAulaForm) -> dict:
    return {
        'title': form.title.data.strip(),
        'date': form.date.data,
        'class_id': form.class_id.data,
        'subject_id': form.subject_id.data or '',
        'duration': form.duration.data or '50 min',
        'objectives': form.objectives.data or '',
        'content': form.content.data or '',
        'methodology': form.methodology.data or '',
        'resources': form.resources.data or '',
        'evaluation': form.evaluation.data or '',
        'bncc_skill_ids': [h for h in form.bncc_skill_ids.data if h],
    }


@planejamento_bp.route('/planos')
def listar_planos():
    estado = obter_coordenador().estado
    turma_id = request.args.get('turma_id')
    planos = [p for p in estado.planos if not turma_id or p.class_id == turma_id]
    planos.sort(key=lambda p: p.date, reverse=True)
    return jsonify([plano.para_registro() for plano in planos])


@planejamento_bp.route('/planos', methods=['POST'])
def criar_plano():
    form = carregar_form(PlanoAulaForm, dados_json())
    plano = PlanoDeAula(id=novo_id(), **_campos_plano(form))
    persistido = obter_coordenador().adicionar_plano(plano)
    return resposta_gravacao(persistido, 201, id=plano.id)


@planejamento_bp.route('/planos/<plano_id>', methods=['PUT'])
def atualizar_plano(plano_id):
    coordenador = obter_coordenador()
    existente = next((p for p in coordenador.estado.planos if p.id == plano_id), None)
    if existente is None:
        abort(404, "Plano de aula não encontrado.")

    form = carregar_form(PlanoAulaForm, dados_json())
    persistido = coordenador.atualizar_plano(replace(existente, **_campos_plano(form)))
    return resposta_gravacao(persistido, id=plano_id)


@planejamento_bp.route('/planos/<plano_id>', methods=['DELETE'])
def excluir_plano(plano_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_plano(plano_id)
    return resposta_gravacao(persistido, id=plano_id)


@planejamento_bp.route('/gerar', methods=['POST'])
def gerar_plano():
    """Sugere objetivos, conteúdo, metodologia, recursos e avaliação (não grava)."""
    form = carregar_form(GerarPlanoForm, dados_json())
    estado = obter_coordenador().estado

    turma = estado.turma(form.class_id.data)
    if turma is None:
        abort(404, "Turma não encontrada.")
    disciplina = next((d for d in estado.disciplinas if d.id == form.subject_id.data), None)
    if disciplina is None:
        abort(404, "Disciplina não encontrada.")

    habilidades = [h for h in estado.habilidades if h.id in set(form.bncc_skill_ids.data)]
    plano = planejamento_services.gerar_plano_ia(form.title.data.strip(), disciplina.name, turma.name, habilidades)
    return jsonify(plano)
