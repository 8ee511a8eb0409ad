"""
Rotas do Módulo de Relatórios (somente leitura)
"""

from flask import abort, jsonify, request

from . import relatorios_bp
from . import services as relatorios_services
from escola.auth import services as auth_services
from escola.core.constants import TRIMESTRE_PADRAO
from escola.core.estado import obter_coordenador


@relatorios_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


def _aluno_ou_404(estado, aluno_id):
    aluno = estado.aluno(aluno_id)
    if aluno is None:
        abort(404, "Aluno não encontrado.")
    return aluno


@relatorios_bp.route('/alunos/<aluno_id>')
def ficha(aluno_id):
    estado = obter_coordenador().estado
    return jsonify(relatorios_services.ficha_do_aluno(_aluno_ou_404(estado, aluno_id), estado))


@relatorios_bp.route('/alunos/<aluno_id>/boletim')
def boletim(aluno_id):
    estado = obter_coordenador().estado
    aluno = _aluno_ou_404(estado, aluno_id)
    return jsonify(relatorios_services.montar_boletim(aluno.id, estado.avaliacoes, estado.habilidades))


@relatorios_bp.route('/alunos/<aluno_id>/linha-do-tempo')
def linha_do_tempo(aluno_id):
    estado = obter_coordenador().estado
    aluno = _aluno_ou_404(estado, aluno_id)
    return jsonify(relatorios_services.linha_do_tempo(aluno, estado.avaliacoes, estado.habilidades))


@relatorios_bp.route('/mapa')
def mapa_de_habilidades():
    turma_id = request.args.get('turma_id')
    disciplina = request.args.get('disciplina')
    if not turma_id or not disciplina:
        abort(400, "Informe a turma e a disciplina.")

    estado = obter_coordenador().estado
    trimestre = request.args.get('trimestre') or TRIMESTRE_PADRAO
    return jsonify(relatorios_services.mapa_de_habilidades(estado, turma_id, disciplina, trimestre))


@relatorios_bp.route('/conselho/<turma_id>')
def conselho(turma_id):
    estado = obter_coordenador().estado
    if estado.turma(turma_id) is None:
        abort(404, "Turma não encontrada.")
    return jsonify(relatorios_services.ata_conselho(estado, turma_id))


@relatorios_bp.route('/painel')
def painel():
    estado = obter_coordenador().estado
    return jsonify(relatorios_services.resumo_painel(estado, request.args.get('trimestre')))


@relatorios_bp.route('/calendario')
def calendario():
    estado = obter_coordenador().estado
    return jsonify(relatorios_services.calendario(estado))
