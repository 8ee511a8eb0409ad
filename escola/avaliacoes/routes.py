"""
Rotas do Módulo de Avaliações
"""

from flask import abort, jsonify, request

from . import avaliacoes_bp
from . import services as avaliacoes_services
from .forms import AvaliacaoForm, LinhaGradeForm, LoteNotasForm
from escola.auth import services as auth_services
from escola.core.constants import PAPEIS_EXCLUSAO, TRIMESTRE_PADRAO
from escola.core.datas import hoje_iso
from escola.core.estado import obter_coordenador
from escola.core.formularios import carregar_form, dados_json
from escola.core.modelos import Avaliacao, StatusAvaliacao, novo_id
from escola.core.respostas import resposta_gravacao


@avaliacoes_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


@avaliacoes_bp.route('')
def listar_avaliacoes():
    estado = obter_coordenador().estado
    return jsonify(avaliacoes_services.filtrar_avaliacoes(
        estado,
        turma_id=request.args.get('turma_id'),
        trimestre=request.args.get('trimestre'),
        busca=request.args.get('busca'),
    ))


@avaliacoes_bp.route('', methods=['POST'])
def registrar_avaliacao():
    """
    Grava a avaliação e aplica a regra do reforço.
    Se o aluno entrou ou saiu do reforço, 'aviso_reforco' traz a mensagem.
    """
    coordenador = obter_coordenador()
    form = carregar_form(AvaliacaoForm, dados_json())

    avaliacao = Avaliacao(
        id=novo_id(),
        student_id=form.student_id.data,
        status=StatusAvaliacao(form.status.data),
        date=form.date.data or hoje_iso(coordenador.relogio()),
        skill_id=form.skill_id.data or None,
        subject_id=form.subject_id.data or None,
        term=form.term.data or TRIMESTRE_PADRAO,
        notes=form.notes.data or None,
        participation_score=form.participation_score.data,
        behavior_score=form.behavior_score.data,
        exam_score=form.exam_score.data,
    )

    resultado = coordenador.registrar_avaliacao(avaliacao)
    return resposta_gravacao(
        resultado.persistido,
        201,
        id=avaliacao.id,
        aviso_reforco=resultado.patch.mensagem if resultado.patch else None,
    )


@avaliacoes_bp.route('/<avaliacao_id>', methods=['DELETE'])
def excluir_avaliacao(avaliacao_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_avaliacao(avaliacao_id)
    return resposta_gravacao(persistido, id=avaliacao_id)


# === GRADE DE NOTAS (LOTE) ===

@avaliacoes_bp.route('/grade')
def grade_de_notas():
    turma_id = request.args.get('turma_id')
    habilidade_id = request.args.get('habilidade_id')
    if not turma_id or not habilidade_id:
        abort(400, "Informe a turma e a habilidade.")

    estado = obter_coordenador().estado
    trimestre = request.args.get('trimestre') or TRIMESTRE_PADRAO
    return jsonify({
        'turma_id': turma_id,
        'habilidade_id': habilidade_id,
        'trimestre': trimestre,
        'linhas': avaliacoes_services.montar_grade(estado, turma_id, habilidade_id, trimestre),
    })


@avaliacoes_bp.route('/lote', methods=['POST'])
def salvar_lote():
    """
    Salva a grade inteira. Linhas com 'id' de avaliação existente são
    atualizadas; as demais, inseridas. Falha parcial responde 502 com o
    relatório item a item.
    """
    coordenador = obter_coordenador()
    dados = dados_json()
    form = carregar_form(LoteNotasForm, dados)

    linhas = [carregar_form(LinhaGradeForm, linha).data for linha in dados.get('linhas') or []]

    if coordenador.estado.turma(form.turma_id.data) is None:
        abort(404, "Turma não encontrada.")
    habilidade = coordenador.estado.habilidade(form.habilidade_id.data)
    if habilidade is None:
        abort(404, "Habilidade não encontrada.")
    disciplina = next((d for d in coordenador.estado.disciplinas if d.name == habilidade.subject), None)

    avaliacoes = avaliacoes_services.linhas_para_avaliacoes(
        linhas,
        habilidade_id=habilidade.id,
        trimestre=form.trimestre.data,
        data=form.date.data or hoje_iso(coordenador.relogio()),
        disciplina_id=disciplina.id if disciplina else None,
    )
    if not avaliacoes:
        abort(400, "Nenhuma nota informada.")

    relatorio = coordenador.lancar_notas_em_lote(avaliacoes, turma_id=form.turma_id.data)
    return jsonify(relatorio.para_dict())
