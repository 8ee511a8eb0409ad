"""
Rotas do Módulo de Reforço Escolar
"""

from flask import abort, jsonify, request

from . import reforco_bp
from . import services as reforco_services
from .forms import ConclusaoForm, DiarioForm, MatriculaForm, TurmaReforcoForm
from escola.auth import services as auth_services
from escola.core.constants import PAPEIS_EXCLUSAO
from escola.core.erros import ErroValidacao
from escola.core.estado import obter_coordenador
from escola.core.formularios import carregar_form, dados_json
from escola.core.modelos import DiarioDeClasse, novo_id
from escola.core.respostas import resposta_gravacao


@reforco_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


# === VISÕES ===

@reforco_bp.route('/risco')
def alunos_em_risco():
    estado = obter_coordenador().estado
    return jsonify(reforco_services.agrupar_alunos_em_risco(estado))


@reforco_bp.route('/turmas')
def turmas_reforco():
    estado = obter_coordenador().estado
    return jsonify(reforco_services.resumir_turmas_reforco(estado))


@reforco_bp.route('/permanencia')
def permanencia():
    coordenador = obter_coordenador()
    return jsonify(reforco_services.relatorio_permanencia(
        coordenador.estado,
        coordenador.relogio(),
        turma_id=request.args.get('turma_id'),
        inicio=request.args.get('inicio'),
        fim=request.args.get('fim'),
    ))


# === AÇÕES ===

@reforco_bp.route('/turmas', methods=['POST'])
def criar_turma_reforco():
    form = carregar_form(TurmaReforcoForm, dados_json())
    turma = obter_coordenador().criar_turma_reforco(form.name.data, form.teacher_id.data or None)
    return jsonify(turma.para_registro()), 201


@reforco_bp.route('/matricular', methods=['POST'])
def matricular():
    form = carregar_form(MatriculaForm, dados_json())
    patch = obter_coordenador().matricular_no_reforco(form.aluno_id.data, form.turma_id.data)
    return jsonify({'aluno_id': patch.aluno_id, 'campos': patch.campos, 'mensagem': patch.mensagem})


@reforco_bp.route('/concluir', methods=['POST'])
def concluir():
    form = carregar_form(ConclusaoForm, dados_json())
    patch = obter_coordenador().concluir_reforco(form.aluno_id.data, confirmado=form.confirmado.data)
    return jsonify({'aluno_id': patch.aluno_id, 'campos': patch.campos, 'mensagem': patch.mensagem})


# === DIÁRIO DE CLASSE ===

@reforco_bp.route('/diarios')
def listar_diarios():
    turma_id = request.args.get('turma_id')
    if not turma_id:
        abort(400, "Informe a turma.")
    estado = obter_coordenador().estado
    return jsonify(reforco_services.listar_diarios(estado, turma_id))


@reforco_bp.route('/diarios', methods=['POST'])
def criar_diario():
    dados = dados_json()
    form = carregar_form(DiarioForm, dados)

    chamada = dados.get('attendance') or {}
    if not isinstance(chamada, dict):
        raise ErroValidacao("A chamada deve ser um objeto {aluno_id: presente}.")
    invalidos = [aluno_id for aluno_id, presente in chamada.items() if not isinstance(presente, bool)]
    if invalidos:
        raise ErroValidacao(f"Presença inválida para {', '.join(invalidos)}: use true ou false.")

    diario = DiarioDeClasse(
        id=novo_id(),
        class_id=form.class_id.data,
        date=form.date.data,
        content=form.content.data.strip(),
        attendance={str(aluno_id): presente for aluno_id, presente in chamada.items()},
    )
    persistido = obter_coordenador().adicionar_diario(diario)
    return resposta_gravacao(persistido, 201, id=diario.id)


@reforco_bp.route('/diarios/<diario_id>', methods=['DELETE'])
def excluir_diario(diario_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_diario(diario_id)
    return resposta_gravacao(persistido, id=diario_id)


@reforco_bp.route('/frequencia/<turma_id>')
def frequencia(turma_id):
    estado = obter_coordenador().estado
    return jsonify(reforco_services.frequencia_da_turma(estado, turma_id))
