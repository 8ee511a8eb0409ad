"""
Rotas do Módulo de Cadastros

Turmas, alunos, habilidades, disciplinas e usuários. Toda gravação passa
pelo Coordenador, que recarrega as coleções em seguida.
Professores não excluem registros; só o admin gerencia usuários.
"""

from dataclasses import replace

from flask import abort, jsonify

from . import cadastros_bp
from .forms import AlunoForm, DisciplinaForm, HabilidadeForm, TurmaForm, UsuarioForm, VinculoTurmasForm
from escola.auth import services as auth_services
from escola.core.constants import DISCIPLINA_GERAL, PAPEIS_EXCLUSAO, PAPEIS_GESTAO_USUARIOS
from escola.core.estado import obter_coordenador
from escola.core.formularios import carregar_form, dados_json
from escola.core.modelos import Aluno, Habilidade, Turma, Usuario, novo_id
from escola.core.respostas import resposta_gravacao


@cadastros_bp.before_request
def restringir_acesso():
    auth_services.exigir_login()


def _campos_turma(form: TurmaForm) -> dict:
    return {
        'name': form.name.data.strip(),
        'grade': form.grade.data.strip(),
        'year': form.year.data,
        'shift': form.shift.data or None,
        'teacher_ids': [t for t in form.teacher_ids.data if t],
        'is_remediation': form.is_remediation.data,
    }


def _campos_aluno(form: AlunoForm) -> dict:
    return {
        'name': form.name.data.strip(),
        'class_id': form.class_id.data,
        'registration_number': form.registration_number.data or None,
        'birth_date': form.birth_date.data or None,
        'parent_name': form.parent_name.data or None,
        'phone': form.phone.data or None,
        'avatar_url': form.avatar_url.data or None,
        'has_specificities': form.has_specificities.data,
        'specificity_description': form.specificity_description.data or None,
    }


def _campos_habilidade(form: HabilidadeForm) -> dict:
    return {
        'code': form.code.data.strip().upper(),
        'description': form.description.data.strip(),
        'subject': (form.subject.data or '').strip() or DISCIPLINA_GERAL,
        'year': form.year.data or '',
    }


# === TURMAS ===

@cadastros_bp.route('/turmas')
def listar_turmas():
    estado = obter_coordenador().estado
    return jsonify([turma.para_registro() for turma in estado.turmas])


@cadastros_bp.route('/turmas', methods=['POST'])
def criar_turma():
    form = carregar_form(TurmaForm, dados_json())
    turma = Turma(id=novo_id(), **_campos_turma(form))
    persistido = obter_coordenador().adicionar_turma(turma)
    return resposta_gravacao(persistido, 201, id=turma.id)


@cadastros_bp.route('/turmas/<turma_id>', methods=['PUT'])
def atualizar_turma(turma_id):
    coordenador = obter_coordenador()
    existente = coordenador.estado.turma(turma_id)
    if existente is None:
        abort(404, "Turma não encontrada.")

    form = carregar_form(TurmaForm, dados_json())
    persistido = coordenador.atualizar_turma(replace(existente, **_campos_turma(form)))
    return resposta_gravacao(persistido, id=turma_id)


@cadastros_bp.route('/turmas/<turma_id>/status', methods=['POST'])
def alternar_status_turma(turma_id):
    novo_status = obter_coordenador().alternar_status_turma(turma_id)
    return jsonify({'id': turma_id, 'status': novo_status})


@cadastros_bp.route('/turmas/<turma_id>', methods=['DELETE'])
def excluir_turma(turma_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_turma(turma_id)
    return resposta_gravacao(persistido, id=turma_id)


# === ALUNOS ===

@cadastros_bp.route('/alunos')
def listar_alunos():
    estado = obter_coordenador().estado
    return jsonify([aluno.para_registro() for aluno in estado.alunos])


@cadastros_bp.route('/alunos', methods=['POST'])
def criar_aluno():
    form = carregar_form(AlunoForm, dados_json())
    aluno = Aluno(id=novo_id(), **_campos_aluno(form))
    persistido = obter_coordenador().adicionar_aluno(aluno)
    return resposta_gravacao(persistido, 201, id=aluno.id)


@cadastros_bp.route('/alunos/<aluno_id>', methods=['PUT'])
def atualizar_aluno(aluno_id):
    # Datas de reforço e status têm rotas próprias
    form = carregar_form(AlunoForm, dados_json())
    persistido = obter_coordenador().atualizar_aluno(aluno_id, _campos_aluno(form))
    return resposta_gravacao(persistido, id=aluno_id)


@cadastros_bp.route('/alunos/<aluno_id>/status', methods=['POST'])
def alternar_status_aluno(aluno_id):
    novo_status = obter_coordenador().alternar_status_aluno(aluno_id)
    return jsonify({'id': aluno_id, 'status': novo_status})


@cadastros_bp.route('/alunos/<aluno_id>', methods=['DELETE'])
def excluir_aluno(aluno_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_aluno(aluno_id)
    return resposta_gravacao(persistido, id=aluno_id)


# === HABILIDADES BNCC ===

@cadastros_bp.route('/habilidades')
def listar_habilidades():
    estado = obter_coordenador().estado
    return jsonify([habilidade.para_registro() for habilidade in estado.habilidades])


@cadastros_bp.route('/habilidades', methods=['POST'])
def criar_habilidade():
    form = carregar_form(HabilidadeForm, dados_json())
    habilidade = Habilidade(id=novo_id(), **_campos_habilidade(form))
    persistido = obter_coordenador().adicionar_habilidade(habilidade)
    return resposta_gravacao(persistido, 201, id=habilidade.id)


@cadastros_bp.route('/habilidades/<habilidade_id>', methods=['PUT'])
def atualizar_habilidade(habilidade_id):
    coordenador = obter_coordenador()
    existente = coordenador.estado.habilidade(habilidade_id)
    if existente is None:
        abort(404, "Habilidade não encontrada.")

    form = carregar_form(HabilidadeForm, dados_json())
    persistido = coordenador.atualizar_habilidade(replace(existente, **_campos_habilidade(form)))
    return resposta_gravacao(persistido, id=habilidade_id)


@cadastros_bp.route('/habilidades/<habilidade_id>', methods=['DELETE'])
def excluir_habilidade(habilidade_id):
    auth_services.exigir_papel(*PAPEIS_EXCLUSAO)
    persistido = obter_coordenador().excluir_habilidade(habilidade_id)
    return resposta_gravacao(persistido, id=habilidade_id)


@cadastros_bp.route('/habilidades/<habilidade_id>/turmas', methods=['POST'])
def vincular_habilidade(habilidade_id):
    """Define em quais turmas a habilidade é foco (grava só as turmas alteradas)."""
    form = carregar_form(VinculoTurmasForm, dados_json())
    relatorio = obter_coordenador().vincular_habilidade_turmas(habilidade_id, [t for t in form.turma_ids.data if t])
    return jsonify(relatorio.para_dict())


# === DISCIPLINAS ===

@cadastros_bp.route('/disciplinas')
def listar_disciplinas():
    estado = obter_coordenador().estado
    return jsonify([disciplina.para_registro() for disciplina in estado.disciplinas])


@cadastros_bp.route('/disciplinas', methods=['POST'])
def criar_disciplina():
    form = carregar_form(DisciplinaForm, dados_json())
    disciplina = obter_coordenador().adicionar_disciplina(form.name.data)
    return jsonify(disciplina.para_registro()), 201


# === USUÁRIOS (somente admin) ===

@cadastros_bp.route('/usuarios')
def listar_usuarios():
    auth_services.exigir_papel(*PAPEIS_GESTAO_USUARIOS)
    estado = obter_coordenador().estado
    return jsonify([usuario.para_sessao() for usuario in estado.usuarios])


@cadastros_bp.route('/usuarios', methods=['POST'])
def criar_usuario():
    auth_services.exigir_papel(*PAPEIS_GESTAO_USUARIOS)
    form = carregar_form(UsuarioForm, dados_json())
    usuario = Usuario(id=novo_id(), name=form.name.data.strip(), email=form.email.data, role=form.role.data)
    persistido = obter_coordenador().adicionar_usuario(usuario, form.senha.data)
    return resposta_gravacao(persistido, 201, id=usuario.id)


@cadastros_bp.route('/usuarios/<usuario_id>', methods=['PUT'])
def atualizar_usuario(usuario_id):
    auth_services.exigir_papel(*PAPEIS_GESTAO_USUARIOS)
    form = carregar_form(UsuarioForm, dados_json())
    campos = {'name': form.name.data.strip(), 'email': form.email.data, 'role': form.role.data}
    persistido = obter_coordenador().atualizar_usuario(usuario_id, campos, senha=form.senha.data)
    return resposta_gravacao(persistido, id=usuario_id)


@cadastros_bp.route('/usuarios/<usuario_id>', methods=['DELETE'])
def excluir_usuario(usuario_id):
    perfil = auth_services.exigir_papel(*PAPEIS_GESTAO_USUARIOS)
    if perfil.get('id') == usuario_id:
        abort(400, "Você não pode excluir o próprio usuário.")
    resultado = obter_coordenador().excluir_usuario(usuario_id)
    return jsonify({'id': usuario_id, 'resultado': resultado})
