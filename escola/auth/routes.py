"""
Rotas do Módulo de Autenticação

Gerencia /login, /logout, /sessao e o Portal dos Pais.
"""

from flask import abort, jsonify, session

from . import auth_bp
from . import services as auth_services
from .forms import LoginForm, PortalResponsavelForm
from escola.core.estado import obter_coordenador
from escola.core.extensions import limiter
from escola.core.formularios import carregar_form, dados_json
from escola.relatorios import services as relatorios_services


# === EQUIPE ESCOLAR ===

@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    form = carregar_form(LoginForm, dados_json())
    usuario = auth_services.autenticar(form.email.data, form.senha.data)
    if usuario is None:
        abort(401, "E-mail ou senha inválidos.")

    session.pop(auth_services.SESSAO_RESPONSAVEL, None)
    session[auth_services.SESSAO_USUARIO] = usuario.para_sessao()
    return jsonify({'usuario': usuario.para_sessao()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.pop(auth_services.SESSAO_USUARIO, None)
    session.pop(auth_services.SESSAO_RESPONSAVEL, None)
    return jsonify({'mensagem': 'Sessão encerrada.'})


@auth_bp.route('/sessao')
def sessao():
    perfil = auth_services.exigir_login()
    cliente = obter_coordenador().cliente
    return jsonify({'usuario': perfil, 'online': cliente.check_connection()})


# === PORTAL DOS PAIS ===

@auth_bp.route('/portal/login', methods=['POST'])
@limiter.limit("10 per minute")
def portal_login():
    form = carregar_form(PortalResponsavelForm, dados_json())
    aluno = auth_services.autenticar_responsavel(form.matricula.data, form.nascimento.data)
    if aluno is None:
        abort(401, "Matrícula ou data de nascimento não conferem.")

    session[auth_services.SESSAO_RESPONSAVEL] = {'aluno_id': aluno.id}
    return jsonify({'aluno': {'id': aluno.id, 'name': aluno.name}})


@auth_bp.route('/portal/aluno')
def portal_aluno():
    """Ficha, boletim e linha do tempo do aluno (somente leitura)."""
    acesso = session.get(auth_services.SESSAO_RESPONSAVEL)
    if not acesso:
        abort(401, "Acesso ao portal expirado.")

    estado = obter_coordenador().estado
    aluno = estado.aluno(acesso['aluno_id'])
    if aluno is None:
        abort(404, "Aluno não encontrado.")

    return jsonify({
        'ficha': relatorios_services.ficha_do_aluno(aluno, estado),
        'boletim': relatorios_services.montar_boletim(aluno.id, estado.avaliacoes, estado.habilidades),
        'linha_do_tempo': relatorios_services.linha_do_tempo(aluno, estado.avaliacoes, estado.habilidades),
    })
