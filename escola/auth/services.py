"""
Camada de Serviço (Service Layer) da Autenticação

Login da equipe (e-mail/senha, com fallback para o espelho local),
login do Portal dos Pais e as verificações de sessão e papel usadas
pelos demais Blueprints.
"""

from typing import Any, Dict, Optional

from flask import abort, session

from escola.core.datas import parte_data
from escola.core.erros import ErroValidacao
from escola.core.estado import obter_coordenador
from escola.core.logger import get_logger
from escola.core.modelos import Aluno, Usuario

# Inicializa o logger para este módulo
logger = get_logger(__name__)

SESSAO_USUARIO = 'user_profile'
SESSAO_RESPONSAVEL = 'responsavel'


def autenticar(email: str, senha: str) -> Optional[Usuario]:
    """
    Confere as credenciais. Retorna None se não conferem.
    Usuário inativo gera ErroValidacao (não pode entrar).
    """
    coordenador = obter_coordenador()
    resultado = coordenador.cliente.login(email, senha)
    usuario = resultado.dados

    if usuario is None:
        logger.warning(f"Tentativa de login inválida: {email}")
        return None

    if not usuario.ativo:
        logger.warning(f"Login bloqueado (usuário inativo): {usuario.email}")
        raise ErroValidacao("Usuário inativo. Procure a coordenação.")

    if resultado.offline:
        logger.warning(f"Login de {usuario.email} validado no espelho local (modo offline).")
    logger.info(f"Login efetuado: {usuario.email} (Role: {usuario.role})")

    coordenador.recarregar()
    return usuario


def autenticar_responsavel(matricula: str, nascimento: str) -> Optional[Aluno]:
    """Portal dos Pais: matrícula + data de nascimento de um aluno ativo."""
    coordenador = obter_coordenador()
    estado = coordenador.recarregar()

    matricula = (matricula or '').strip()
    nascimento = parte_data(nascimento)
    for aluno in estado.alunos:
        if (
            aluno.ativo
            and aluno.registration_number
            and aluno.registration_number.strip() == matricula
            and parte_data(aluno.birth_date) == nascimento
        ):
            logger.info(f"Portal dos Pais: acesso ao aluno {aluno.id}")
            return aluno

    logger.warning(f"Portal dos Pais: matrícula não encontrada ({matricula})")
    return None


def usuario_logado() -> Optional[Dict[str, Any]]:
    return session.get(SESSAO_USUARIO)


def exigir_login() -> Dict[str, Any]:
    perfil = usuario_logado()
    if not perfil:
        abort(401, "Sessão expirada. Faça login novamente.")
    return perfil


def exigir_papel(*papeis: str) -> Dict[str, Any]:
    perfil = exigir_login()
    if perfil.get('role') not in papeis:
        logger.warning(f"Acesso negado: {perfil.get('email')} ({perfil.get('role')})")
        abort(403, "Seu perfil não tem permissão para esta ação.")
    return perfil
