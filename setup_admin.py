"""
Script Utilitário: setup_admin.py
Use este script para criar o primeiro Administrador ou promover um
usuário existente a Administrador.
"""

import getpass

from escola import create_app
from escola.core.constants import TABELA_USUARIOS
from escola.core.estado import obter_coordenador
from escola.core.modelos import Usuario, novo_id

# Inicializa a aplicação para carregar configurações e banco de dados
app = create_app()


def promover_usuario(email):
    print(f"--- Configurando administrador: {email} ---")

    with app.app_context():
        coordenador = obter_coordenador()
        estado = coordenador.recarregar()
        usuario = next((u for u in estado.usuarios if u.email == email.lower()), None)

        if usuario is not None:
            resultado = coordenador.cliente.put(TABELA_USUARIOS, usuario.id, {'role': 'admin', 'status': 'active'})
            print(f"✅ SUCESSO! O usuário '{email}' agora é um ADMIN.")
        else:
            nome = input("Usuário não encontrado. Nome do novo administrador: ").strip()
            senha = getpass.getpass("Senha: ")
            novo = Usuario(id=novo_id(), name=nome or 'Administrador', email=email, role='admin')
            resultado = coordenador.adicionar_usuario(novo, senha)
            print(f"✅ SUCESSO! Administrador '{email}' criado.")

        if resultado.offline:
            print("⚠️  ATENÇÃO: Banco remoto inacessível. A alteração foi gravada apenas no espelho local.")
        print("⚠️  IMPORTANTE: Para que a mudança surta efeito, faça LOGOUT e LOGIN novamente.")


if __name__ == "__main__":
    email_alvo = input("Digite o e-mail do usuário que será Admin: ").strip()
    promover_usuario(email_alvo)
