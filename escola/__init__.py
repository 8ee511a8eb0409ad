"""
Módulo Principal da Aplicação (Application Factory)
"""

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix # Necessário atrás do proxy do Cloud Run

from config import Config

from .core.api import ClienteApi
from .core.database import BancoFirestore
from .core.erros import ErroPersistencia, ErroReforco, ErroValidacao, FalhaEmLote
from .core.espelho_local import EspelhoLocal
from .core.estado import Coordenador
from .core.extensions import limiter
from .core.logger import get_logger

logger = get_logger(__name__)


def _registrar_erros(app: Flask) -> None:
    """Traduz as exceções de domínio para JSON {"erro": mensagem}."""

    @app.errorhandler(ErroValidacao)
    def erro_validacao(e):
        return jsonify({'erro': str(e)}), 400

    @app.errorhandler(ErroPersistencia)
    def erro_persistencia(e):
        logger.error(f"Gravação recusada ({e.tabela}): {e}")
        return jsonify({'erro': str(e)}), 409

    @app.errorhandler(ErroReforco)
    def erro_reforco(e):
        return jsonify({
            'erro': str(e),
            'avaliacao_salva': True,
            'avaliacao_id': e.avaliacao_id,
            'aluno_id': e.aluno_id,
        }), 502

    @app.errorhandler(FalhaEmLote)
    def falha_em_lote(e):
        return jsonify({'erro': str(e), 'relatorio': e.relatorio.para_dict()}), 502

    @app.errorhandler(HTTPException)
    def erro_http(e):
        # 401, 403, 404, 405, 429... sempre em JSON
        return jsonify({'erro': e.description}), e.code

    @app.errorhandler(Exception)
    def erro_inesperado(e):
        logger.error(f"Erro inesperado: {e}", exc_info=True)
        return jsonify({'erro': 'Erro interno.'}), 500


def create_app(config_class=Config, remoto=None):
    """
    Cria e configura uma instância da aplicação Flask.

    'remoto' permite injetar o banco remoto (os testes usam um falso);
    sem ele, o Firestore é usado quando FIRESTORE_ENABLED.
    """

    app = Flask(__name__, instance_relative_config=True)

    # === CORREÇÃO HTTPS (Cloud Run) ===
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # 1. Carrega a configuração
    app.config.from_object(config_class)
    app.json.ensure_ascii = False

    # 2. Extensões
    limiter.init_app(app)

    # 3. Persistência (banco remoto + espelho local) e Coordenador
    if remoto is None and app.config.get('FIRESTORE_ENABLED'):
        remoto = BancoFirestore(projeto=app.config.get('GOOGLE_CLOUD_PROJECT'))

    cliente = ClienteApi(remoto=remoto, local=EspelhoLocal(app.config.get('LOCAL_DB_PATH')))
    coordenador = Coordenador(cliente)
    app.extensions['escola'] = coordenador
    coordenador.recarregar()

    # 4. Configura os Blueprints (Módulos)
    from .auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/')

    from .cadastros import cadastros_bp
    app.register_blueprint(cadastros_bp)

    from .avaliacoes import avaliacoes_bp
    app.register_blueprint(avaliacoes_bp)

    from .reforco import reforco_bp
    app.register_blueprint(reforco_bp)

    from .relatorios import relatorios_bp
    app.register_blueprint(relatorios_bp)

    from .mural import mural_bp
    app.register_blueprint(mural_bp)

    from .planejamento import planejamento_bp
    app.register_blueprint(planejamento_bp)

    _registrar_erros(app)

    @app.before_request
    def atualizar_estado():
        # Outras instâncias podem ter gravado no mesmo banco
        if request.endpoint in (None, 'health_check', 'static'):
            return
        coordenador.recarregar_se_vencido(app.config.get('ESTADO_VALIDADE_SEGUNDOS', 5))

    # 5. Rota de Health Check
    @app.route("/health")
    def health_check():
        return f"Servidor {app.config.get('NOME_ESCOLA', 'Escola')} no ar!", 200

    return app
