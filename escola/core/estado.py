"""
Estado da Aplicação e Coordenador (Service Layer central).

O Coordenador é o único dono das coleções carregadas (EstadoEscolar).
Cada comando faz a gravação pelo ClienteApi e, terminando com sucesso ou
erro, recarrega TODAS as tabelas e troca o estado inteiro. Não existe
atualização parcial do cache.

Lotes (grade de notas, vínculo de habilidades) disparam as gravações em
paralelo, esperam todas terminarem e só então relatam o resultado item a
item. Não há nova tentativa nem desfazer: a recarga mostra o que foi
realmente gravado.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import current_app
from werkzeug.security import generate_password_hash

from .api import ClienteApi, Origem, Persistido
from .constants import (
    DISCIPLINAS_PADRAO,
    SERIE_REFORCO,
    TABELA_ALUNOS,
    TABELA_AVALIACOES,
    TABELA_AVISOS,
    TABELA_DIARIOS,
    TABELA_DISCIPLINAS,
    TABELA_HABILIDADES,
    TABELA_MATERIAIS,
    TABELA_PLANOS,
    TABELA_TURMAS,
    TABELA_USUARIOS,
    TURNO_REFORCO,
)
from .datas import agora_utc, hoje_iso, para_iso
from .erros import ErroReforco, ErroValidacao, FalhaEmLote
from .logger import get_logger
from .modelos import (
    Aluno,
    Avaliacao,
    Aviso,
    DiarioDeClasse,
    Disciplina,
    Habilidade,
    Material,
    PlanoDeAula,
    Turma,
    Usuario,
    novo_id,
)
from . import regras

logger = get_logger(__name__)

CAMPOS_NOTA = ('participation_score', 'behavior_score', 'exam_score')


@dataclass
class EstadoEscolar:
    turmas: List[Turma] = field(default_factory=list)
    alunos: List[Aluno] = field(default_factory=list)
    habilidades: List[Habilidade] = field(default_factory=list)
    avaliacoes: List[Avaliacao] = field(default_factory=list)
    usuarios: List[Usuario] = field(default_factory=list)
    diarios: List[DiarioDeClasse] = field(default_factory=list)
    disciplinas: List[Disciplina] = field(default_factory=list)
    avisos: List[Aviso] = field(default_factory=list)
    materiais: List[Material] = field(default_factory=list)
    planos: List[PlanoDeAula] = field(default_factory=list)
    origens: Dict[str, Origem] = field(default_factory=dict)

    def aluno(self, aluno_id: str) -> Optional[Aluno]:
        return next((a for a in self.alunos if a.id == aluno_id), None)

    def turma(self, turma_id: str) -> Optional[Turma]:
        return next((t for t in self.turmas if t.id == turma_id), None)

    def habilidade(self, habilidade_id: str) -> Optional[Habilidade]:
        return next((h for h in self.habilidades if h.id == habilidade_id), None)

    def usuario(self, usuario_id: str) -> Optional[Usuario]:
        return next((u for u in self.usuarios if u.id == usuario_id), None)

    def avaliacao(self, avaliacao_id: str) -> Optional[Avaliacao]:
        return next((a for a in self.avaliacoes if a.id == avaliacao_id), None)

    @property
    def offline(self) -> bool:
        return any(origem is Origem.LOCAL for origem in self.origens.values())


# tabela -> (atributo do EstadoEscolar, leitor do registro)
LEITORES = {
    TABELA_TURMAS: ('turmas', Turma.de_registro),
    TABELA_ALUNOS: ('alunos', Aluno.de_registro),
    TABELA_HABILIDADES: ('habilidades', Habilidade.de_registro),
    TABELA_AVALIACOES: ('avaliacoes', Avaliacao.de_registro),
    TABELA_USUARIOS: ('usuarios', Usuario.de_registro),
    TABELA_DIARIOS: ('diarios', DiarioDeClasse.de_registro),
    TABELA_DISCIPLINAS: ('disciplinas', Disciplina.de_registro),
    TABELA_AVISOS: ('avisos', Aviso.de_registro),
    TABELA_MATERIAIS: ('materiais', Material.de_registro),
    TABELA_PLANOS: ('planos', PlanoDeAula.de_registro),
}


@dataclass
class ItemLote:
    chave: str
    operacao: str  # 'insercao' | 'atualizacao'
    gravado: bool
    origem: Optional[Origem] = None
    erro: Optional[str] = None


@dataclass
class RelatorioLote:
    itens: List[ItemLote] = field(default_factory=list)
    patches: List[regras.PatchAluno] = field(default_factory=list)
    erros_reforco: List[str] = field(default_factory=list)

    @property
    def gravados(self) -> List[ItemLote]:
        return [item for item in self.itens if item.gravado]

    @property
    def falhas(self) -> List[ItemLote]:
        return [item for item in self.itens if not item.gravado]

    @property
    def sucesso(self) -> bool:
        return not self.falhas

    def para_dict(self) -> Dict[str, Any]:
        return {
            'sucesso': self.sucesso,
            'gravados': [item.chave for item in self.gravados],
            'falhas': [{'id': item.chave, 'operacao': item.operacao, 'erro': item.erro} for item in self.falhas],
            'itens': [
                {
                    'id': item.chave,
                    'operacao': item.operacao,
                    'gravado': item.gravado,
                    'origem': item.origem.value if item.origem else None,
                    'erro': item.erro,
                }
                for item in self.itens
            ],
            'avisos_reforco': [patch.mensagem for patch in self.patches],
            'erros_reforco': list(self.erros_reforco),
        }


@dataclass
class ResultadoAvaliacao:
    avaliacao: Avaliacao
    persistido: Persistido
    patch: Optional[regras.PatchAluno] = None


class Coordenador:

    def __init__(self, cliente: ClienteApi, relogio: Callable[[], datetime] = agora_utc, max_paralelo: int = 8):
        self.cliente = cliente
        self.relogio = relogio
        self.max_paralelo = max_paralelo
        self.estado = EstadoEscolar()
        self._lock = threading.Lock()
        self._carregado_em: Optional[float] = None

    # === CARGA ===

    def _ler_tabela(self, tabela: str) -> Tuple[str, Optional[Persistido]]:
        try:
            return tabela, self.cliente.get(tabela)
        except Exception as e:
            # Uma tabela com problema não impede a carga das demais
            logger.warning(f"Aviso: Não foi possível carregar {tabela}: {e}")
            return tabela, None

    def recarregar(self) -> EstadoEscolar:
        novo = EstadoEscolar()

        with ThreadPoolExecutor(max_workers=self.max_paralelo) as executor:
            leituras = list(executor.map(self._ler_tabela, LEITORES))

        for tabela, resultado in leituras:
            atributo, leitor = LEITORES[tabela]
            registros = resultado.dados if resultado and resultado.dados else []
            setattr(novo, atributo, [leitor(registro) for registro in registros if registro.get('id')])
            if resultado:
                novo.origens[tabela] = resultado.origem

        if novo.disciplinas:
            novo.disciplinas.sort(key=lambda d: d.name.lower())
        else:
            novo.disciplinas = [Disciplina.de_registro(d) for d in DISCIPLINAS_PADRAO]

        with self._lock:
            self.estado = novo
            self._carregado_em = time.monotonic()
        return novo

    def recarregar_se_vencido(self, validade: float) -> EstadoEscolar:
        """
        Outros processos gravam no mesmo banco: um estado mais velho que
        'validade' segundos é recarregado antes de ser servido.
        """
        carregado_em = self._carregado_em
        if carregado_em is None or time.monotonic() - carregado_em >= validade:
            return self.recarregar()
        return self.estado

    def _aluno_atual(self, aluno_id: str) -> Aluno:
        """
        Lê o aluno direto do banco. As regras de reforço decidem sobre o
        registro gravado, não sobre a cópia carregada por este processo.
        """
        registro = self.cliente.find(TABELA_ALUNOS, aluno_id).dados
        if registro is None:
            raise ErroValidacao("Aluno não encontrado.")
        return Aluno.de_registro(registro)

    # === GRAVAÇÃO GENÉRICA ===

    def _gravar(self, descricao: str, operacao: Callable[[], Persistido]) -> Persistido:
        try:
            resultado = operacao()
            if resultado.offline:
                logger.warning(f"{descricao}: gravado apenas no espelho local (modo offline).")
            else:
                logger.info(f"{descricao}: gravado.")
            return resultado
        except Exception as e:
            logger.error(f"{descricao}: falhou ({e}).")
            raise
        finally:
            self.recarregar()

    def _inserir(self, tabela: str, entidade: Any) -> Persistido:
        return self._gravar(f"Inserção em {tabela} ({entidade.id})", lambda: self.cliente.post(tabela, entidade.para_registro()))

    def _atualizar(self, tabela: str, doc_id: str, campos: Dict[str, Any]) -> Persistido:
        return self._gravar(f"Atualização em {tabela} ({doc_id})", lambda: self.cliente.put(tabela, doc_id, campos))

    def _excluir(self, tabela: str, doc_id: str) -> Persistido:
        return self._gravar(f"Exclusão em {tabela} ({doc_id})", lambda: self.cliente.delete(tabela, doc_id))

    def _em_paralelo(self, tarefas: List[Tuple[str, Callable[[], Persistido]]]) -> List[Tuple[str, Optional[Persistido], Optional[Exception]]]:
        """Executa todas as tarefas e espera cada uma terminar, com ou sem erro."""
        if not tarefas:
            return []
        with ThreadPoolExecutor(max_workers=self.max_paralelo) as executor:
            futuros = [(chave, executor.submit(tarefa)) for chave, tarefa in tarefas]
            resultados = []
            for chave, futuro in futuros:
                try:
                    resultados.append((chave, futuro.result(), None))
                except Exception as e:
                    resultados.append((chave, None, e))
            return resultados

    def _exigir(self, valor: Any, mensagem: str) -> Any:
        if valor is None:
            raise ErroValidacao(mensagem)
        return valor

    # === AVALIAÇÕES (COM LÓGICA AUTOMÁTICA DE REFORÇO) ===

    def _validar_avaliacao(self, avaliacao: Avaliacao) -> Aluno:
        aluno = self._exigir(self.estado.aluno(avaliacao.student_id), "Aluno não encontrado.")
        if avaliacao.status is None:
            raise ErroValidacao("Informe o resultado da habilidade.")
        if avaliacao.skill_id and self.estado.habilidade(avaliacao.skill_id) is None:
            raise ErroValidacao("Habilidade não encontrada.")
        for campo in CAMPOS_NOTA:
            nota = getattr(avaliacao, campo)
            if nota is not None and not 0 <= nota <= 10:
                raise ErroValidacao(f"'{campo}' deve estar entre 0 e 10.")
        if not avaliacao.date:
            avaliacao.date = hoje_iso(self.relogio())
        return aluno

    def _patch_reforco(self, avaliacao: Avaliacao, aluno: Aluno) -> Optional[regras.PatchAluno]:
        """Aplica a regra e grava o patch no aluno. Erros sobem para quem chamou."""
        patch = regras.avaliar(avaliacao, aluno, self.relogio())
        if patch is None:
            return None
        self.cliente.put(TABELA_ALUNOS, aluno.id, patch.campos)
        logger.info(f"Reforço ({patch.transicao.value}) registrado para o aluno {aluno.id}.")
        return patch

    def registrar_avaliacao(self, avaliacao: Avaliacao) -> ResultadoAvaliacao:
        """
        Grava a avaliação e, em seguida, o patch de reforço do aluno,
        ANTES da recarga. Se só o patch falhar, a avaliação continua
        gravada e ErroReforco é lançado.
        """
        aluno = self._validar_avaliacao(avaliacao)
        erro_reforco = None
        try:
            persistido = self.cliente.post(TABELA_AVALIACOES, avaliacao.para_registro())
            logger.info(f"Avaliação {avaliacao.id} gravada ({persistido.origem.value}).")
            try:
                patch = self._patch_reforco(avaliacao, self._aluno_atual(aluno.id))
            except Exception as e:
                logger.error(f"Erro ao atualizar status de reforço do aluno {aluno.id}: {e}", exc_info=True)
                erro_reforco = ErroReforco(
                    f"A avaliação foi salva, mas o status de reforço não foi atualizado: {e}",
                    avaliacao.id,
                    aluno.id,
                )
        finally:
            self.recarregar()

        if erro_reforco:
            raise erro_reforco
        return ResultadoAvaliacao(avaliacao, persistido, patch)

    def excluir_avaliacao(self, avaliacao_id: str) -> Persistido:
        return self._excluir(TABELA_AVALIACOES, avaliacao_id)

    def lancar_notas_em_lote(self, linhas: List[Avaliacao], turma_id: Optional[str] = None) -> RelatorioLote:
        """
        Grade de notas: linhas cujo id já existe viram atualização, as
        demais inserção. Todas disparam em paralelo; a regra de reforço
        roda depois, só para as linhas gravadas.

        Com 'turma_id', toda linha precisa ser de um aluno ativo da turma;
        caso contrário nada é gravado.
        """
        for linha in linhas:
            aluno = self._validar_avaliacao(linha)
            if turma_id is not None and (aluno.class_id != turma_id or not aluno.ativo):
                raise ErroValidacao(f"O aluno {aluno.name} não é um aluno ativo desta turma.")
        existentes = {a.id for a in self.estado.avaliacoes}

        def tarefa(linha: Avaliacao) -> Callable[[], Persistido]:
            registro = linha.para_registro()
            if linha.id in existentes:
                return lambda: self.cliente.put(TABELA_AVALIACOES, linha.id, registro)
            return lambda: self.cliente.post(TABELA_AVALIACOES, registro)

        relatorio = RelatorioLote()
        try:
            resultados = self._em_paralelo([(linha.id, tarefa(linha)) for linha in linhas])
            por_id = {linha.id: linha for linha in linhas}

            # Aluno lido do banco uma vez por lote; linhas seguintes do mesmo aluno veem o patch anterior
            atuais: Dict[str, Aluno] = {}
            for chave, persistido, erro in resultados:
                operacao = 'atualizacao' if chave in existentes else 'insercao'
                if erro is not None:
                    logger.error(f"Lote de notas: falha em {chave} ({operacao}): {erro}")
                    relatorio.itens.append(ItemLote(chave, operacao, False, erro=str(erro)))
                    continue
                relatorio.itens.append(ItemLote(chave, operacao, True, origem=persistido.origem))

                linha = por_id[chave]
                try:
                    aluno = atuais.get(linha.student_id) or self._aluno_atual(linha.student_id)
                    atuais[aluno.id] = aluno
                    patch = self._patch_reforco(linha, aluno)
                except Exception as e:
                    nome = self.estado.aluno(linha.student_id).name
                    logger.error(f"Lote de notas: reforço do aluno {linha.student_id} não atualizado: {e}")
                    relatorio.erros_reforco.append(f"{nome}: {e}")
                    continue
                if patch:
                    relatorio.patches.append(patch)
                    atuais[aluno.id] = patch.aplicar(aluno)
        finally:
            self.recarregar()

        if not relatorio.sucesso:
            raise FalhaEmLote(
                f"Não foi possível salvar {len(relatorio.falhas)} de {len(relatorio.itens)} avaliações.",
                relatorio,
            )
        return relatorio

    # === REFORÇO (AÇÕES MANUAIS) ===

    def matricular_no_reforco(self, aluno_id: str, turma_id: str) -> regras.PatchAluno:
        aluno = self._aluno_atual(aluno_id)
        turma = self._exigir(self.estado.turma(turma_id), "Turma de reforço não encontrada.")
        patch = regras.matricular(aluno, turma, self.relogio())
        self._atualizar(TABELA_ALUNOS, aluno.id, patch.campos)
        return patch

    def concluir_reforco(self, aluno_id: str, confirmado: bool = False) -> regras.PatchAluno:
        if not confirmado:
            raise ErroValidacao("Confirme que o aluno concluiu o ciclo de reforço.")
        aluno = self._aluno_atual(aluno_id)
        patch = regras.concluir(aluno, self.relogio())
        self._atualizar(TABELA_ALUNOS, aluno.id, patch.campos)
        return patch

    def criar_turma_reforco(self, nome: str, professor_id: Optional[str] = None) -> Turma:
        if not nome or not nome.strip():
            raise ErroValidacao("Informe o nome da turma de reforço.")
        turma = Turma(
            id=novo_id(),
            name=nome.strip(),
            grade=SERIE_REFORCO,
            year=self.relogio().year,
            shift=TURNO_REFORCO,
            teacher_ids=[professor_id] if professor_id else [],
            status='active',
            is_remediation=True,
        )
        self._inserir(TABELA_TURMAS, turma)
        return turma

    # === TURMAS ===

    def adicionar_turma(self, turma: Turma) -> Persistido:
        return self._inserir(TABELA_TURMAS, turma)

    def atualizar_turma(self, turma: Turma) -> Persistido:
        campos = turma.para_registro()
        campos.pop('id')
        return self._atualizar(TABELA_TURMAS, turma.id, campos)

    def alternar_status_turma(self, turma_id: str) -> str:
        turma = self._exigir(self.estado.turma(turma_id), "Turma não encontrada.")
        novo_status = 'inactive' if turma.ativa else 'active'
        self._atualizar(TABELA_TURMAS, turma_id, {'status': novo_status})
        return novo_status

    def excluir_turma(self, turma_id: str) -> Persistido:
        if any(aluno.class_id == turma_id for aluno in self.estado.alunos):
            raise ErroValidacao(
                'Não é possível excluir esta turma pois existem registros vinculados (Alunos). '
                'Por favor, utilize a opção "Inativar" para arquivá-la.'
            )
        return self._excluir(TABELA_TURMAS, turma_id)

    # === ALUNOS ===

    def adicionar_aluno(self, aluno: Aluno) -> Persistido:
        self._exigir(self.estado.turma(aluno.class_id), "Turma não encontrada.")
        return self._inserir(TABELA_ALUNOS, aluno)

    def atualizar_aluno(self, aluno_id: str, campos: Dict[str, Any]) -> Persistido:
        self._exigir(self.estado.aluno(aluno_id), "Aluno não encontrado.")
        if 'class_id' in campos:
            self._exigir(self.estado.turma(campos['class_id']), "Turma não encontrada.")
        return self._atualizar(TABELA_ALUNOS, aluno_id, campos)

    def alternar_status_aluno(self, aluno_id: str) -> str:
        aluno = self._exigir(self.estado.aluno(aluno_id), "Aluno não encontrado.")
        novo_status = 'inactive' if aluno.ativo else 'active'
        self._atualizar(TABELA_ALUNOS, aluno_id, {'status': novo_status})
        return novo_status

    def excluir_aluno(self, aluno_id: str) -> Persistido:
        if any(a.student_id == aluno_id for a in self.estado.avaliacoes):
            raise ErroValidacao(
                'Não é possível excluir este aluno pois existem avaliações vinculadas. '
                'Por favor, utilize a opção "Inativar".'
            )
        return self._excluir(TABELA_ALUNOS, aluno_id)

    # === HABILIDADES E DISCIPLINAS ===

    def adicionar_habilidade(self, habilidade: Habilidade) -> Persistido:
        return self._inserir(TABELA_HABILIDADES, habilidade)

    def atualizar_habilidade(self, habilidade: Habilidade) -> Persistido:
        campos = habilidade.para_registro()
        campos.pop('id')
        return self._atualizar(TABELA_HABILIDADES, habilidade.id, campos)

    def excluir_habilidade(self, habilidade_id: str) -> Persistido:
        return self._excluir(TABELA_HABILIDADES, habilidade_id)

    def vincular_habilidade_turmas(self, habilidade_id: str, turma_ids: List[str]) -> RelatorioLote:
        """Grava o foco apenas nas turmas cujo vínculo mudou."""
        self._exigir(self.estado.habilidade(habilidade_id), "Habilidade não encontrada.")
        selecionadas = set(turma_ids)

        tarefas = []
        for turma in self.estado.turmas:
            possui = habilidade_id in turma.focus_skills
            if possui == (turma.id in selecionadas):
                continue
            if possui:
                foco = [h for h in turma.focus_skills if h != habilidade_id]
            else:
                foco = turma.focus_skills + [habilidade_id]
            tarefas.append((turma.id, lambda t=turma.id, f=foco: self.cliente.put(TABELA_TURMAS, t, {'focus_skills': f})))

        relatorio = RelatorioLote()
        try:
            for chave, persistido, erro in self._em_paralelo(tarefas):
                if erro is not None:
                    relatorio.itens.append(ItemLote(chave, 'atualizacao', False, erro=str(erro)))
                else:
                    relatorio.itens.append(ItemLote(chave, 'atualizacao', True, origem=persistido.origem))
        finally:
            self.recarregar()

        if not relatorio.sucesso:
            raise FalhaEmLote(f"Não foi possível atualizar {len(relatorio.falhas)} turma(s).", relatorio)
        return relatorio

    def adicionar_disciplina(self, nome: str) -> Disciplina:
        nome = (nome or '').strip()
        if not nome:
            raise ErroValidacao("Informe o nome da disciplina.")
        if any(d.name.lower() == nome.lower() for d in self.estado.disciplinas):
            raise ErroValidacao(f"A disciplina '{nome}' já existe.")
        disciplina = Disciplina(id=novo_id(), name=nome)
        self._inserir(TABELA_DISCIPLINAS, disciplina)
        return disciplina

    # === USUÁRIOS ===

    def adicionar_usuario(self, usuario: Usuario, senha: str) -> Persistido:
        if not senha:
            raise ErroValidacao("Informe a senha.")
        usuario.email = usuario.email.strip().lower()
        if any(u.email == usuario.email for u in self.estado.usuarios):
            raise ErroValidacao(f"O e-mail '{usuario.email}' já está cadastrado.")
        usuario.password = generate_password_hash(senha)
        return self._inserir(TABELA_USUARIOS, usuario)

    def atualizar_usuario(self, usuario_id: str, campos: Dict[str, Any], senha: Optional[str] = None) -> Persistido:
        self._exigir(self.estado.usuario(usuario_id), "Usuário não encontrado.")
        campos = dict(campos)
        if 'email' in campos:
            campos['email'] = campos['email'].strip().lower()
            if any(u.email == campos['email'] and u.id != usuario_id for u in self.estado.usuarios):
                raise ErroValidacao(f"O e-mail '{campos['email']}' já está cadastrado.")
        if senha:
            campos['password'] = generate_password_hash(senha)
        return self._atualizar(TABELA_USUARIOS, usuario_id, campos)

    def excluir_usuario(self, usuario_id: str) -> str:
        """
        Professor vinculado a turmas não é apagado: é inativado.
        Retorna 'inativado' ou 'excluido'.
        """
        vinculadas = [t for t in self.estado.turmas if usuario_id in t.teacher_ids]
        if vinculadas:
            self._atualizar(TABELA_USUARIOS, usuario_id, {'status': 'inactive'})
            logger.info(f"Usuário {usuario_id} inativado (responsável por {len(vinculadas)} turma(s)).")
            return 'inativado'
        self._excluir(TABELA_USUARIOS, usuario_id)
        return 'excluido'

    # === DIÁRIO DE CLASSE ===

    def adicionar_diario(self, diario: DiarioDeClasse) -> Persistido:
        self._exigir(self.estado.turma(diario.class_id), "Turma não encontrada.")
        if not diario.content.strip():
            raise ErroValidacao("Descreva o conteúdo trabalhado na aula.")
        return self._inserir(TABELA_DIARIOS, diario)

    def excluir_diario(self, diario_id: str) -> Persistido:
        return self._excluir(TABELA_DIARIOS, diario_id)

    # === AVISOS, BIBLIOTECA E PLANOS ===

    def adicionar_aviso(self, aviso: Aviso) -> Persistido:
        return self._inserir(TABELA_AVISOS, aviso)

    def atualizar_aviso(self, aviso: Aviso) -> Persistido:
        campos = aviso.para_registro()
        campos.pop('id')
        return self._atualizar(TABELA_AVISOS, aviso.id, campos)

    def excluir_aviso(self, aviso_id: str) -> Persistido:
        return self._excluir(TABELA_AVISOS, aviso_id)

    def adicionar_material(self, material: Material) -> Persistido:
        material.created_at = material.created_at or para_iso(self.relogio())
        return self._inserir(TABELA_MATERIAIS, material)

    def excluir_material(self, material_id: str) -> Persistido:
        return self._excluir(TABELA_MATERIAIS, material_id)

    def adicionar_plano(self, plano: PlanoDeAula) -> Persistido:
        self._exigir(self.estado.turma(plano.class_id), "Turma não encontrada.")
        plano.created_at = plano.created_at or para_iso(self.relogio())
        return self._inserir(TABELA_PLANOS, plano)

    def atualizar_plano(self, plano: PlanoDeAula) -> Persistido:
        self._exigir(self.estado.turma(plano.class_id), "Turma não encontrada.")
        campos = plano.para_registro()
        campos.pop('id')
        return self._atualizar(TABELA_PLANOS, plano.id, campos)

    def excluir_plano(self, plano_id: str) -> Persistido:
        return self._excluir(TABELA_PLANOS, plano_id)


def obter_coordenador() -> Coordenador:
    """Coordenador registrado pela Application Factory."""
    return current_app.extensions['escola']
