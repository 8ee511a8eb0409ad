import unittest
from datetime import datetime, timedelta, timezone

from escola.core.api import ClienteApi, Origem
from escola.core.erros import ErroPersistencia, ErroReforco, ErroValidacao, FalhaEmLote
from escola.core.espelho_local import EspelhoLocal
from escola.core.estado import Coordenador
from escola.core.modelos import Avaliacao, DiarioDeClasse, StatusAvaliacao, Usuario
from escola.core.regras import Transicao
from escola.reforco.services import agrupar_alunos_em_risco

from conftest import BancoFalso


class Relogio:
    """Relógio controlado pelo teste."""

    def __init__(self, inicio):
        self.agora = inicio

    def __call__(self):
        return self.agora

    def avancar(self, dias):
        self.agora += timedelta(days=dias)


class BaseCoordenador(unittest.TestCase):

    def setUp(self):
        self.banco = BancoFalso()
        self.banco.semear(
            'classes',
            {'id': 't-5a', 'name': '5º Ano A', 'grade': '5º Ano', 'year': 2024, 'teacher_ids': ['u-prof']},
            {'id': 't-ref', 'name': 'Reforço Tarde', 'is_remediation': True},
        )
        self.banco.semear(
            'students',
            {'id': 's1', 'name': 'Ana', 'class_id': 't-5a'},
            {'id': 's2', 'name': 'Bruno', 'class_id': 't-5a'},
            {'id': 's3', 'name': 'Carla', 'class_id': 't-5a'},
        )
        self.banco.semear(
            'skills',
            {'id': 'k1', 'code': 'EF05MA01', 'description': 'Frações', 'subject': 'Matemática'},
            {'id': 'k2', 'code': 'EF05MA02', 'description': 'Decimais', 'subject': 'Matemática'},
        )
        self.banco.semear('users', {'id': 'u-prof', 'name': 'Prof. Rita', 'email': 'rita@escola.com', 'role': 'professor'})

        self.relogio = Relogio(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))
        self.coordenador = Coordenador(ClienteApi(self.banco, EspelhoLocal()), relogio=self.relogio)
        self.coordenador.recarregar()

    def avaliacao(self, id, aluno, status, habilidade='k1', data='2024-03-01', trimestre='1º Trimestre'):
        return Avaliacao(id=id, student_id=aluno, status=status, date=data, skill_id=habilidade, term=trimestre)


class TestCarga(BaseCoordenador):

    def test_recarregar_troca_o_estado_inteiro(self):
        estado = self.coordenador.estado
        self.assertEqual(len(estado.alunos), 3)
        self.assertEqual(estado.origens['students'], Origem.REMOTO)
        self.assertFalse(estado.offline)

    def test_disciplinas_padrao_quando_tabela_vazia(self):
        nomes = [d.name for d in self.coordenador.estado.disciplinas]
        self.assertIn('Matemática', nomes)

    def test_tabela_com_erro_nao_impede_as_demais(self):
        self.banco.falhar('listar', 'notices', RuntimeError("índice ausente"))
        estado = self.coordenador.recarregar()

        self.assertEqual(estado.avisos, [])
        self.assertEqual(len(estado.alunos), 3)
        self.assertNotIn('notices', estado.origens)


class TestAvaliacaoComReforco(BaseCoordenador):

    def test_cenario_entrada_e_saida(self):
        # A1: Não Atingiu -> entra no reforço
        resultado = self.coordenador.registrar_avaliacao(
            self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU, data='2024-03-01')
        )
        self.assertEqual(resultado.patch.transicao, Transicao.ENTRADA)
        self.assertEqual(resultado.patch.campos['remediation_entry_date'], '2024-03-01T09:00:00.000Z')

        aluno = self.coordenador.estado.aluno('s1')
        self.assertEqual(aluno.remediation_entry_date, '2024-03-01T09:00:00.000Z')
        self.assertEqual(len(agrupar_alunos_em_risco(self.coordenador.estado)), 1)

        # Histórico antigo em outra habilidade também de risco
        self.coordenador.registrar_avaliacao(
            self.avaliacao('a0', 's1', StatusAvaliacao.EM_DESENVOLVIMENTO, habilidade='k2', data='2024-02-20')
        )

        # A2: Atingiu na mesma habilidade -> sai do reforço
        self.relogio.avancar(20)
        resultado = self.coordenador.registrar_avaliacao(
            self.avaliacao('a2', 's1', StatusAvaliacao.ATINGIU, data='2024-03-21')
        )
        self.assertEqual(resultado.patch.transicao, Transicao.SAIDA)
        self.assertEqual(resultado.patch.campos, {'remediation_exit_date': '2024-03-21T09:00:00.000Z'})

        estado = self.coordenador.estado
        self.assertEqual(estado.aluno('s1').remediation_exit_date, '2024-03-21T09:00:00.000Z')
        self.assertEqual(agrupar_alunos_em_risco(estado), [])

    def test_avaliacao_sem_mudanca_de_reforco(self):
        resultado = self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.SUPEROU))
        self.assertIsNone(resultado.patch)
        self.assertEqual(len(self.coordenador.estado.avaliacoes), 1)

    def test_falha_no_patch_mantem_avaliacao_salva(self):
        self.banco.falhar('atualizar', 'students', ErroPersistencia("permissão negada", 'students'))

        with self.assertRaises(ErroReforco) as contexto:
            self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))

        self.assertEqual(contexto.exception.avaliacao_id, 'a1')
        self.assertEqual(contexto.exception.aluno_id, 's1')
        self.assertIsNotNone(self.coordenador.estado.avaliacao('a1'))
        self.assertIsNone(self.coordenador.estado.aluno('s1').remediation_entry_date)

    def test_validacoes(self):
        with self.assertRaises(ErroValidacao):
            self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's9', StatusAvaliacao.ATINGIU))
        with self.assertRaises(ErroValidacao):
            self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.ATINGIU, habilidade='k9'))

        nota_alta = self.avaliacao('a1', 's1', StatusAvaliacao.ATINGIU)
        nota_alta.exam_score = 11
        with self.assertRaises(ErroValidacao):
            self.coordenador.registrar_avaliacao(nota_alta)
        self.assertEqual(self.banco.tabelas.get('assessments', []), [])


class TestLoteDeNotas(BaseCoordenador):

    def setUp(self):
        super().setUp()
        self.banco.semear('assessments', {
            'id': 'a-ana', 'student_id': 's1', 'skill_id': 'k1', 'status': 'atingiu',
            'date': '2024-03-01', 'term': '1º Trimestre',
        })
        self.coordenador.recarregar()

    def grade(self):
        return [
            self.avaliacao('a-ana', 's1', StatusAvaliacao.SUPEROU),
            self.avaliacao('a-bruno', 's2', StatusAvaliacao.NAO_ATINGIU),
            self.avaliacao('a-carla', 's3', StatusAvaliacao.ATINGIU),
        ]

    def test_lote_completo(self):
        relatorio = self.coordenador.lancar_notas_em_lote(self.grade())

        self.assertTrue(relatorio.sucesso)
        operacoes = {item.chave: item.operacao for item in relatorio.itens}
        self.assertEqual(operacoes, {'a-ana': 'atualizacao', 'a-bruno': 'insercao', 'a-carla': 'insercao'})
        self.assertEqual([p.aluno_id for p in relatorio.patches], ['s2'])
        self.assertEqual(self.coordenador.estado.avaliacao('a-ana').status, StatusAvaliacao.SUPEROU)

    def test_falha_parcial_relata_e_recarrega(self):
        self.banco.falhar('inserir', 'assessments', ErroPersistencia("cota excedida", 'assessments'),
                          quando=lambda registro: registro['student_id'] == 's3')

        with self.assertRaises(FalhaEmLote) as contexto:
            self.coordenador.lancar_notas_em_lote(self.grade())

        relatorio = contexto.exception.relatorio
        self.assertFalse(relatorio.sucesso)
        self.assertEqual(sorted(item.chave for item in relatorio.gravados), ['a-ana', 'a-bruno'])
        self.assertEqual([item.chave for item in relatorio.falhas], ['a-carla'])

        # A recarga mostra exatamente o que foi gravado
        ids = sorted(a.id for a in self.coordenador.estado.avaliacoes)
        self.assertEqual(ids, ['a-ana', 'a-bruno'])
        self.assertEqual(self.coordenador.estado.avaliacao('a-ana').status, StatusAvaliacao.SUPEROU)

        dados = relatorio.para_dict()
        self.assertFalse(dados['sucesso'])
        self.assertEqual(dados['falhas'][0]['id'], 'a-carla')

    def test_duas_linhas_do_mesmo_aluno_nao_duplicam_entrada(self):
        linhas = [
            self.avaliacao('x1', 's2', StatusAvaliacao.NAO_ATINGIU, habilidade='k1'),
            self.avaliacao('x2', 's2', StatusAvaliacao.EM_DESENVOLVIMENTO, habilidade='k2'),
        ]
        relatorio = self.coordenador.lancar_notas_em_lote(linhas)
        self.assertEqual(len(relatorio.patches), 1)


class TestCadastros(BaseCoordenador):

    def test_turma_com_alunos_nao_pode_ser_excluida(self):
        with self.assertRaises(ErroValidacao):
            self.coordenador.excluir_turma('t-5a')
        self.coordenador.excluir_turma('t-ref')
        self.assertIsNone(self.coordenador.estado.turma('t-ref'))

    def test_aluno_com_avaliacoes_nao_pode_ser_excluido(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.ATINGIU))
        with self.assertRaises(ErroValidacao):
            self.coordenador.excluir_aluno('s1')

    def test_alternar_status(self):
        self.assertEqual(self.coordenador.alternar_status_aluno('s2'), 'inactive')
        self.assertFalse(self.coordenador.estado.aluno('s2').ativo)
        self.assertEqual(self.coordenador.alternar_status_turma('t-ref'), 'inactive')

    def test_professor_vinculado_e_inativado(self):
        self.assertEqual(self.coordenador.excluir_usuario('u-prof'), 'inativado')
        self.assertEqual(self.coordenador.estado.usuario('u-prof').status, 'inactive')

        self.coordenador.adicionar_usuario(Usuario(id='u-novo', name='Novo', email='novo@escola.com'), 'abc12345')
        self.assertEqual(self.coordenador.excluir_usuario('u-novo'), 'excluido')
        self.assertIsNone(self.coordenador.estado.usuario('u-novo'))

    def test_usuario_com_email_duplicado(self):
        with self.assertRaises(ErroValidacao):
            self.coordenador.adicionar_usuario(Usuario(id='u2', name='Outra', email='RITA@escola.com'), 'abc12345')

    def test_senha_gravada_com_hash(self):
        self.coordenador.adicionar_usuario(Usuario(id='u2', name='Outra', email='outra@escola.com'), 'abc12345')
        senha = self.coordenador.estado.usuario('u2').password
        self.assertNotEqual(senha, 'abc12345')
        self.assertIsNotNone(self.coordenador.cliente.login('outra@escola.com', 'abc12345').dados)

    def test_vinculo_grava_apenas_turmas_alteradas(self):
        relatorio = self.coordenador.vincular_habilidade_turmas('k1', ['t-ref'])
        self.assertEqual([item.chave for item in relatorio.itens], ['t-ref'])
        self.assertEqual(self.coordenador.estado.turma('t-ref').focus_skills, ['k1'])

        relatorio = self.coordenador.vincular_habilidade_turmas('k1', [])
        self.assertEqual([item.chave for item in relatorio.itens], ['t-ref'])
        self.assertEqual(self.coordenador.estado.turma('t-ref').focus_skills, [])

    def test_disciplina_duplicada(self):
        self.coordenador.adicionar_disciplina('Artes')
        with self.assertRaises(ErroValidacao):
            self.coordenador.adicionar_disciplina(' artes ')


class TestReforcoManual(BaseCoordenador):

    def test_matricular_e_concluir(self):
        patch = self.coordenador.matricular_no_reforco('s1', 't-ref')
        aluno = self.coordenador.estado.aluno('s1')
        self.assertEqual(patch.transicao, Transicao.MATRICULA)
        self.assertEqual(aluno.class_id, 't-ref')
        self.assertIsNotNone(aluno.remediation_entry_date)

        with self.assertRaises(ErroValidacao):
            self.coordenador.concluir_reforco('s1')

        self.relogio.avancar(10)
        self.coordenador.concluir_reforco('s1', confirmado=True)
        self.assertEqual(self.coordenador.estado.aluno('s1').remediation_exit_date, '2024-03-11T09:00:00.000Z')

    def test_criar_turma_reforco(self):
        turma = self.coordenador.criar_turma_reforco('Reforço Manhã', 'u-prof')
        salva = self.coordenador.estado.turma(turma.id)
        self.assertTrue(salva.is_remediation)
        self.assertEqual(salva.shift, 'Integral')
        self.assertEqual(salva.teacher_ids, ['u-prof'])
        self.assertEqual(salva.year, 2024)

    def test_diario_exige_conteudo(self):
        with self.assertRaises(ErroValidacao):
            self.coordenador.adicionar_diario(DiarioDeClasse(id='d1', class_id='t-ref', date='2024-03-01', content='  '))



class TestInstanciasNoMesmoBanco(BaseCoordenador):
    """Dois processos, cada um com o seu estado em memória, gravando no mesmo banco."""

    def setUp(self):
        super().setUp()
        self.outro = Coordenador(ClienteApi(self.banco, EspelhoLocal()), relogio=self.relogio)
        self.outro.recarregar()

    def entrada_de(self, aluno_id):
        return next(r for r in self.banco.tabelas['students'] if r['id'] == aluno_id).get('remediation_entry_date')

    def test_instancia_desatualizada_nao_reabre_ciclo(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))
        self.assertIsNone(self.outro.estado.aluno('s1').remediation_entry_date)

        self.relogio.avancar(31)
        resultado = self.outro.registrar_avaliacao(
            self.avaliacao('a2', 's1', StatusAvaliacao.EM_DESENVOLVIMENTO, data='2024-04-01')
        )

        self.assertIsNone(resultado.patch)
        self.assertEqual(self.entrada_de('s1'), '2024-03-01T09:00:00.000Z')

    def test_instancia_desatualizada_registra_a_saida(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))

        self.relogio.avancar(5)
        resultado = self.outro.registrar_avaliacao(self.avaliacao('a2', 's1', StatusAvaliacao.ATINGIU))

        self.assertEqual(resultado.patch.transicao, Transicao.SAIDA)

    def test_lote_em_instancia_desatualizada(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))

        self.relogio.avancar(31)
        relatorio = self.outro.lancar_notas_em_lote([
            self.avaliacao('a2', 's1', StatusAvaliacao.NAO_ATINGIU, habilidade='k2'),
        ])

        self.assertEqual(relatorio.patches, [])
        self.assertEqual(self.entrada_de('s1'), '2024-03-01T09:00:00.000Z')

    def test_conclusao_em_instancia_desatualizada(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))

        patch = self.outro.concluir_reforco('s1', confirmado=True)

        self.assertEqual(patch.transicao, Transicao.CONCLUSAO)

    def test_recarregar_se_vencido(self):
        self.coordenador.registrar_avaliacao(self.avaliacao('a1', 's1', StatusAvaliacao.NAO_ATINGIU))

        estado = self.outro.recarregar_se_vencido(3600)
        self.assertIsNone(estado.aluno('s1').remediation_entry_date)

        estado = self.outro.recarregar_se_vencido(0)
        self.assertEqual(estado.aluno('s1').remediation_entry_date, '2024-03-01T09:00:00.000Z')


if __name__ == '__main__':
    unittest.main()
