import unittest
from datetime import datetime, timezone

from escola.core.estado import EstadoEscolar
from escola.core.modelos import Aluno, Avaliacao, DiarioDeClasse, Habilidade, StatusAvaliacao, Turma, Usuario
from escola.reforco import services

AGORA = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


def _av(id, aluno, habilidade, status, data='2024-03-01'):
    return Avaliacao(id=id, student_id=aluno, status=status, date=data, skill_id=habilidade, term='1º Trimestre')


class TestAlunosEmRisco(unittest.TestCase):

    def setUp(self):
        self.estado = EstadoEscolar(
            turmas=[
                Turma(id='t-5a', name='5º Ano A'),
                Turma(id='t-5b', name='5º Ano B'),
            ],
            alunos=[
                Aluno(id='s1', name='Ana', class_id='t-5a'),
                Aluno(id='s2', name='Bruno', class_id='t-5b', remediation_entry_date='2024-03-01T10:00:00.000Z'),
                Aluno(
                    id='s3',
                    name='Carla',
                    class_id='t-5a',
                    remediation_entry_date='2024-02-01T10:00:00.000Z',
                    remediation_exit_date='2024-03-01T10:00:00.000Z',
                ),
                Aluno(id='s4', name='Davi', class_id=None),
            ],
            habilidades=[
                Habilidade(id='k1', code='EF05MA01', subject='Matemática'),
                Habilidade(id='k2', code='EF05LP01', subject='Língua Portuguesa'),
            ],
        )

    def test_agrupa_pela_turma_atual(self):
        self.estado.avaliacoes = [
            _av('a1', 's2', 'k1', StatusAvaliacao.NAO_ATINGIU),
            _av('a2', 's1', 'k2', StatusAvaliacao.EM_DESENVOLVIMENTO),
            _av('a3', 's1', 'k1', StatusAvaliacao.ATINGIU),
        ]
        grupos = services.agrupar_alunos_em_risco(self.estado)

        self.assertEqual([g['turma'] for g in grupos], ['5º Ano B', '5º Ano A'])
        self.assertEqual(grupos[0]['itens'][0]['aluno'], 'Bruno')
        self.assertTrue(grupos[0]['itens'][0]['em_reforco'])
        self.assertEqual(grupos[1]['itens'][0]['habilidade'], 'EF05LP01')
        self.assertEqual(grupos[1]['itens'][0]['rotulo'], 'Em Desenv.')

    def test_aluno_com_saida_registrada_nao_aparece(self):
        # Nova avaliação de risco em OUTRA habilidade depois da saída
        self.estado.avaliacoes = [
            _av('a1', 's3', 'k1', StatusAvaliacao.NAO_ATINGIU, data='2024-02-01'),
            _av('a2', 's3', 'k2', StatusAvaliacao.NAO_ATINGIU, data='2024-04-01'),
        ]
        self.assertEqual(services.agrupar_alunos_em_risco(self.estado), [])

    def test_par_aluno_habilidade_aparece_uma_vez(self):
        self.estado.avaliacoes = [
            _av('a1', 's1', 'k1', StatusAvaliacao.EM_DESENVOLVIMENTO, data='2024-03-01'),
            _av('a2', 's1', 'k1', StatusAvaliacao.NAO_ATINGIU, data='2024-03-10'),
        ]
        grupos = services.agrupar_alunos_em_risco(self.estado)

        self.assertEqual(len(grupos[0]['itens']), 1)
        # Vale a primeira encontrada
        self.assertEqual(grupos[0]['itens'][0]['status'], 'em_desenvolvimento')

    def test_sem_turma_ou_habilidade_nao_aparece(self):
        self.estado.avaliacoes = [
            _av('a1', 's4', 'k1', StatusAvaliacao.NAO_ATINGIU),
            _av('a2', 's1', 'k9', StatusAvaliacao.NAO_ATINGIU),
            _av('a3', 's9', 'k1', StatusAvaliacao.NAO_ATINGIU),
        ]
        self.assertEqual(services.agrupar_alunos_em_risco(self.estado), [])


class TestTurmasEPermanencia(unittest.TestCase):

    def setUp(self):
        self.estado = EstadoEscolar(
            turmas=[
                Turma(id='t-5a', name='5º Ano A'),
                Turma(id='t-ref', name='Reforço Tarde', is_remediation=True, teacher_ids=['u1', 'u-removido']),
            ],
            alunos=[
                Aluno(id='s1', name='Ana', class_id='t-ref', remediation_entry_date='2024-05-01T12:00:00.000Z'),
                Aluno(
                    id='s2',
                    name='Bruno',
                    class_id='t-5a',
                    remediation_entry_date='2024-03-01T12:00:00.000Z',
                    remediation_exit_date='2024-03-11T00:00:00.000Z',
                ),
                Aluno(id='s3', name='Carla', class_id='t-5a'),
                Aluno(id='s4', name='Davi', class_id='t-ref'),
            ],
            usuarios=[Usuario(id='u1', name='Prof. Rita', email='rita@escola.com')],
        )

    def test_resumo_das_turmas_de_reforco(self):
        resumo = services.resumir_turmas_reforco(self.estado)
        self.assertEqual(resumo, [{
            'id': 't-ref',
            'nome': 'Reforço Tarde',
            'status': 'active',
            'professores': ['Prof. Rita'],
            'total_alunos': 2,
        }])

    def test_permanencia(self):
        linhas = {linha['aluno_id']: linha for linha in services.relatorio_permanencia(self.estado, AGORA)}

        self.assertEqual(sorted(linhas), ['s1', 's2', 's4'])
        self.assertEqual(linhas['s1']['saida'], 'Em curso')
        self.assertEqual(linhas['s1']['dias'], 9)
        # 9 dias e 12 horas arredondam para cima
        self.assertEqual(linhas['s2']['dias'], 10)
        self.assertEqual(linhas['s2']['turma'], '5º Ano A')
        self.assertIsNone(linhas['s4']['dias'])

    def test_permanencia_por_periodo_e_turma(self):
        linhas = services.relatorio_permanencia(self.estado, AGORA, inicio='2024-04-01', fim='2024-05-31')
        self.assertEqual([linha['aluno_id'] for linha in linhas], ['s1'])

        linhas = services.relatorio_permanencia(self.estado, AGORA, turma_id='t-5a')
        self.assertEqual([linha['aluno_id'] for linha in linhas], ['s2'])


class TestDiarios(unittest.TestCase):

    def test_listar_diarios_e_frequencia(self):
        estado = EstadoEscolar(
            alunos=[Aluno(id='s1', name='Ana', class_id='t-ref'), Aluno(id='s2', name='Bruno', class_id='t-ref')],
            diarios=[
                DiarioDeClasse(id='d1', class_id='t-ref', date='2024-05-01', content='Frações', attendance={'s1': True, 's2': False}),
                DiarioDeClasse(id='d2', class_id='t-ref', date='2024-05-08', content='Decimais', attendance={'s1': True, 's2': True}),
                DiarioDeClasse(id='d3', class_id='t-5a', date='2024-05-09', content='Outra turma'),
            ],
        )
        diarios = services.listar_diarios(estado, 't-ref')

        self.assertEqual([d['id'] for d in diarios], ['d2', 'd1'])
        self.assertEqual(diarios[1]['presentes'], 1)
        self.assertEqual(services.frequencia_da_turma(estado, 't-ref'), {'s1': 100, 's2': 50})
        self.assertEqual(services.frequencia_da_turma(estado, 't-vazia'), {})


if __name__ == '__main__':
    unittest.main()
