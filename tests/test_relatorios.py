import unittest

from escola.core.estado import EstadoEscolar
from escola.core.modelos import Aluno, Avaliacao, Aviso, DiarioDeClasse, Habilidade, StatusAvaliacao, Turma
from escola.relatorios import services

NA = StatusAvaliacao.NAO_ATINGIU
ED = StatusAvaliacao.EM_DESENVOLVIMENTO
A = StatusAvaliacao.ATINGIU
S = StatusAvaliacao.SUPEROU

HABILIDADES = [
    Habilidade(id='k1', code='EF05MA01', description='Frações', subject='Matemática'),
    Habilidade(id='k2', code='EF05MA02', description='Decimais', subject='Matemática'),
    Habilidade(id='k3', code='EF05LP01', description='Leitura', subject='Língua Portuguesa'),
]


def _av(id, status, habilidade='k1', aluno='s1', data='2024-03-01', trimestre='1º Trimestre'):
    return Avaliacao(id=id, student_id=aluno, status=status, date=data, skill_id=habilidade, term=trimestre)


class TestBoletim(unittest.TestCase):

    def celula(self, *avaliacoes):
        return services.celula_boletim(avaliacoes, HABILIDADES, 'Matemática', '1º Trimestre')

    def test_classificacao_da_celula(self):
        self.assertEqual(self.celula(_av('a1', NA))['cell_status'], 'danger')
        self.assertEqual(self.celula(_av('a1', A), _av('a2', NA, 'k2'))['cell_status'], 'warning')
        self.assertEqual(self.celula(_av('a1', A), _av('a2', S, 'k2'))['cell_status'], 'success')

    def test_sem_avaliacao_nao_ha_celula(self):
        self.assertIsNone(self.celula())
        # Avaliação de outro trimestre ou disciplina não conta
        self.assertIsNone(self.celula(_av('a1', A, trimestre='2º Trimestre'), _av('a2', A, 'k3')))

    def test_contagens_da_celula(self):
        celula = self.celula(_av('a1', A), _av('a2', ED, 'k2'), _av('a3', S))
        self.assertEqual(celula['total'], 3)
        self.assertEqual(celula['success'], 2)
        self.assertEqual(celula['percentual'], 67)

    def test_boletim_por_disciplina_e_trimestre(self):
        boletim = services.montar_boletim('s1', [_av('a1', A), _av('a2', NA, aluno='s2')], HABILIDADES)

        self.assertEqual(list(boletim), ['Língua Portuguesa', 'Matemática'])
        self.assertEqual(boletim['Matemática']['1º Trimestre']['total'], 1)
        self.assertIsNone(boletim['Matemática']['2º Trimestre'])
        self.assertIsNone(boletim['Língua Portuguesa']['1º Trimestre'])


class TestLinhaDoTempo(unittest.TestCase):

    def test_ordem_decrescente_com_data_invalida_no_fim(self):
        aluno = Aluno(
            id='s1',
            name='Ana',
            remediation_entry_date='2024-03-05T10:00:00.000Z',
            remediation_exit_date='2024-04-01T10:00:00.000Z',
        )
        avaliacoes = [
            _av('a1', NA, data='2024-03-01'),
            _av('a2', A, data='sem data'),
            _av('a3', A, data='2024-03-30'),
            _av('a4', A, aluno='s2', data='2024-05-01'),
        ]
        eventos = services.linha_do_tempo(aluno, avaliacoes, HABILIDADES)

        self.assertEqual(
            [e['tipo'] for e in eventos],
            ['remediation_exit', 'assessment', 'remediation_entry', 'assessment', 'assessment'],
        )
        self.assertEqual(eventos[1]['avaliacao']['id'], 'a3')
        self.assertEqual(eventos[-1]['avaliacao']['id'], 'a2')
        self.assertEqual(eventos[1]['habilidade']['code'], 'EF05MA01')


class BaseEstado(unittest.TestCase):

    def setUp(self):
        self.estado = EstadoEscolar(
            turmas=[Turma(id='t-5a', name='5º Ano A', focus_skills=['k1'])],
            alunos=[
                Aluno(id='s1', name='Ana', class_id='t-5a'),
                Aluno(id='s2', name='bruno', class_id='t-5a'),
                Aluno(id='s3', name='Caio', class_id='t-5a', status='inactive'),
            ],
            habilidades=list(HABILIDADES),
        )


class TestMapaEConselho(BaseEstado):

    def test_mapa_usa_a_ultima_avaliacao_do_trimestre(self):
        self.estado.avaliacoes = [
            _av('a1', NA, data='2024-03-01'),
            _av('a2', S, data='2024-03-20'),
            _av('a3', ED, 'k2', aluno='s2'),
            _av('a4', A, 'k2', aluno='s2', trimestre='2º Trimestre'),
        ]
        mapa = services.mapa_de_habilidades(self.estado, 't-5a', 'Matemática', '1º Trimestre')

        self.assertEqual([h['id'] for h in mapa['habilidades']], ['k1', 'k2'])
        self.assertEqual([linha['aluno'] for linha in mapa['alunos']], ['Ana', 'bruno'])
        self.assertEqual(mapa['alunos'][0]['celulas'], {'k1': 'S', 'k2': '-'})
        self.assertEqual(mapa['alunos'][1]['celulas'], {'k1': '-', 'k2': 'ED'})

    def test_situacao_do_conselho(self):
        self.assertEqual(services.situacao_conselho(70, 100, 0), 'Crítico')
        self.assertEqual(services.situacao_conselho(None, None, 0), 'Sem Avaliações')
        self.assertEqual(services.situacao_conselho(90, 40, 0), 'Crítico')
        self.assertEqual(services.situacao_conselho(90, 60, 0), 'Em Observação')
        self.assertEqual(services.situacao_conselho(None, 80, 1), 'Em Observação')
        self.assertEqual(services.situacao_conselho(75, 70, 0), 'Satisfatório')

    def test_ata_do_conselho(self):
        self.estado.avaliacoes = [_av('a1', A), _av('a2', A, 'k2'), _av('a3', NA, 'k3')]
        self.estado.diarios = [
            DiarioDeClasse(id='d1', class_id='t-5a', date='2024-03-01', attendance={'s1': True, 's2': True}),
            DiarioDeClasse(id='d2', class_id='t-5a', date='2024-03-02', attendance={'s1': True}),
        ]
        ata = services.ata_conselho(self.estado, 't-5a')

        ana, bruno = ata
        self.assertEqual(ana['aproveitamento'], 67)
        self.assertEqual(ana['pontos_de_atencao'], 1)
        self.assertEqual(ana['frequencia'], 100)
        self.assertEqual(ana['situacao'], 'Em Observação')

        self.assertEqual(bruno['frequencia'], 50)
        self.assertIsNone(bruno['aproveitamento'])
        self.assertEqual(bruno['situacao'], 'Crítico')


class TestFicha(BaseEstado):

    def test_ficha_com_destaque(self):
        self.estado.avaliacoes = [_av('a1', S), _av('a2', S, 'k2'), _av('a3', S, 'k3')]
        ficha = services.ficha_do_aluno(self.estado.aluno('s1'), self.estado)

        self.assertTrue(ficha['destaque'])
        self.assertFalse(ficha['em_reforco'])
        self.assertEqual(ficha['turma'], '5º Ano A')
        self.assertIsNone(ficha['frequencia'])

        matematica = ficha['disciplinas']['Matemática']
        self.assertTrue(matematica[0]['foco'])
        self.assertEqual(matematica[0]['avaliacao']['status'], 'superou')


class TestPainel(BaseEstado):

    def setUp(self):
        super().setUp()
        self.estado.avaliacoes = [
            _av('a1', NA),
            _av('a2', A, 'k3'),
            _av('a3', S, trimestre='2º Trimestre'),
        ]
        self.estado.avisos = [
            Aviso(id=f"n{i}", title=f"Aviso {i}", content='...', date=f"2024-03-0{i}") for i in range(1, 6)
        ]

    def test_painel_sem_filtro(self):
        painel = services.resumo_painel(self.estado, 'all')

        self.assertEqual(painel['total_alunos'], 3)
        self.assertEqual(painel['casos_reforco'], 1)
        self.assertEqual(painel['casos_sucesso'], 2)
        self.assertEqual(painel['distribuicao']['Superou'], 1)
        self.assertEqual(painel['distribuicao']['Em Desenv.'], 0)
        self.assertEqual([a['id'] for a in painel['avisos_recentes']], ['n5', 'n4', 'n3'])
        self.assertEqual(painel['desempenho_por_disciplina'], [
            {'disciplina': 'Língua Portuguesa', 'taxa': 100},
            {'disciplina': 'Matemática', 'taxa': 50},
        ])

    def test_painel_por_trimestre(self):
        painel = services.resumo_painel(self.estado, '1º Trimestre')
        self.assertEqual(painel['casos_sucesso'], 1)
        self.assertEqual(painel['casos_reforco'], 1)

    def test_calendario(self):
        calendario = services.calendario(self.estado)
        self.assertEqual(list(calendario)[0], '2024-03-01')
        self.assertEqual(len(calendario['2024-03-01']['avaliacoes']), 3)
        self.assertEqual(len(calendario['2024-03-01']['avisos']), 1)


if __name__ == '__main__':
    unittest.main()
