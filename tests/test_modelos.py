import unittest

from escola.core.datas import parse_data, parte_data, timestamp_ou_zero
from escola.core.modelos import Aluno, Avaliacao, DiarioDeClasse, StatusAvaliacao, Turma, Usuario


class TestLeituraTolerante(unittest.TestCase):

    def test_turma_com_listas_em_texto(self):
        turma = Turma.de_registro({
            'id': 7,
            'name': '5º Ano A',
            'year': '2024',
            'teacher_ids': '["u1", "u2"]',
            'focus_skills': '["k1"]',
            'is_remediation': '0',
        })
        self.assertEqual(turma.id, '7')
        self.assertEqual(turma.year, 2024)
        self.assertEqual(turma.teacher_ids, ['u1', 'u2'])
        self.assertEqual(turma.focus_skills, ['k1'])
        self.assertFalse(turma.is_remediation)

    def test_json_malformado_vira_padrao(self):
        turma = Turma.de_registro({'id': 't1', 'name': 'X', 'teacher_ids': '[u1,', 'focus_skills': '{nada'})
        self.assertEqual(turma.teacher_ids, [])
        self.assertEqual(turma.focus_skills, [])

        diario = DiarioDeClasse.de_registro({'id': 'd1', 'class_id': 't1', 'attendance': 'não é json'})
        self.assertEqual(diario.attendance, {})

    def test_professor_unico_legado(self):
        turma = Turma.de_registro({'id': 't1', 'name': 'X', 'teacher_id': 'u9'})
        self.assertEqual(turma.teacher_ids, ['u9'])
        self.assertEqual(turma.para_registro()['teacher_id'], 'u9')

    def test_presenca_em_texto(self):
        diario = DiarioDeClasse.de_registro({
            'id': 'd1',
            'class_id': 't1',
            'date': '2024-05-01',
            'attendance': '{"s1": true, "s2": false}',
        })
        self.assertTrue(diario.presente('s1'))
        self.assertFalse(diario.presente('s2'))
        self.assertFalse(diario.presente('s3'))

    def test_presenca_so_conta_verdadeiro(self):
        diario = DiarioDeClasse.de_registro({
            'id': 'd1',
            'class_id': 't1',
            'attendance': {'s1': 'false', 's2': 'true', 's3': 1, 's4': 0, 's5': 'sim'},
        })
        self.assertEqual(diario.attendance, {'s1': False, 's2': True, 's3': True, 's4': False, 's5': False})

    def test_avaliacao_com_status_e_notas_invalidos(self):
        avaliacao = Avaliacao.de_registro({
            'id': 'a1',
            'student_id': 's1',
            'status': 'excelente',
            'participation_score': 'abc',
            'exam_score': '7.5',
        })
        self.assertIsNone(avaliacao.status)
        self.assertIsNone(avaliacao.participation_score)
        self.assertEqual(avaliacao.exam_score, 7.5)

    def test_aluno_datas_vazias_viram_none(self):
        aluno = Aluno.de_registro({'id': 's1', 'name': 'Ana', 'remediation_entry_date': '', 'has_specificities': 'true'})
        self.assertIsNone(aluno.remediation_entry_date)
        self.assertTrue(aluno.has_specificities)
        self.assertTrue(aluno.ativo)

    def test_usuario_sessao_sem_senha(self):
        usuario = Usuario.de_registro({'id': 'u1', 'name': 'Rita', 'email': ' Rita@Escola.com ', 'password': 'hash'})
        self.assertEqual(usuario.email, 'rita@escola.com')
        self.assertNotIn('password', usuario.para_sessao())

    def test_status_rotulos(self):
        self.assertEqual(StatusAvaliacao.NAO_ATINGIU.rotulo, 'Não Atingiu')
        self.assertTrue(StatusAvaliacao.SUPEROU.satisfatorio)
        self.assertFalse(StatusAvaliacao.EM_DESENVOLVIMENTO.satisfatorio)


class TestDatas(unittest.TestCase):

    def test_data_invalida(self):
        self.assertIsNone(parse_data('31/02/2024'))
        self.assertEqual(timestamp_ou_zero('ontem'), 0.0)

    def test_formatos_aceitos(self):
        self.assertEqual(parse_data('2024-05-10T12:00:00.000Z').hour, 12)
        self.assertIsNotNone(parse_data('2024-05-10'))
        self.assertEqual(parte_data('2024-05-10T12:00:00Z'), '2024-05-10')
        self.assertIsNone(parte_data(None))


if __name__ == '__main__':
    unittest.main()
