"""
Constantes Globais do Sistema.
Fonte Única da Verdade (Single Source of Truth) para dados escolares.
"""

# Nomes das tabelas no banco remoto (coleções do Firestore) e no espelho local
TABELA_TURMAS = 'classes'
TABELA_ALUNOS = 'students'
TABELA_HABILIDADES = 'skills'
TABELA_AVALIACOES = 'assessments'
TABELA_USUARIOS = 'users'
TABELA_DIARIOS = 'class_daily_logs'
TABELA_DISCIPLINAS = 'subjects'
TABELA_AVISOS = 'notices'
TABELA_MATERIAIS = 'materials'
TABELA_PLANOS = 'lesson_plans'

TABELAS = (
    TABELA_TURMAS,
    TABELA_ALUNOS,
    TABELA_HABILIDADES,
    TABELA_AVALIACOES,
    TABELA_USUARIOS,
    TABELA_DIARIOS,
    TABELA_DISCIPLINAS,
    TABELA_AVISOS,
    TABELA_MATERIAIS,
    TABELA_PLANOS,
)

TRIMESTRES = ['1º Trimestre', '2º Trimestre', '3º Trimestre', 'Recuperação']
TRIMESTRE_PADRAO = TRIMESTRES[0]

TURNOS = ['Matutino', 'Vespertino', 'Integral', 'Noturno']

PAPEIS = ['admin', 'diretor', 'coordenador', 'professor']
PAPEIS_EDICAO_AVISOS = ('admin', 'coordenador')

TIPOS_AVISO = ['general', 'event', 'urgent']
CATEGORIAS_MATERIAL = ['planning', 'exam', 'activity', 'administrative']

# Turma de reforço criada pela tela "Gestão de Reforço"
SERIE_REFORCO = 'Reforço Escolar'
TURNO_REFORCO = 'Integral'

# Exibidas quando a tabela de disciplinas ainda está vazia
DISCIPLINAS_PADRAO = [
    {'id': '1', 'name': 'Língua Portuguesa'},
    {'id': '2', 'name': 'Matemática'},
    {'id': '3', 'name': 'Ciências'},
    {'id': '4', 'name': 'História'},
    {'id': '5', 'name': 'Geografia'},
]

DISCIPLINA_GERAL = 'Geral'

# Regras de negócio dos relatórios
MIN_SUPEROU_DESTAQUE = 3
LIMITE_FREQUENCIA_CRITICA = 75
LIMITE_SUCESSO_CRITICO = 50
LIMITE_SUCESSO_OBSERVACAO = 70
TOTAL_AVISOS_RECENTES = 3

# Professores não excluem registros (apenas inativam)
PAPEIS_EXCLUSAO = ('admin', 'diretor', 'coordenador')
PAPEIS_GESTAO_USUARIOS = ('admin',)
