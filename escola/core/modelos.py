"""
Modelos de Domínio.

Cada tabela do banco tem um dataclass com:
- de_registro(registro): leitura tolerante do formato do banco (snake_case).
  Campos JSON malformados viram o valor padrão em vez de erro, porque
  registros antigos do backend PHP gravavam listas como texto.
- para_registro(): dicionário pronto para post/put.
"""

import json
import uuid
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import DISCIPLINA_GERAL


def novo_id() -> str:
    return str(uuid.uuid4())


class StatusAvaliacao(str, Enum):
    NAO_ATINGIU = 'nao_atingiu'
    EM_DESENVOLVIMENTO = 'em_desenvolvimento'
    ATINGIU = 'atingiu'
    SUPEROU = 'superou'

    @property
    def rotulo(self) -> str:
        return ROTULOS_STATUS[self]

    @property
    def satisfatorio(self) -> bool:
        return self in STATUS_SUCESSO


STATUS_SUCESSO = frozenset({StatusAvaliacao.ATINGIU, StatusAvaliacao.SUPEROU})
STATUS_RISCO = frozenset({StatusAvaliacao.NAO_ATINGIU, StatusAvaliacao.EM_DESENVOLVIMENTO})

ROTULOS_STATUS = {
    StatusAvaliacao.SUPEROU: 'Superou',
    StatusAvaliacao.ATINGIU: 'Atingiu',
    StatusAvaliacao.EM_DESENVOLVIMENTO: 'Em Desenv.',
    StatusAvaliacao.NAO_ATINGIU: 'Não Atingiu',
}


# === CONVERSORES TOLERANTES ===

def _json_ou_padrao(valor: Any, padrao: Any) -> Any:
    if valor is None or valor == '':
        return padrao
    if isinstance(valor, (bytes, str)):
        try:
            return json.loads(valor)
        except (TypeError, ValueError):
            return padrao
    return valor


def _lista(valor: Any) -> List[str]:
    dados = _json_ou_padrao(valor, [])
    if not isinstance(dados, (list, tuple)):
        return []
    return [str(item) for item in dados if item not in (None, '')]


def _mapa_presenca(valor: Any) -> Dict[str, bool]:
    dados = _json_ou_padrao(valor, {})
    if not isinstance(dados, dict):
        return {}
    return {str(chave): _presente(valor) for chave, valor in dados.items()}


def _presente(valor: Any) -> bool:
    # Só true (ou 1, da base antiga) conta presença; "false" é falta
    if isinstance(valor, str):
        return valor.strip().lower() == 'true'
    return valor is True or (isinstance(valor, int) and valor == 1)


def _numero(valor: Any) -> Optional[float]:
    if valor is None or valor == '' or isinstance(valor, bool):
        return None
    try:
        return float(valor)
    except (TypeError, ValueError):
        return None


def _booleano(valor: Any) -> bool:
    if isinstance(valor, str):
        return valor.strip().lower() in ('1', 'true', 'sim')
    return bool(valor)


def _texto(valor: Any) -> Optional[str]:
    if valor is None:
        return None
    return str(valor)


def _inteiro(valor: Any, padrao: int = 0) -> int:
    try:
        return int(valor)
    except (TypeError, ValueError):
        return padrao


def _status(valor: Any) -> Optional[StatusAvaliacao]:
    try:
        return StatusAvaliacao(valor)
    except ValueError:
        return None


def _para_registro(obj: Any, omitir: tuple = ()) -> Dict[str, Any]:
    registro = {}
    for campo in fields(obj):
        if campo.name in omitir:
            continue
        valor = getattr(obj, campo.name)
        if isinstance(valor, Enum):
            valor = valor.value
        elif isinstance(valor, (list, dict)):
            valor = valor.copy()
        registro[campo.name] = valor
    return registro


# === ENTIDADES ===

@dataclass
class Aluno:
    id: str
    name: str
    class_id: Optional[str] = None
    avatar_url: Optional[str] = None
    registration_number: Optional[str] = None
    birth_date: Optional[str] = None
    parent_name: Optional[str] = None
    phone: Optional[str] = None
    status: str = 'active'
    remediation_entry_date: Optional[str] = None
    remediation_exit_date: Optional[str] = None
    has_specificities: bool = False
    specificity_description: Optional[str] = None

    @property
    def ativo(self) -> bool:
        return self.status != 'inactive'

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Aluno':
        return cls(
            id=str(r.get('id')),
            name=r.get('name') or '',
            class_id=_texto(r.get('class_id')),
            avatar_url=r.get('avatar_url'),
            registration_number=_texto(r.get('registration_number')),
            birth_date=_texto(r.get('birth_date')),
            parent_name=r.get('parent_name'),
            phone=r.get('phone'),
            status=r.get('status') or 'active',
            remediation_entry_date=_texto(r.get('remediation_entry_date')) or None,
            remediation_exit_date=_texto(r.get('remediation_exit_date')) or None,
            has_specificities=_booleano(r.get('has_specificities')),
            specificity_description=r.get('specificity_description'),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class Turma:
    id: str
    name: str
    grade: str = ''
    year: int = 0
    shift: Optional[str] = None
    teacher_ids: List[str] = field(default_factory=list)
    status: str = 'active'
    is_remediation: bool = False
    focus_skills: List[str] = field(default_factory=list)

    @property
    def ativa(self) -> bool:
        return self.status != 'inactive'

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Turma':
        professores = _lista(r.get('teacher_ids'))
        # Registros antigos tinham apenas um professor em 'teacher_id'
        if not professores and r.get('teacher_id'):
            professores = [str(r['teacher_id'])]

        return cls(
            id=str(r.get('id')),
            name=r.get('name') or '',
            grade=r.get('grade') or '',
            year=_inteiro(r.get('year')),
            shift=r.get('shift'),
            teacher_ids=professores,
            status=r.get('status') or 'active',
            is_remediation=_booleano(r.get('is_remediation')),
            focus_skills=_lista(r.get('focus_skills')),
        )

    def para_registro(self) -> Dict[str, Any]:
        registro = _para_registro(self)
        registro['teacher_id'] = self.teacher_ids[0] if self.teacher_ids else None
        return registro


@dataclass
class Habilidade:
    id: str
    code: str
    description: str = ''
    subject: str = DISCIPLINA_GERAL
    year: str = ''

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Habilidade':
        return cls(
            id=str(r.get('id')),
            code=r.get('code') or '',
            description=r.get('description') or '',
            subject=r.get('subject') or DISCIPLINA_GERAL,
            year=r.get('year') or '',
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class Avaliacao:
    id: str
    student_id: str
    status: Optional[StatusAvaliacao]
    date: str
    skill_id: Optional[str] = None
    subject_id: Optional[str] = None
    term: Optional[str] = None
    notes: Optional[str] = None
    participation_score: Optional[float] = None
    behavior_score: Optional[float] = None
    exam_score: Optional[float] = None

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Avaliacao':
        return cls(
            id=str(r.get('id')),
            student_id=str(r.get('student_id')),
            status=_status(r.get('status')),
            date=_texto(r.get('date')) or '',
            skill_id=_texto(r.get('skill_id')),
            subject_id=_texto(r.get('subject_id')),
            term=r.get('term'),
            notes=r.get('notes'),
            participation_score=_numero(r.get('participation_score')),
            behavior_score=_numero(r.get('behavior_score')),
            exam_score=_numero(r.get('exam_score')),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class DiarioDeClasse:
    id: str
    class_id: str
    date: str
    content: str = ''
    attendance: Dict[str, bool] = field(default_factory=dict)

    def presente(self, aluno_id: str) -> bool:
        # Chave ausente conta como falta
        return bool(self.attendance.get(aluno_id))

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'DiarioDeClasse':
        return cls(
            id=str(r.get('id')),
            class_id=str(r.get('class_id')),
            date=_texto(r.get('date')) or '',
            content=r.get('content') or '',
            attendance=_mapa_presenca(r.get('attendance')),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class Disciplina:
    id: str
    name: str

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Disciplina':
        return cls(id=str(r.get('id')), name=r.get('name') or '')

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class Usuario:
    id: str
    name: str
    email: str
    role: str = 'professor'
    status: str = 'active'
    password: Optional[str] = None

    @property
    def ativo(self) -> bool:
        return self.status != 'inactive'

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Usuario':
        return cls(
            id=str(r.get('id')),
            name=r.get('name') or '',
            email=(r.get('email') or '').strip().lower(),
            role=r.get('role') or 'professor',
            status=r.get('status') or 'active',
            password=r.get('password'),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)

    def para_sessao(self) -> Dict[str, Any]:
        """Perfil sem a senha, para a sessão e as respostas JSON."""
        return _para_registro(self, omitir=('password',))


@dataclass
class Aviso:
    id: str
    title: str
    content: str
    date: str
    type: str = 'general'
    attachment_url: Optional[str] = None

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Aviso':
        return cls(
            id=str(r.get('id')),
            title=r.get('title') or '',
            content=r.get('content') or '',
            date=_texto(r.get('date')) or '',
            type=r.get('type') or 'general',
            attachment_url=r.get('attachment_url'),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class Material:
    id: str
    title: str
    file_url: str
    category: str = 'activity'
    description: str = ''
    subject_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'Material':
        return cls(
            id=str(r.get('id')),
            title=r.get('title') or '',
            file_url=r.get('file_url') or '',
            category=r.get('category') or 'activity',
            description=r.get('description') or '',
            subject_id=_texto(r.get('subject_id')) or None,
            created_at=_texto(r.get('created_at')),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)


@dataclass
class PlanoDeAula:
    id: str
    title: str
    date: str
    class_id: str
    subject_id: str = ''
    duration: str = '50 min'
    objectives: str = ''
    content: str = ''
    methodology: str = ''
    resources: str = ''
    evaluation: str = ''
    bncc_skill_ids: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def de_registro(cls, r: Dict[str, Any]) -> 'PlanoDeAula':
        return cls(
            id=str(r.get('id')),
            title=r.get('title') or '',
            date=_texto(r.get('date')) or '',
            class_id=str(r.get('class_id')),
            subject_id=_texto(r.get('subject_id')) or '',
            duration=r.get('duration') or '50 min',
            objectives=r.get('objectives') or '',
            content=r.get('content') or '',
            methodology=r.get('methodology') or '',
            resources=r.get('resources') or '',
            evaluation=r.get('evaluation') or '',
            bncc_skill_ids=_lista(r.get('bncc_skill_ids')),
            created_at=_texto(r.get('created_at')),
        )

    def para_registro(self) -> Dict[str, Any]:
        return _para_registro(self)
