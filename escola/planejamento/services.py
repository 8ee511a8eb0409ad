"""
Camada de Serviço (Service Layer) do Planejador de Aulas.

Usa o Gemini para sugerir as cinco seções do plano (objetivos, conteúdo,
metodologia, recursos e avaliação). Se a IA falhar, devolve um roteiro
padrão para o professor completar.
"""

import json
from typing import Dict, Iterable

from escola.core.ai import get_generative_model
from escola.core.logger import get_logger
from escola.core.modelos import Habilidade

logger = get_logger(__name__)

SECOES_PLANO = ('objectives', 'content', 'methodology', 'resources', 'evaluation')


def _limpar_json(texto: str) -> str:
    """Remove o bloco ```json ... ``` que o modelo às vezes devolve."""
    texto = texto.strip()
    if texto.startswith("```"):
        texto = texto.strip("`").strip()
        if texto.lower().startswith("json"):
            texto = texto[4:]
    return texto.strip()


def _roteiro_padrao(titulo: str, disciplina: str) -> Dict[str, str]:
    return {
        'objectives': f"- Compreender os conceitos centrais de \"{titulo}\".\n- Aplicar o conteúdo em atividades práticas.",
        'content': f"{disciplina}: {titulo}.",
        'methodology': "1. Retomada dos conhecimentos prévios.\n2. Exposição dialogada.\n3. Atividade em grupo.\n4. Socialização.",
        'resources': "Quadro, livro didático e material impresso.",
        'evaluation': "Observação da participação e correção da atividade proposta.",
    }


def gerar_plano_ia(titulo: str, disciplina: str, turma: str, habilidades: Iterable[Habilidade] = ()) -> Dict[str, object]:
    """
    Retorna as cinco seções do plano e 'gerado_por_ia' (False no fallback).
    """
    codigos = ", ".join(f"{h.code} ({h.description})" for h in habilidades)

    prompt = f"""
    Você é um coordenador pedagógico experiente na BNCC.
    Crie um plano de aula completo e detalhado para a disciplina de {disciplina}, turma {turma}, com o tema: "{titulo}".
    {f"Habilidades BNCC trabalhadas: {codigos}." if codigos else ""}

    Retorne APENAS um JSON válido com as chaves (todas texto):
    - "objectives": Lista de objetivos específicos da aula.
    - "content": Principais tópicos do conteúdo a ser abordado.
    - "methodology": Estratégias de ensino e passo a passo da aula.
    - "resources": Lista de materiais e recursos necessários.
    - "evaluation": Forma de avaliação da aprendizagem.
    """

    try:
        model = get_generative_model()
        response = model.generate_content(
            prompt,
            generation_config={"response_mime_type": "application/json"},
        )
        dados_ia = json.loads(_limpar_json(response.text or "{}"))

        plano = {secao: str(dados_ia.get(secao) or '') for secao in SECOES_PLANO}
        plano['gerado_por_ia'] = True
        logger.info(f"Plano gerado pela IA: {titulo} ({disciplina} / {turma})")
        return plano

    except Exception as e:
        logger.warning(f"Falha na geração do plano por IA ({e}). Usando roteiro padrão.")
        plano = _roteiro_padrao(titulo, disciplina)
        plano['gerado_por_ia'] = False
        return plano
