"""
Módulo de Integração com Google Cloud Storage (Service Layer)

Guarda os arquivos da Biblioteca Digital e os anexos do Mural.
Os arquivos NÃO são públicos: o banco guarda o nome do blob e o acesso é
feito por Signed URL temporária.
"""

import uuid
from datetime import timedelta
from typing import Any, Optional

from flask import current_app
from google.cloud import storage

from .logger import get_logger

logger = get_logger(__name__)


def _get_client() -> storage.Client:
    return storage.Client(project=current_app.config.get('GOOGLE_CLOUD_PROJECT'))


def _get_bucket() -> storage.Bucket:
    bucket_name = current_app.config.get('GCS_BUCKET_NAME')
    if not bucket_name:
        raise ValueError("GCS_BUCKET_NAME não configurado")
    return _get_client().bucket(bucket_name)


def upload_file(arquivo_storage: Any, nome_original: str, pasta: str = 'materiais') -> str:
    """
    Faz o upload e retorna o NOME DO BLOB (ID interno).
    """
    bucket = _get_bucket()

    # Gera nome único
    nome_blob = f"{pasta}/{uuid.uuid4().hex}_{nome_original.replace(' ', '_')}"

    blob = bucket.blob(nome_blob)
    arquivo_storage.seek(0)
    content_type = getattr(arquivo_storage, 'mimetype', None) or 'application/octet-stream'
    blob.upload_from_file(arquivo_storage, content_type=content_type)

    logger.info(f"Arquivo enviado ao bucket: {nome_blob}")
    return nome_blob


def generate_signed_url(blob_name: str, expiration: int = 3600) -> Optional[str]:
    """
    Gera uma Signed URL temporária para acesso seguro ao arquivo.
    Args:
        blob_name: ID interno do arquivo no GCS.
        expiration: Tempo em segundos (padrão 1 hora).
    """
    if not blob_name or not current_app.config.get('GCS_BUCKET_NAME'):
        return None

    try:
        blob = _get_bucket().blob(blob_name)
        return blob.generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=expiration),
            method="GET"
        )
    except Exception as e:
        logger.error(f"Erro ao gerar Signed URL para {blob_name}: {e}")
        return None


def delete_file(blob_name: str) -> None:
    """Remove arquivo do Bucket pelo nome do blob."""
    bucket_name = current_app.config.get('GCS_BUCKET_NAME')
    if not bucket_name or not blob_name:
        return

    # Se por acaso vier uma URL completa, extrai o nome do blob
    if f"/{bucket_name}/" in blob_name:
        blob_name = blob_name.split(f"/{bucket_name}/")[-1].split('?')[0]

    try:
        _get_bucket().blob(blob_name).delete()
    except Exception as e:
        logger.error(f"Erro ao deletar arquivo {blob_name}: {e}")
