"""
Imagens enviadas pelos usuários (foto da O.S. e avatar).

Gravação no storage padrão do Django e normalização do avatar:
recorte quadrado central e reencode como JPEG 400x400.
"""

from io import BytesIO
from typing import Optional
import logging
import os
import uuid

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

AVATAR_TAMANHO = (400, 400)
AVATAR_QUALIDADE = 90


def normalizar_avatar(arquivo) -> ContentFile:
    """
    Recorta o centro da imagem em quadrado e gera JPEG 400x400.

    A orientação EXIF é aplicada antes do recorte; transparência vira
    fundo branco.
    """
    arquivo.seek(0)
    with Image.open(arquivo) as original:
        imagem = ImageOps.exif_transpose(original)

        if imagem.mode in ('RGBA', 'LA', 'P'):
            imagem = imagem.convert('RGBA')
            fundo = Image.new('RGB', imagem.size, (255, 255, 255))
            fundo.paste(imagem, mask=imagem.split()[-1])
            imagem = fundo
        elif imagem.mode != 'RGB':
            imagem = imagem.convert('RGB')

        imagem = ImageOps.fit(imagem, AVATAR_TAMANHO, Image.Resampling.LANCZOS)

        saida = BytesIO()
        imagem.save(saida, format='JPEG', quality=AVATAR_QUALIDADE, optimize=True)

    return ContentFile(saida.getvalue(), name='avatar.jpg')


def salvar_imagem(arquivo, pasta: str) -> str:
    """Grava o upload no storage e retorna a URL pública."""
    extensao = os.path.splitext(arquivo.name)[1].lower() or '.jpg'
    nome = default_storage.save(f'{pasta}/{uuid.uuid4().hex}{extensao}', arquivo)
    logger.info(f"Imagem armazenada: {nome}")
    return default_storage.url(nome)


def remover_imagem(url: Optional[str]) -> None:
    """Remove do storage um arquivo gravado por `salvar_imagem`."""
    if not url or not url.startswith(settings.MEDIA_URL):
        return
    nome = url[len(settings.MEDIA_URL):]
    try:
        default_storage.delete(nome)
    except OSError as e:
        logger.warning(f"Falha ao remover arquivo {nome}: {e}")
