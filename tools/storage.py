"""
Almacenamiento de imágenes en Supabase Storage.
Fotos de propiedades, portadas del blog, autores, asesores y galerías de condominios.
"""

import re
import time
from config import SUPABASE_STORAGE_BUCKET, MAX_UPLOAD_SIZE
from tools.database import get_client


FOLDERS = ("properties", "blog", "contributors", "condos", "advisors")


def build_object_key(folder: str, filename: str, timestamp_ms: int = None) -> str:
    """Ruta del objeto: `{folder}/{epoch_ms}-{nombre sin caracteres raros}`."""
    if folder not in FOLDERS:
        raise ValueError(f"Carpeta de almacenamiento desconocida: {folder}")
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    clean_name = re.sub(r"[^a-zA-Z0-9.]", "", filename or "") or "imagen"
    return f"{folder}/{stamp}-{clean_name}"


def validate_image(filename: str, content: bytes, content_type: str) -> None:
    """Lanza ValueError si el archivo no es una imagen válida o excede 10MB."""
    if len(content) > MAX_UPLOAD_SIZE:
        raise ValueError(f"La imagen {filename} excede el límite de 10MB")
    if not (content_type or "").startswith("image/"):
        raise ValueError(f"El archivo {filename} no es una imagen válida")


async def upload_image(
    folder: str,
    filename: str,
    content: bytes,
    content_type: str,
) -> str:
    """
    Sube una imagen y devuelve su URL pública.

    Raises:
        ValueError: archivo inválido
        RuntimeError: fallo del almacenamiento
    """
    validate_image(filename, content, content_type)
    key = build_object_key(folder, filename)

    try:
        bucket = get_client().storage.from_(SUPABASE_STORAGE_BUCKET)
        bucket.upload(key, content, {"content-type": content_type})
        url = bucket.get_public_url(key)
    except Exception as e:
        print(f"❌ Error subiendo imagen {filename}: {e}")
        raise RuntimeError("Error al subir las imágenes") from e

    print(f"✅ Imagen subida: {key}")
    return url


async def upload_images(folder: str, files: list[tuple[str, bytes, str]]) -> list[str]:
    """Sube varias imágenes conservando el orden. Cada archivo es (nombre, bytes, tipo)."""
    urls = []
    for filename, content, content_type in files:
        urls.append(await upload_image(folder, filename, content, content_type))
    return urls
