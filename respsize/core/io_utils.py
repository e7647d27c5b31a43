import os
from typing import Iterable, List, Optional

SUPPORTED_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"}


def is_supported(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in SUPPORTED_EXTS


def list_images(folder: str) -> List[str]:
    """Recursively list supported images below ``folder``, sorted."""
    out: List[str] = []
    for root, _, files in os.walk(folder):
        out.extend(os.path.join(root, n) for n in files if is_supported(n))
    return sorted(out)


def gather_inputs(files: Iterable[str], folder: Optional[str]) -> List[str]:
    """Explicit files win over a folder; unsupported files are dropped."""
    files = list(files or [])
    if files:
        return [f for f in files if is_supported(f)]
    if folder:
        return list_images(folder)
    return []


def next_available(path: str) -> str:
    """``path`` itself if free, otherwise the first free ``<base>_<n><ext>``."""
    if not os.path.exists(path):
        return path
    base, ext = os.path.splitext(path)
    i = 2
    while os.path.exists(f"{base}_{i}{ext}"):
        i += 1
    return f"{base}_{i}{ext}"
