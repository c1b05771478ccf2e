"""Manifest classification and change-detection hashing."""

from __future__ import annotations

from collections.abc import Iterable

from ctxbundle.context.models import ManifestEntry, ManifestType
from ctxbundle.graph.models import FileRecord
from ctxbundle.graph.paths import basename, get_extension, normalize_path

_CONFIG_NAMES = frozenset({
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "tsconfig.json",
    ".env",
    ".env.local",
    ".env.example",
})

_ASSET_EXTENSIONS = frozenset({
    "svg", "png", "jpg", "jpeg", "gif", "webp", "ico", "avif", "woff", "woff2", "ttf",
})
_DOC_EXTENSIONS = frozenset({"md", "txt", "adoc"})
_CODE_EXTENSIONS = frozenset({
    "js", "jsx", "ts", "tsx", "css", "scss", "sass", "html", "htm", "json",
})

_HASH_SEED = 5381
_MASK32 = 0xFFFFFFFF


def classify_manifest_type(path: str) -> ManifestType:
    """Coarse type of a file, decided from its name alone."""
    name = basename(path).lower()
    if name in _CONFIG_NAMES or "config" in name:
        return ManifestType.CONFIG
    ext = get_extension(path)
    if ext in _ASSET_EXTENSIONS:
        return ManifestType.ASSET
    if ext in _DOC_EXTENSIONS:
        return ManifestType.DOC
    if ext in _CODE_EXTENSIONS:
        return ManifestType.CODE
    return ManifestType.OTHER


def hash_string(value: str) -> str:
    """djb2-xor over UTF-16 code units, rendered as ``h<hex>``.

    Cheap change detection only; collisions are possible.
    """
    data = (value or "").encode("utf-16-le", errors="surrogatepass")
    h = _HASH_SEED
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h * 33) ^ unit) & _MASK32
    return f"h{h:x}"


def hash_content(path: str, content: str) -> str:
    return hash_string(f"{path}:{content}")


def build_manifest(files: Iterable[FileRecord]) -> list[ManifestEntry]:
    """One entry per distinct non-empty normalized path, in input order."""
    manifest: list[ManifestEntry] = []
    seen: set[str] = set()
    for record in files:
        path = normalize_path(record.path)
        if not path or path in seen:
            continue
        seen.add(path)
        manifest.append(
            ManifestEntry(
                path=path,
                hash=hash_content(path, record.content),
                size=len(record.content),
                type=classify_manifest_type(path),
                extension=get_extension(path),
            )
        )
    return manifest
