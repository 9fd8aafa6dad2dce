from .errors import CanonicalizationError, describe


def normalize_separators(path: str) -> str:
    """Rewrite Windows backslash separators to forward slashes."""
    return path.replace("\\", "/")


def canonicalize(path: str, resolver, max_path: int) -> str:
    """Resolve `path` with the host `resolver` and check it still fits."""
    try:
        resolved = resolver(path)
    except OSError as exc:
        raise CanonicalizationError(
            f"Failed to resolve sandbox base '{path}': {describe(exc)}.", path
        ) from exc

    if len(resolved) >= max_path:
        raise CanonicalizationError(
            f"Resolved sandbox base '{resolved}' exceeds the maximum path length ({max_path}).",
            resolved,
        )
    return resolved
