"""Runtime configuration: Taichi backend selection and logging setup.

Taichi must be initialized before any renderer is constructed, because the
renderer allocates its scene fields in ``__init__``. All kernels run in
float64 (``default_fp=ti.f64``) with fast math disabled so that the integer
truncation steps of the shading model are reproducible.

Example:
    >>> from src.ray3d.config import initialize_taichi
    >>> initialize_taichi("cpu")
    'cpu'
    >>> from src.ray3d.core.renderer import FrameRenderer
    >>> frame = FrameRenderer().render(320, 240, angle=0.0)
"""

from __future__ import annotations

import logging
import os

import taichi as ti

logger = logging.getLogger(__name__)

# Environment variable consulted when no backend is passed explicitly
ARCH_ENV_VAR = "RAY3D_ARCH"

DEFAULT_ARCH = "cpu"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
    "opengl": ti.opengl,
}


def available_arches() -> tuple[str, ...]:
    """Return the backend names accepted by :func:`resolve_arch`."""
    return tuple(_ARCHES)


def resolve_arch(name: str | None = None) -> str:
    """Resolve a backend name, falling back to ``RAY3D_ARCH`` and then "cpu".

    Args:
        name: Backend name (case-insensitive) or None.

    Returns:
        The normalized backend name.

    Raises:
        ValueError: If the name is not a known Taichi backend.
    """
    if name is None:
        name = os.environ.get(ARCH_ENV_VAR) or DEFAULT_ARCH

    normalized = name.strip().lower()
    if normalized not in _ARCHES:
        raise ValueError(
            f"Unknown Taichi backend {name!r}; expected one of {', '.join(_ARCHES)}"
        )
    return normalized


def initialize_taichi(
    arch: str | None = None,
    *,
    cpu_threads: int | None = None,
    debug: bool = False,
) -> str:
    """Initialize Taichi for float64 rendering.

    Args:
        arch: Backend name (see :func:`available_arches`). None reads
            ``RAY3D_ARCH`` and defaults to "cpu".
        cpu_threads: Upper bound on worker threads for the CPU backend.
            None lets Taichi use every core.
        debug: Enable Taichi's bounds-checking debug mode.

    Returns:
        The backend name that was initialized.

    Note:
        Backends without float64 support (Metal in particular) will fail to
        compile the kernels; the CPU backend is the reference.
    """
    name = resolve_arch(arch)

    options: dict[str, object] = {
        "arch": _ARCHES[name],
        "default_fp": ti.f64,
        "fast_math": False,
        "debug": debug,
    }
    if cpu_threads is not None:
        options["cpu_max_num_threads"] = cpu_threads

    ti.init(**options)
    logger.info("Taichi initialized (backend=%s, threads=%s)", name, cpu_threads or "auto")
    return name


def configure_logging(verbose: bool = False) -> None:
    """Install a basic logging configuration for command-line use.

    Args:
        verbose: Log at DEBUG level instead of INFO.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
