"""Named colour space conversion matrices for SDI output attributes.

Each matrix is 15 floats laid out row by row as

    YR,  YG,  YB,  YOffset,  YScale,
    CrR, CrG, CrB, CrOffset, CrScale,
    CbR, CbG, CbB, CbOffset, CbScale
"""

from __future__ import annotations

_MATRICES: dict[str, tuple[float, ...]] = {
    "itu601": (
        0.2991, 0.5870, 0.1150, 0.0625, 0.85547,
        0.5000, -0.4185, -0.0810, 0.5000, 0.87500,
        -0.1685, -0.3310, 0.5000, 0.5000, 0.87500,
    ),
    "itu709": (
        0.2130, 0.7156, 0.0725, 0.0625, 0.85547,
        0.4997, -0.4541, -0.0455, 0.5000, 0.87500,
        -0.1146, -0.3850, 0.4997, 0.5000, 0.87500,
    ),
    "itu177": (
        0.412391, 0.357584, 0.180481, 0.0, 0.85547,
        0.019331, 0.119195, 0.950532, 0.0, 0.87500,
        0.212639, 0.715169, 0.072192, 0.0, 0.87500,
    ),
    "identity": (
        0.0, 1.0, 0.0, 0.0625, 0.85547,
        1.0, 0.0, 0.0, 0.5, 0.87500,
        0.0, 0.0, 1.0, 0.5, 0.87500,
    ),
}


def get_sdi_csc_matrix(name: str) -> tuple[float, ...] | None:
    return _MATRICES.get(name.strip().lower())


def sdi_csc_matrix_names() -> tuple[str, ...]:
    return tuple(_MATRICES)
