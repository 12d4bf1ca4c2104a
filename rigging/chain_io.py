# -*- coding: utf-8 -*-
"""Chain pose I/O (origin + bone lengths + angles) as .npz."""

from __future__ import annotations

import os

import numpy as np

from rigging.chain import MAX_BONES, Chain


def save_chain_npz(path: str, chain: Chain) -> None:
    """Save a chain's origin, lengths and angles to a .npz file."""
    dir_path = os.path.dirname(path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    np.savez_compressed(
        path,
        origin=np.asarray(chain.origin, dtype=np.float64),
        lengths=np.asarray(chain.lengths(), dtype=np.float64),
        angles=np.asarray(chain.angles(), dtype=np.float64),
    )


def load_chain_npz(path: str) -> Chain:
    """Rebuild a chain saved by `save_chain_npz`.

    Bones go through `Chain.add_bone`, so entries past the two-bone cap or
    with non-positive length are dropped the same way they would be at edit
    time.
    """
    with np.load(path) as data:
        missing = [k for k in ("origin", "lengths", "angles") if k not in data.files]
        if missing:
            raise ValueError(f"{path}: missing arrays {missing}")
        origin = np.asarray(data["origin"], dtype=np.float64)
        lengths = np.asarray(data["lengths"], dtype=np.float64).reshape(-1)
        angles = np.asarray(data["angles"], dtype=np.float64).reshape(-1)

    if lengths.shape != angles.shape:
        raise ValueError(
            f"{path}: lengths {lengths.shape} and angles {angles.shape} differ"
        )
    if lengths.size > MAX_BONES:
        print(f"[WARN] {path}: {lengths.size} bones stored, only {MAX_BONES} kept.")

    chain = Chain(origin)
    for length, angle in zip(lengths, angles):
        chain.add_bone(float(length), float(angle))
    return chain
