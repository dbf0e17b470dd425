"""Mesh preview of generated bricks.

Every brick becomes an axis-aligned box with a solid vertex color. Brick
space is Z-up; the mesh is written Y-up the way glTF viewers expect.
"""

import logging
import pathlib
from typing import List

import numpy as np
import trimesh

from .models import Brick

logger = logging.getLogger(__name__)

# Unit box with corners at +-1, shared by every brick
_TEMPLATE = trimesh.creation.box(extents=(2.0, 2.0, 2.0))


def bricks_to_mesh(bricks: List[Brick]) -> trimesh.Trimesh:
    """Concatenate all bricks into one colored mesh."""
    if not bricks:
        raise ValueError("No bricks to convert")

    n = len(bricks)
    half = np.array([b.size for b in bricks], dtype=np.float64)
    centers = np.array([b.position for b in bricks], dtype=np.float64)
    colors = np.array([b.color for b in bricks], dtype=np.uint8)

    template_verts = np.asarray(_TEMPLATE.vertices)
    template_faces = np.asarray(_TEMPLATE.faces)
    n_verts = len(template_verts)

    verts = centers[:, None, :] + template_verts[None, :, :] * half[:, None, :]
    verts = verts.reshape(-1, 3)
    # Z-up brick space -> Y-up (x, z, -y) keeps the winding
    verts = np.column_stack([verts[:, 0], verts[:, 2], -verts[:, 1]])

    faces = template_faces[None, :, :] + (np.arange(n) * n_verts)[:, None, None]
    faces = faces.reshape(-1, 3)

    vertex_colors = np.repeat(colors, n_verts, axis=0)

    mesh = trimesh.Trimesh(vertices=verts, faces=faces,
                           vertex_colors=vertex_colors, process=False)
    logger.info(f"Brick mesh: {n} boxes, {len(mesh.vertices)} verts, "
                f"{len(mesh.faces)} faces")
    return mesh


def export_mesh(bricks: List[Brick], output_path) -> str:
    """Write the brick mesh; the format follows the file extension."""
    path = pathlib.Path(output_path)
    mesh = bricks_to_mesh(bricks)
    file_type = path.suffix.lower().lstrip(".") or "glb"
    mesh.export(str(path), file_type=file_type)
    logger.info(f"Preview mesh written: {path}")
    return str(path)
