"""Lightweight mesh file I/O.

- write_vtk: legacy ASCII VTK unstructured grid (ParaView / VisIt)
- write_msh / read_msh: Gmsh ASCII meshes (write 2.2, read 2.2 and 4.1)

Meshes use the package's canonical arrays:
    points: (N, D) float64, D in {2, 3}
    simplices: (M, D+1) int, 0-based
"""
from __future__ import annotations

import warnings
from typing import Dict, List, Optional, Tuple

import numpy as np

from .logging_utils import get_logger

logger = get_logger('distmesh.io')

# simplex width -> (VTK cell type, Gmsh element type)
_VTK_CELL = {3: 5, 4: 10}
_GMSH_ELEMENT = {3: 2, 4: 4}
_GMSH_WIDTH = {v: k for k, v in _GMSH_ELEMENT.items()}


def _check_mesh(points, simplices) -> Tuple[np.ndarray, np.ndarray]:
    points = np.asarray(points, dtype=np.float64)
    simplices = np.asarray(simplices, dtype=np.int64)
    if points.ndim != 2 or points.shape[1] not in (2, 3):
        raise ValueError(f"points must be (N, 2) or (N, 3), got shape {points.shape}")
    if simplices.ndim != 2 or simplices.shape[1] != points.shape[1] + 1:
        raise ValueError(
            f"simplices must be (M, {points.shape[1] + 1}) for {points.shape[1]}D points, got shape {simplices.shape}")
    return points, simplices


def _as_xyz(points: np.ndarray) -> np.ndarray:
    if points.shape[1] == 2:
        return np.column_stack([points, np.zeros(len(points))])
    return points


def _write_vtk_data(f, name: str, data: np.ndarray, where: str) -> None:
    if data.ndim == 1:
        f.write(f"SCALARS {name} double 1\n")
        f.write("LOOKUP_TABLE default\n")
        for val in data:
            f.write(f"{val:.16e}\n")
    elif data.ndim == 2 and data.shape[1] in (2, 3):
        f.write(f"VECTORS {name} double\n")
        for vec in _as_xyz(data):
            f.write(f"{vec[0]:.16e} {vec[1]:.16e} {vec[2]:.16e}\n")
    else:
        warnings.warn(f"Skipping {where}['{name}'] with unsupported shape {data.shape}")


def write_vtk(filepath: str,
              points: np.ndarray,
              simplices: np.ndarray,
              point_data: Optional[Dict[str, np.ndarray]] = None,
              cell_data: Optional[Dict[str, np.ndarray]] = None,
              title: str = "distmesh mesh") -> None:
    """Write a triangle (2D) or tetrahedron (3D) mesh to legacy ASCII VTK.

    Parameters
    ----------
    filepath : str
        Output .vtk file path
    points : (N, 2) or (N, 3) ndarray
        Vertex coordinates. 2D points are written with z=0.
    simplices : (M, D+1) ndarray
        Connectivity (0-indexed)
    point_data, cell_data : dict, optional
        Named scalar (N,) / (M,) or vector (N, 2|3) / (M, 2|3) arrays.
    title : str
        Dataset title line

    Examples
    --------
    >>> from distmesh.core.geometry import triangle_quality
    >>> write_vtk('disk.vtk', points, triangles,
    ...           cell_data={'quality': triangle_quality(points, triangles)})
    """
    points, simplices = _check_mesh(points, simplices)
    xyz = _as_xyz(points)
    width = simplices.shape[1]
    num_points = len(xyz)
    num_cells = len(simplices)

    with open(filepath, 'w') as f:
        f.write("# vtk DataFile Version 2.0\n")
        f.write(f"{title}\n")
        f.write("ASCII\n")
        f.write("DATASET UNSTRUCTURED_GRID\n")

        f.write(f"POINTS {num_points} double\n")
        for pt in xyz:
            f.write(f"{pt[0]:.16e} {pt[1]:.16e} {pt[2]:.16e}\n")

        # Format: numIndices v0 v1 ...
        f.write(f"\nCELLS {num_cells} {num_cells * (width + 1)}\n")
        for cell in simplices:
            f.write(f"{width} " + " ".join(str(int(v)) for v in cell) + "\n")

        f.write(f"\nCELL_TYPES {num_cells}\n")
        for _ in range(num_cells):
            f.write(f"{_VTK_CELL[width]}\n")

        if point_data:
            f.write(f"\nPOINT_DATA {num_points}\n")
            for name, data in point_data.items():
                _write_vtk_data(f, name, np.asarray(data, dtype=np.float64), 'point_data')

        if cell_data:
            f.write(f"\nCELL_DATA {num_cells}\n")
            for name, data in cell_data.items():
                _write_vtk_data(f, name, np.asarray(data, dtype=np.float64), 'cell_data')
    logger.debug('write_vtk: %s (%d points, %d cells)', filepath, num_points, num_cells)


def write_msh(filepath: str, points: np.ndarray, simplices: np.ndarray) -> None:
    """Write a triangle or tetrahedron mesh in Gmsh ASCII format 2.2 (1-based tags)."""
    points, simplices = _check_mesh(points, simplices)
    xyz = _as_xyz(points)
    elem_type = _GMSH_ELEMENT[simplices.shape[1]]
    with open(filepath, 'w') as f:
        f.write("$MeshFormat\n2.2 0 8\n$EndMeshFormat\n")
        f.write(f"$Nodes\n{len(xyz)}\n")
        for i, pt in enumerate(xyz, start=1):
            f.write(f"{i} {pt[0]:.16e} {pt[1]:.16e} {pt[2]:.16e}\n")
        f.write("$EndNodes\n")
        f.write(f"$Elements\n{len(simplices)}\n")
        for i, cell in enumerate(simplices, start=1):
            # two tags: physical and elementary entity
            f.write(f"{i} {elem_type} 2 1 1 " + " ".join(str(int(v) + 1) for v in cell) + "\n")
        f.write("$EndElements\n")
    logger.debug('write_msh: %s (%d points, %d cells)', filepath, len(xyz), len(simplices))


def _section(lines: List[str], name: str) -> Tuple[int, int]:
    start = end = None
    for i, line in enumerate(lines):
        if line == f'${name}':
            start = i
        elif line == f'$End{name}':
            end = i
            break
    if start is None or end is None:
        raise ValueError(f"Missing ${name} section in .msh file")
    return start, end


def _finish(node_coords: Dict[int, Tuple[float, ...]], cells: List[List[int]]) -> Tuple[np.ndarray, np.ndarray]:
    if not cells:
        raise ValueError("No triangle or tetrahedron elements found in .msh file")
    width = max(len(c) for c in cells)
    # keep the highest-dimensional simplices only (triangles are faces of a 3D mesh)
    cells = [c for c in cells if len(c) == width]
    dim = width - 1
    node_ids = sorted(node_coords.keys())
    id_to_idx = {nid: idx for idx, nid in enumerate(node_ids)}
    points = np.array([node_coords[nid][:dim] for nid in node_ids], dtype=np.float64)
    simplices = np.array([[id_to_idx[v] for v in c] for c in cells], dtype=np.int64)
    return points, simplices


def _read_msh_v2(lines: List[str]) -> Tuple[np.ndarray, np.ndarray]:
    node_start, node_end = _section(lines, 'Nodes')
    node_coords = {}
    for i in range(node_start + 2, node_end):
        parts = lines[i].split()
        node_coords[int(parts[0])] = tuple(float(x) for x in parts[1:4])
    elem_start, elem_end = _section(lines, 'Elements')
    cells = []
    for i in range(elem_start + 2, elem_end):
        parts = lines[i].split()
        elem_type = int(parts[1])
        if elem_type in _GMSH_WIDTH:
            first = 3 + int(parts[2])
            cells.append([int(v) for v in parts[first:first + _GMSH_WIDTH[elem_type]]])
    return _finish(node_coords, cells)


def _read_msh_v4(lines: List[str]) -> Tuple[np.ndarray, np.ndarray]:
    node_start, node_end = _section(lines, 'Nodes')
    node_coords = {}
    i = node_start + 2
    while i < node_end:
        # entityDim entityTag parametric numNodesInBlock
        count = int(lines[i].split()[3])
        tags = [int(lines[i + 1 + j]) for j in range(count)]
        for j, tag in enumerate(tags):
            node_coords[tag] = tuple(float(x) for x in lines[i + 1 + count + j].split()[:3])
        i += 1 + 2 * count
    elem_start, elem_end = _section(lines, 'Elements')
    cells = []
    i = elem_start + 2
    while i < elem_end:
        # entityDim entityTag elementType numElementsInBlock
        header = lines[i].split()
        elem_type, count = int(header[2]), int(header[3])
        if elem_type in _GMSH_WIDTH:
            for j in range(count):
                parts = lines[i + 1 + j].split()
                cells.append([int(v) for v in parts[1:1 + _GMSH_WIDTH[elem_type]]])
        i += 1 + count
    return _finish(node_coords, cells)


def read_msh(filepath: str) -> Tuple[np.ndarray, np.ndarray]:
    """Read a triangle or tetrahedron mesh from a Gmsh ASCII .msh file (2.2 or 4.1).

    Returns ``(points, simplices)`` with 0-based indices. The dimension is
    taken from the highest-dimensional simplex type present: a file with
    tetrahedra yields (N, 3) points, otherwise (N, 2).

    Raises
    ------
    ValueError
        If the format version is unsupported or the file holds no simplices.
    """
    with open(filepath, 'r') as f:
        lines = [line.strip() for line in f]
    if not lines:
        raise ValueError(f"Empty file: {filepath}")
    version = None
    for i, line in enumerate(lines):
        if line.startswith('$MeshFormat'):
            version = float(lines[i + 1].split()[0])
            break
    if version is None:
        raise ValueError("Could not detect Gmsh format version (no $MeshFormat section)")
    if 2.0 <= version < 3.0:
        return _read_msh_v2(lines)
    if 4.0 <= version < 5.0:
        return _read_msh_v4(lines)
    raise ValueError(f"Unsupported Gmsh format version: {version}")


__all__ = ['read_msh', 'write_msh', 'write_vtk']
