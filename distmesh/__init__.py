"""Public package API for distmesh, a force-equilibrium simplex mesh generator.

This facade provides a stable, flat import surface on top of the internal
implementation package ``distmesh.core`` while deferring the matplotlib
import of the plotting module until first use to keep ``import distmesh``
fast.

Example
-------
    import numpy as np
    from distmesh import distmesh, bounding_box, circle

    points, triangles = distmesh(circle(1.0), 0.2, 1.0, bounding_box(2))

The deeper modules (``distmesh.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
from importlib.metadata import PackageNotFoundError as _NotInstalled
from importlib.metadata import version as _pkg_version
import logging as _logging

try:
    __version__ = _pkg_version("distmesh")
except _NotInstalled:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('distmesh.core.constants')
_conf = _imp('distmesh.core.config')
_exc = _imp('distmesh.core.exceptions')
_fields = _imp('distmesh.core.fields')
_geom = _imp('distmesh.core.geometry')
_edges = _imp('distmesh.core.edges')
_sampling = _imp('distmesh.core.sampling')
_proj = _imp('distmesh.core.projection')
_relax = _imp('distmesh.core.relaxation')
_boundary = _imp('distmesh.core.boundary')
_stats = _imp('distmesh.core.stats')
_io = _imp('distmesh.core.io')
_log = _imp('distmesh.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m

        def __getattr__(self, item):
            if item == '_m':
                # unset slot; let _load() import the module
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# matplotlib is only imported when plotting is first used
visualization = _lazy_module('distmesh.core.visualization')


def plot_mesh(*args, **kwargs):
    return visualization.plot_mesh(*args, **kwargs)


plot_mesh.__doc__ = "Draw a 2D mesh; see distmesh.core.visualization.plot_mesh."

# Entry points
distmesh = _relax.distmesh
relax = _relax.relax
MeshRelaxer = _relax.MeshRelaxer
RelaxationResult = _relax.RelaxationResult
bounding_box = _sampling.bounding_box
sample_points = _sampling.sample_points
project_to_boundary = _proj.project_to_boundary
unique_edges = _edges.unique_edges
simplex_edge_indices = _edges.simplex_edge_indices
bound_edges = _boundary.bound_edges
BoundaryEdges = _boundary.BoundaryEdges
DistMeshConfig = _conf.DistMeshConfig
RelaxationStats = _stats.RelaxationStats

# Fields
ScalarField = _fields.ScalarField
ConstantField = _fields.ConstantField
FunctionField = _fields.FunctionField
as_field = _fields.as_field
circle = _fields.circle
rectangle = _fields.rectangle
ellipse = _fields.ellipse
polygon = _fields.polygon
union = _fields.union
intersection = _fields.intersection
difference = _fields.difference

# Errors
DistMeshError = _exc.DistMeshError
ConfigurationError = _exc.ConfigurationError
InvalidBoundingBoxError = _exc.InvalidBoundingBoxError
DegenerateSamplingError = _exc.DegenerateSamplingError
FieldEvaluationError = _exc.FieldEvaluationError

# Geometry / I/O / logging
triangle_quality = _geom.triangle_quality
simplex_volumes = _geom.simplex_volumes
read_msh = _io.read_msh
write_msh = _io.write_msh
write_vtk = _io.write_vtk
configure_logging = _log.configure_logging

# Namespace submodules for exploratory users
constants = _const
fields = _fields
geometry = _geom
edges = _edges
sampling = _sampling
projection = _proj
relaxation = _relax
boundary = _boundary
io = _io

__all__ = [
    '__version__',
    # entry points
    'distmesh', 'relax', 'MeshRelaxer', 'RelaxationResult', 'bounding_box',
    'sample_points', 'project_to_boundary', 'unique_edges', 'simplex_edge_indices',
    'bound_edges', 'BoundaryEdges', 'DistMeshConfig', 'RelaxationStats',
    # fields
    'ScalarField', 'ConstantField', 'FunctionField', 'as_field',
    'circle', 'rectangle', 'ellipse', 'polygon', 'union', 'intersection', 'difference',
    # errors
    'DistMeshError', 'ConfigurationError', 'InvalidBoundingBoxError',
    'DegenerateSamplingError', 'FieldEvaluationError',
    # helpers
    'triangle_quality', 'simplex_volumes', 'read_msh', 'write_msh', 'write_vtk',
    'configure_logging', 'plot_mesh',
    # submodules / namespaces
    'constants', 'fields', 'geometry', 'edges', 'sampling', 'projection',
    'relaxation', 'boundary', 'io', 'visualization',
]
