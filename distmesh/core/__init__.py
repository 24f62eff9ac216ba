"""Implementation modules of the distmesh package (internal; import from ``distmesh``)."""
