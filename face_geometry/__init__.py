"""Planar face boundary loops, areas and dimensions for building element solids."""

__all__ = ["face_grouper", "faces", "formatting", "freecad_adapter", "parameters", "pipeline", "polygon_plane", "scene_io", "vec3"]
