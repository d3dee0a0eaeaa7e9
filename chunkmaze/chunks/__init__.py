"""
Chunk templates, connection points and the template library.
"""

from .connection_point import ConnectionPoint, DeadEndMarker
from .templates import ChunkLibrary, ChunkTemplate, CollisionVolume
from .chunk_io import (
    library_from_dict,
    library_to_dict,
    load_library,
    save_library,
    template_from_dict,
    template_to_dict,
)
from .builtin import default_library

__all__ = [
    'ConnectionPoint',
    'DeadEndMarker',
    'ChunkLibrary',
    'ChunkTemplate',
    'CollisionVolume',
    'library_from_dict',
    'library_to_dict',
    'load_library',
    'save_library',
    'template_from_dict',
    'template_to_dict',
    'default_library',
]
