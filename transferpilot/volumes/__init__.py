"""Volume listing and free-space queries."""

from .df import SpaceProbe, VolumeInfo, available_bytes, list_volumes, parse_df_output

__all__ = [
    "SpaceProbe",
    "VolumeInfo",
    "available_bytes",
    "list_volumes",
    "parse_df_output",
]
