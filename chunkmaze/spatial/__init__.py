"""Overlap queries between posed collision volumes."""

from .oracle import BoxOverlapOracle, OverlapReport, SpatialOracle

__all__ = ['BoxOverlapOracle', 'OverlapReport', 'SpatialOracle']
