"""Generation leveling and initial placement."""
from kinforce.graph.layout.generations import resolve_generations, group_by_level, level_band_y
from kinforce.graph.layout.initial import initial_positions

__all__ = ["resolve_generations", "group_by_level", "level_band_y", "initial_positions"]
