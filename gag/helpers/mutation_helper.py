from typing import Dict, List, Optional

from ..models import MutationRecipe


class MutationHelper:
    """Encapsulates all logic related to adjacency-based plant mutations."""

    def __init__(self, mutations_list: List[MutationRecipe], chance_window_ms: int = 60000):
        self.all_mutations: List[MutationRecipe] = list(mutations_list)
        self.mutations_by_id: Dict[str, MutationRecipe] = {m.id: m for m in mutations_list}
        self.chance_window_ms = chance_window_ms

    def get_mutation_by_id(self, mutation_id: Optional[str]) -> Optional[MutationRecipe]:
        if mutation_id is None:
            return None
        return self.mutations_by_id.get(mutation_id)

    def find_recipes(self, species_a: Optional[str], species_b: Optional[str]) -> List[MutationRecipe]:
        """All recipes whose unordered ingredient pair is exactly {species_a, species_b}."""

        if species_a is None or species_b is None:
            return []
        return [m for m in self.all_mutations if m.matches(species_a, species_b)]

    def tick_chance(self, recipe: MutationRecipe, mutation_modifier: float, tick_ms: float) -> float:
        """Per-tick probability for a recipe whose chance is quoted per chance_window_ms of real time."""
        return recipe.chance * mutation_modifier * tick_ms / self.chance_window_ms

    @staticmethod
    def adjacent_indices(index: int, total_plots: int, columns: int) -> List[int]:
        """Moore neighbourhood of a plot in a row-major grid, clipped to the grid and to total_plots."""

        if columns <= 0 or not (0 <= index < total_plots):
            return []

        rows = (total_plots + columns - 1) // columns
        row, col = divmod(index, columns)
        neighbours = []

        for d_row in (-1, 0, 1):
            for d_col in (-1, 0, 1):
                if d_row == 0 and d_col == 0:
                    continue
                n_row, n_col = row + d_row, col + d_col
                if 0 <= n_row < rows and 0 <= n_col < columns:
                    n_index = n_row * columns + n_col
                    if n_index < total_plots:
                        neighbours.append(n_index)

        return neighbours
