from typing import Dict, Iterable, List, Optional

from ..models import Achievement, Stats


class AchievementHelper:
    """Manages achievement definitions and works out which ones a set of stats has newly earned."""

    def __init__(self, achievements_list: List[Achievement]):
        self.all_achievements: List[Achievement] = list(achievements_list)
        self.achievements_by_id: Dict[str, Achievement] = {a.id: a for a in achievements_list}

    def get_achievement_by_id(self, achievement_id: str) -> Optional[Achievement]:
        return self.achievements_by_id.get(achievement_id)

    @staticmethod
    def get_stat_value(stats: Stats, stat_name: str) -> int:
        value = getattr(stats, stat_name, 0)
        return value if isinstance(value, (int, float)) else 0

    def check_for_unlocks(self, stats: Stats, completed: Iterable[str]) -> List[Achievement]:
        """
        Checks all defined achievements against the stats and returns the newly earned
        Achievement objects, in definition order. Already completed ids are never returned.
        """

        newly_unlocked: List[Achievement] = []
        completed_set = set(completed)

        for achievement in self.all_achievements:
            if achievement.id in completed_set:
                continue

            if self.get_stat_value(stats, achievement.stat) >= achievement.target:
                newly_unlocked.append(achievement)

        return newly_unlocked

    def get_progress(self, stats: Stats, achievement: Achievement) -> float:
        """Progress toward an achievement as a fraction in [0, 1]."""
        if achievement.target <= 0:
            return 1.0
        return min(self.get_stat_value(stats, achievement.stat), achievement.target) / achievement.target
