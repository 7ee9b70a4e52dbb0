import dataclasses
import random
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional

from .decorators import checks_achievements, valid_plot
from .helpers import (
    AchievementHelper,
    DataHelper,
    EventHelper,
    GameStateHelper,
    LoggingHelper,
    MutationHelper,
    PlantHelper,
    SalesHelper,
    ShopHelper,
    TimeHelper,
    WeatherHelper,
)
from .models import (
    Achievement,
    AchievementUnlocked,
    GameSettings,
    GameState,
    GameStateView,
    HarvestResult,
    MutationEvent,
    OfflineReport,
    PlantResult,
    Plot,
    PlotState,
    WeatherType,
)


class Garden:
    """
    The simulation core. Owns one GameState exclusively and exposes every action that changes it,
    plus the time-driven tick steps the Engine runs in order.

    Expected failures (wrong plot state, no seeds, not enough coins, maxed upgrade, bad index) never
    raise; actions return None, False or 0 instead. Callers only ever see copies of the state.
    """

    RARITY_STATS = {
        "rare": "rare_plants_grown",
        "epic": "epic_plants_grown",
        "legendary": "legendary_plants_grown",
        "mythic": "mythic_plants_grown",
    }
    MUTATION_RARITY_FLOOR = "epic"
    STORMY = "stormy"
    DROUGHT = "drought"

    def __init__(
        self,
        data: DataHelper,
        events: Optional[EventHelper] = None,
        state: Optional[GameState] = None,
        logger: Optional[LoggingHelper] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = TimeHelper.get_current_timestamp_ms,
        settings: Optional[GameSettings] = None,
    ):
        self.data = data
        self.settings = settings or data.settings
        self.logger = logger or data.logger
        self.events = events or EventHelper(self.logger)
        self.rng = rng or random.Random()
        self.clock = clock

        self.plant_helper = PlantHelper(data.seeds, data.rarities, data.categories)
        self.weather_helper = WeatherHelper(data.weather, self.settings)
        self.mutation_helper = MutationHelper(data.mutations, self.settings.mutation_chance_window_ms)
        self.sales_helper = SalesHelper(self.plant_helper, self.mutation_helper)
        self.shop_helper = ShopHelper(self.plant_helper, data.upgrades)
        self.achievement_helper = AchievementHelper(data.achievements)
        self.game_state_helper = GameStateHelper(self.shop_helper, self.logger)

        self.state: GameState = state if state is not None else self.game_state_helper.create_default_state(clock())
        self.game_state_helper.ensure_plot_count(self.state)

    # --- State access ---

    def get_state_view(self) -> GameStateView:
        state = self.state
        return GameStateView(
            coins=state.coins,
            plots=tuple(dataclasses.replace(plot) for plot in state.plots),
            inventory=MappingProxyType(dict(state.inventory)),
            upgrades=MappingProxyType(dict(state.upgrades)),
            discovered_mutations=tuple(state.discovered_mutations),
            completed_achievements=tuple(state.completed_achievements),
            stats=dataclasses.replace(state.stats, types_grown=list(state.stats.types_grown)),
            weather=dataclasses.replace(state.weather),
            last_save_time=state.last_save_time,
        )

    def get_coins(self) -> int:
        return self.state.coins

    def get_inventory(self) -> MappingProxyType:
        return MappingProxyType(dict(self.state.inventory))

    def get_seed_count(self, seed_id: str) -> int:
        return self.state.inventory.get(seed_id, 0)

    def get_plot(self, plot_index: int) -> Optional[Plot]:
        if 0 <= plot_index < len(self.state.plots):
            return dataclasses.replace(self.state.plots[plot_index])
        return None

    def get_upgrade_level(self, track_id: str) -> int:
        return self.state.upgrades.get(track_id, 0)

    def get_max_plots(self) -> int:
        return self.shop_helper.get_plot_count(self.get_upgrade_level(ShopHelper.GARDEN_SIZE))

    def get_grid_columns(self) -> int:
        return self.shop_helper.get_grid_columns(self.get_upgrade_level(ShopHelper.GARDEN_SIZE))

    def get_weather(self) -> WeatherType:
        return self.weather_helper.get_weather_by_id(self.state.weather.current)

    def get_weather_time_remaining(self) -> float:
        return self.state.weather.time_remaining

    def get_plot_display(self, plot_index: int) -> Optional[str]:
        """The emoji a renderer would show for a plot right now."""

        plot = self.get_plot(plot_index)
        if plot is None or plot.state == PlotState.EMPTY:
            return None
        if plot.state == PlotState.DEAD:
            return "💀"
        if plot.is_mutation:
            mutation = self.mutation_helper.get_mutation_by_id(plot.mutation_id)
            return mutation.emoji if mutation else SalesHelper.MUTATION_FALLBACK_EMOJI

        seed = self.plant_helper.get_seed_by_id(plot.seed_type)
        if seed is None:
            return "❓"
        if plot.state == PlotState.HARVESTABLE:
            return seed.emoji
        fraction = plot.growth_progress / plot.growth_total if plot.growth_total else 0.0
        return self.plant_helper.get_stage_emoji(seed, fraction)

    # --- Coins & inventory ---

    def _spend_coins(self, amount: int) -> bool:
        if self.state.coins >= amount:
            self.state.coins -= amount
            return True
        return False

    def add_seed(self, seed_id: str, count: int = 1) -> bool:
        if count <= 0 or self.plant_helper.get_seed_by_id(seed_id) is None:
            return False
        self.state.inventory[seed_id] = self.state.inventory.get(seed_id, 0) + count
        return True

    def _remove_seed(self, seed_id: str) -> bool:
        current = self.state.inventory.get(seed_id, 0)
        if current <= 0:
            return False
        if current == 1:
            del self.state.inventory[seed_id]
        else:
            self.state.inventory[seed_id] = current - 1
        return True

    # --- Player actions ---

    @checks_achievements
    @valid_plot(failure=None)
    def plant(self, plot_index: int, seed_id: str) -> Optional[PlantResult]:
        plot = self.state.plots[plot_index]
        if plot.state != PlotState.EMPTY:
            return None

        seed = self.plant_helper.get_seed_by_id(seed_id)
        if seed is None or not self._remove_seed(seed_id):
            return None

        lucky_boost = self.shop_helper.get_lucky_boost(self.get_upgrade_level(ShopHelper.LUCKY_SEEDS))
        rarity = self.plant_helper.roll_rarity(lucky_boost, self.rng)

        self.state.plots[plot_index] = Plot(
            state=PlotState.GROWING,
            seed_type=seed_id,
            rarity=rarity,
            growth_progress=0.0,
            growth_total=seed.grow_time,
            water_level=0,
            water_needed=seed.water_needed,
            watered=False,
        )

        stats = self.state.stats
        if rarity in self.RARITY_STATS:
            stat_name = self.RARITY_STATS[rarity]
            setattr(stats, stat_name, getattr(stats, stat_name) + 1)

        if seed_id not in stats.types_grown:
            stats.types_grown.append(seed_id)
            stats.unique_types_grown = len(stats.types_grown)

        return PlantResult(rarity=rarity, species=seed)

    def _apply_water(self, plot: Plot):
        plot.water_level += 1
        if plot.water_level >= plot.water_needed:
            plot.watered = True
        self.state.stats.total_watered += 1

    @checks_achievements
    @valid_plot(failure=False)
    def water(self, plot_index: int) -> bool:
        plot = self.state.plots[plot_index]
        if not plot.is_thirsty:
            return False

        self._apply_water(plot)
        return True

    @checks_achievements
    def water_bulk(self) -> int:
        """Waters thirsty growing plots in order, as many as the watering can reaches. Returns the count."""

        limit = self.shop_helper.get_water_count(self.get_upgrade_level(ShopHelper.WATERING_CAN),
                                                 len(self.state.plots))
        watered = 0
        for plot in self.state.plots:
            if watered >= limit:
                break
            if plot.is_thirsty:
                self._apply_water(plot)
                watered += 1
        return watered

    @checks_achievements
    @valid_plot(failure=None)
    def harvest(self, plot_index: int) -> Optional[HarvestResult]:
        """Clears a harvestable plot and prices what came out of it. Coins move only in sell_harvest."""

        plot = self.state.plots[plot_index]
        if plot.state != PlotState.HARVESTABLE:
            return None

        sell_bonus = self.shop_helper.get_sell_bonus(self.get_upgrade_level(ShopHelper.SELL_BONUS))
        result = self.sales_helper.build_harvest_result(plot, sell_bonus)

        self.state.plots[plot_index] = Plot()
        self.state.stats.total_harvested += 1
        return result

    @checks_achievements
    def sell_harvest(self, result: HarvestResult) -> bool:
        self.state.coins += result.sell_price
        self.state.stats.total_earned += result.sell_price
        return True

    @checks_achievements
    def buy_seed(self, seed_id: str) -> bool:
        seed = self.plant_helper.get_seed_by_id(seed_id)
        if seed is None:
            return False

        if not self.plant_helper.is_available(seed, TimeHelper.est_date_from_ms(self.clock())):
            return False

        if not self._spend_coins(seed.seed_cost):
            return False

        self.state.inventory[seed_id] = self.state.inventory.get(seed_id, 0) + 1
        self.state.stats.total_seeds_bought += 1
        return True

    @checks_achievements
    def buy_upgrade(self, track_id: str) -> bool:
        track = self.shop_helper.get_track(track_id)
        if track is None:
            return False

        current_level = self.get_upgrade_level(track_id)
        if current_level >= track.max_level:
            return False

        if not self._spend_coins(track.levels[current_level + 1].cost):
            return False

        self.state.upgrades[track_id] = current_level + 1
        if self.state.upgrades[track_id] >= track.max_level:
            self.state.stats.maxed_upgrades += 1

        if track_id == ShopHelper.GARDEN_SIZE:
            self.game_state_helper.ensure_plot_count(self.state)

        self.logger.log(f"Upgrade: {track.name} is now level {current_level + 1}.", "DEBUG")
        return True

    @valid_plot(failure=False)
    def clear_dead_plot(self, plot_index: int) -> bool:
        if self.state.plots[plot_index].state != PlotState.DEAD:
            return False
        self.state.plots[plot_index] = Plot()
        return True

    # --- Ticks ---

    def tick_growth(self, dt_ms: float):
        weather = self.get_weather()

        for plot in self.state.plots:
            if plot.state != PlotState.GROWING or not plot.watered:
                continue

            plot.growth_progress += dt_ms * weather.growth_modifier
            if plot.growth_progress >= plot.growth_total:
                plot.state = PlotState.HARVESTABLE
                plot.growth_progress = plot.growth_total

    def tick_weather(self, dt_ms: float) -> bool:
        self.state.weather.time_remaining -= dt_ms
        if self.state.weather.time_remaining <= 0:
            self.change_weather()
            return True
        return False

    def change_weather(self) -> str:
        old_weather = self.state.weather.current
        new_weather = self.weather_helper.pick_next_weather(old_weather, self.rng)

        self.state.weather.current = new_weather
        self.state.weather.time_remaining = self.weather_helper.roll_duration(self.rng)

        self.logger.log(f"Weather: {old_weather} -> {new_weather} for "
                        f"{TimeHelper.format_time(self.state.weather.time_remaining)}.", "DEBUG")
        return new_weather

    def tick_storm_damage(self) -> List[int]:
        weather = self.get_weather()
        if weather.id != self.STORMY:
            return []

        damaged: List[int] = []
        weathered = 0
        for i, plot in enumerate(self.state.plots):
            if plot.state == PlotState.GROWING and self.rng.random() < weather.damage_chance:
                plot.state = PlotState.DEAD
                damaged.append(i)
            elif plot.is_occupied:
                weathered += 1

        self.state.stats.storms_weathered += weathered
        if damaged or weathered:
            self.check_achievements()
        return damaged

    def tick_drought(self):
        if self.state.weather.current != self.DROUGHT:
            return

        for plot in self.state.plots:
            if plot.state == PlotState.GROWING and plot.watered \
                    and self.rng.random() < self.settings.drought_drain_chance:
                plot.water_level = max(0, plot.water_level - 1)
                if plot.water_level < plot.water_needed:
                    plot.watered = False

    def tick_mutations(self, tick_ms: Optional[float] = None) -> List[MutationEvent]:
        """
        Rolls adjacency mutations for every growing or harvestable plot. Each matching neighbour/recipe
        pair gets one roll; the first success turns the plot into that mutation and ends its evaluation.
        """

        tick_ms = self.settings.tick_ms if tick_ms is None else tick_ms
        plots = self.state.plots
        total_plots = len(plots)
        columns = self.get_grid_columns()
        weather = self.get_weather()
        mutated: List[MutationEvent] = []

        for i, plot in enumerate(plots):
            if not plot.is_occupied or plot.is_mutation:
                continue

            for adj_index in self.mutation_helper.adjacent_indices(i, total_plots, columns):
                neighbour = plots[adj_index]
                if neighbour.state in (PlotState.EMPTY, PlotState.DEAD) or neighbour.is_mutation:
                    continue

                recipe = self._roll_recipes(plot.seed_type, neighbour.seed_type, weather, tick_ms)
                if recipe is not None:
                    self._mutate(i, plot, recipe)
                    mutated.append(MutationEvent(plot_index=i, mutation=recipe))
                    break

        return mutated

    def _roll_recipes(self, species_a, species_b, weather: WeatherType, tick_ms: float):
        for recipe in self.mutation_helper.find_recipes(species_a, species_b):
            chance = self.mutation_helper.tick_chance(recipe, weather.mutation_modifier, tick_ms)
            if self.rng.random() < chance:
                return recipe
        return None

    def _mutate(self, plot_index: int, plot: Plot, recipe):
        plot.is_mutation = True
        plot.mutation_id = recipe.id
        plot.state = PlotState.HARVESTABLE
        plot.rarity = self.plant_helper.at_least(plot.rarity, self.MUTATION_RARITY_FLOOR)

        if recipe.id not in self.state.discovered_mutations:
            self.state.discovered_mutations.append(recipe.id)
            self.state.stats.mutations_found = len(self.state.discovered_mutations)
            self.logger.log(f"Mutation: Discovered {recipe.name} in plot {plot_index + 1}.", "INFO")

        self.check_achievements()

    def tick_auto_water(self) -> int:
        if not self.shop_helper.is_maxed(ShopHelper.WATERING_CAN, self.get_upgrade_level(ShopHelper.WATERING_CAN)):
            return 0

        watered = 0
        for plot in self.state.plots:
            if plot.is_thirsty:
                self._apply_water(plot)
                watered += 1

        if watered:
            self.check_achievements()
        return watered

    # --- Achievements ---

    def check_achievements(self) -> List[Achievement]:
        """Completes and pays out every achievement whose target is now met. Safe to call any number of times."""

        unlocked = self.achievement_helper.check_for_unlocks(self.state.stats, self.state.completed_achievements)
        for achievement in unlocked:
            self.state.completed_achievements.append(achievement.id)
            self.state.coins += achievement.reward
            self.logger.log(f"Achievement: {achievement.name} unlocked (+{achievement.reward} coins).", "INFO")
            self.events.publish(AchievementUnlocked(achievement=achievement))
        return unlocked

    # --- Persistence ---

    def snapshot_for_save(self) -> Dict[str, Any]:
        """Stamps the save time and returns the serializable save record."""

        self.state.last_save_time = self.clock()
        return self.game_state_helper.to_dict(self.state)

    def reset(self) -> GameStateView:
        self.state = self.game_state_helper.create_default_state(self.clock())
        return self.get_state_view()

    def apply_offline_progress(self, now_ms: Optional[int] = None) -> Optional[OfflineReport]:
        """
        One-shot catch-up for the time since the last save, capped at offline_cap_ms. Watered growing
        plots advance by the elapsed time in a single step. Returns None when under offline_min_ms.
        """

        now_ms = self.clock() if now_ms is None else now_ms
        elapsed = min(now_ms - self.state.last_save_time, self.settings.offline_cap_ms)
        if elapsed < self.settings.offline_min_ms:
            return None

        plants_advanced = 0
        plants_ready = 0
        for plot in self.state.plots:
            if plot.state != PlotState.GROWING or not plot.watered:
                continue

            plot.growth_progress += elapsed
            if plot.growth_progress >= plot.growth_total:
                plot.state = PlotState.HARVESTABLE
                plot.growth_progress = plot.growth_total
                plants_ready += 1
            plants_advanced += 1

        self.state.last_save_time = now_ms
        self.logger.log(f"Offline Progress: {TimeHelper.format_time(elapsed)} away, {plants_advanced} plant(s) "
                        f"advanced, {plants_ready} ready.", "INFO")
        return OfflineReport(elapsed_ms=int(elapsed), plants_advanced=plants_advanced, plants_now_ready=plants_ready)
