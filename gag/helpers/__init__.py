from .time_helper import TimeHelper
from .logging_helper import LoggingHelper
from .data_helper import DataHelper
from .plant_helper import PlantHelper
from .weather_helper import WeatherHelper
from .mutation_helper import MutationHelper
from .sales_helper import SalesHelper
from .shop_helper import ShopHelper
from .achievement_helper import AchievementHelper
from .event_helper import EventHelper, GardenObserver
from .game_state_helper import GameStateHelper
from .storage_helper import StorageHelper, MemoryStorage, FileStorage
from .profile_helper import ProfileHelper
