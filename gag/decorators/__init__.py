from .checks import valid_plot, checks_achievements
