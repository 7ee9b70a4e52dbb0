import functools
from typing import Any, Callable


def valid_plot(failure: Any = None):
    """
    A decorator for Garden actions whose first argument is a plot index.
    Returns `failure` instead of calling the action when the index does not name an existing plot.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, plot_index, *args, **kwargs):
            if isinstance(plot_index, bool) or not isinstance(plot_index, int):
                return failure
            if not (0 <= plot_index < len(self.state.plots)):
                return failure
            return func(self, plot_index, *args, **kwargs)

        return wrapper

    return decorator


def checks_achievements(func: Callable) -> Callable:
    """
    A decorator for Garden actions that touch stats. Runs the achievement check after the action
    whenever it reports success (any truthy result).
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        result = func(self, *args, **kwargs)
        if result:
            self.check_achievements()
        return result

    return wrapper
