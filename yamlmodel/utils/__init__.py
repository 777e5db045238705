from . import isodate
from . import path
from .path import Mark, Path

__all__ = ['isodate', 'path', 'Mark', 'Path', 'NOT_PROVIDED']


class NOT_PROVIDED:
    def __str__(self):
        return 'No default provided.'
