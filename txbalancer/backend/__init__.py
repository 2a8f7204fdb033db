# flake8: noqa

from .base import *
