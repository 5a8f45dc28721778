# ruff: noqa: F403
from .base import *
from .celery import *
from .email import *
from .ninja import *
from .observability import *
from .ticketing import *
