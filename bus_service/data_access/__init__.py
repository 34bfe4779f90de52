# This file makes the 'data_access' directory a Python package.
# It also makes it easier to import repositories from other modules.

from .bus_repository import bus_repo
from .staff_repository import staff_repo
