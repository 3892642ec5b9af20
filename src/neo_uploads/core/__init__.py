"""Core domain for neo-uploads.

Entities, value objects, protocols and exceptions shared by the application
and infrastructure layers. Nothing here performs I/O.
"""

from .entities import *
from .value_objects import *
from .protocols import *
from .exceptions import *
