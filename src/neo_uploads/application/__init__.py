"""Application layer for neo-uploads.

Provides:
- Upload definitions (versions, transforms, naming, storage selection)
- Store and delete commands
- URL and file data queries
- MIME type validation
- The Uploader facade
"""

from .definition import Definition
from .commands import *
from .queries import *
from .services import *
from .validators import *
from .uploader import Uploader, create_uploader
