"""
API endpoints package
"""

from . import health
from . import jobs
from . import retry
