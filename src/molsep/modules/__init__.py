"""Pipeline modules for different processing stages."""

from . import biconnected
from . import assignment
from . import separation
from . import reconstruction
from . import graph_io
from . import statistics
