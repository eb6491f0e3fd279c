# We use RsT document formatting in docstring. For example :param to mark parameters.
# See PEP 287
__docformat__ = "restructuredtext"
import logging

# Accept stylus_activator.VERSION to get the current version number
from .__version__ import __version__ as VERSION  # NOQA

log = logging.getLogger(__name__)
