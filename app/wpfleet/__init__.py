"""wpfleet: glue scripts between MainWP, Virtualmin, GitLab and Notion."""
from .version import __version__

__all__ = ["__version__"]
