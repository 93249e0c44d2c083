"""Version information for httpscript."""

__version__ = "0.1.0"
__author__ = "httpscript contributors"
__email__ = "httpscript@example.com"
__license__ = "MIT"
