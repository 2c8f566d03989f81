class HarvesterError(Exception):
    """Base class for errors raised by job-harvester."""


class BrowsingContextLost(HarvesterError):
    """The page a session runs in was closed or detached; the crawl cannot continue."""
