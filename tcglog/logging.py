from logging import *

# Level between DEBUG and INFO, used for per-event decoding details.
VERBOSE = DEBUG + 5


def logForLevel(self, message, *args, **kwargs):
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


def logToRoot(message, *args, **kwargs):
    log(VERBOSE, message, *args, **kwargs)


addLevelName(VERBOSE, 'VERBOSE')
setattr(getLoggerClass(), 'verbose', logForLevel)
verbose = logToRoot
