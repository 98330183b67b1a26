# encoding: utf-8


class ConfigScriptsException(Exception):
    pass


class ConfigScriptsConfigurationException(ConfigScriptsException):
    pass


class NotFound(ConfigScriptsException):
    '''Raised when a script, its class or its file cannot be located.

    Nothing has been changed in the database when this is raised.
    '''
    pass


class ScriptNotFound(NotFound):
    pass


class NothingToRollback(NotFound):
    pass


class ScriptExecutionError(ConfigScriptsException):
    '''Raised by :py:meth:`~config_scripts.scripts.Script.run` when the
    ``apply`` or ``revert`` step of a script fails.

    The transaction has already been rolled back and the script history is
    untouched. The original exception is available as ``__cause__``.
    '''

    def __init__(self, script, direction, error):
        self.script = script
        self.direction = direction
        self.error = error
        super(ScriptExecutionError, self).__init__(
            u'Error running script for {}: {}'.format(
                type(script).__name__, error))


class SeedPersistenceError(ConfigScriptsException):

    def __init__(self, filename, error):
        self.filename = filename
        self.error = error
        super(SeedPersistenceError, self).__init__(
            u'Error saving seed from {}: {}'.format(filename, error))


class SeedSetCollision(ConfigScriptsConfigurationException):
    pass
