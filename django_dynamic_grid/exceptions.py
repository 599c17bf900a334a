class GridError(Exception):
    "Base class for every error raised by django_dynamic_grid."


class DuplicateNameError(GridError):
    """
    A column with the same name (compared case-insensitively) already exists
    in the table.
    """

    def __init__(self, name):
        self.name = name
        super(DuplicateNameError, self).__init__(
            'A column with the name "%s" already exists. Please choose a different name.' % name
        )


class ValidationError(GridError):
    "Input rejected before anything was changed, e.g. text in a Number column."


class PersistenceError(GridError):
    """
    A create/update/delete call against the entity store failed.

    ``operation`` names the failed call, ``cause`` keeps the original exception
    when there is one.
    """

    def __init__(self, operation, cause=None):
        self.operation = operation
        self.cause = cause
        message = '%s failed' % operation
        if cause is not None:
            message = '%s: %s' % (message, cause)
        super(PersistenceError, self).__init__(message)
