"""
Where the user is in the app: the base picked on the home page and the base,
table and view currently open.

The context lives in the session. It starts empty when a user logs in and is
dropped when they log out (see ``signals``); views read and write it explicitly
instead of keeping it in a module-level global.
"""
import logging

logger = logging.getLogger(__name__)

SESSION_KEY = '_dynamic_grid_navigation'


class NavigationContext(object):

    fields = ('selected_base_id', 'base_id', 'table_id', 'view_id')

    def __init__(self, selected_base_id=None, base_id=None, table_id=None, view_id=None):
        self.selected_base_id = selected_base_id
        self.base_id = base_id
        self.table_id = table_id
        self.view_id = view_id

    @classmethod
    def load(cls, session):
        data = session.get(SESSION_KEY) or {}
        return cls(**{name: data.get(name) for name in cls.fields})

    @classmethod
    def init(cls, session):
        context = cls()
        context.save(session)
        return context

    @classmethod
    def clear(cls, session):
        session.pop(SESSION_KEY, None)

    def save(self, session):
        session[SESSION_KEY] = self.as_dict()

    def as_dict(self):
        return {name: getattr(self, name) for name in self.fields}

    def select_base(self, base_id):
        logger.debug('Selecting base %s', base_id)
        self.selected_base_id = base_id

    def set_navigation(self, table_id, view_id, base_id):
        self.table_id = table_id
        self.view_id = view_id
        self.base_id = base_id

    def __eq__(self, other):
        return isinstance(other, NavigationContext) and self.as_dict() == other.as_dict()

    def __repr__(self):
        return 'NavigationContext(%r)' % self.as_dict()
