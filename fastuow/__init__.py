"""FastUoW - session-scoped unit of work on top of SqlAlchemy."""
from .config import FastUoW  # noqa
from .core import FastUoWError, OperationFailure  # noqa
from .domain import Event  # noqa
from .orm import SessionFactory, init_db  # noqa
from .uow import SqlAlchemyUnitOfWork  # noqa
