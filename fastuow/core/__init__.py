from .errors import FastUoWConfigError, FastUoWError, OperationFailure  # noqa
from .models import (  # noqa
    AbstractRepository,
    AbstractSession,
    AbstractSessionFactory,
    AbstractTransaction,
    AbstractUnitOfWork,
    Entity,
    EntityReposMap,
)
