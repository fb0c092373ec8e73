from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .employee import Employee  # noqa: E402,F401
from .event import Event  # noqa: E402,F401
from .restaurant import Restaurant  # noqa: E402,F401
from .role import Role  # noqa: E402,F401
from .schedule import Schedule, ScheduledShift  # noqa: E402,F401
from .shift import ShiftTemplate  # noqa: E402,F401
