"""Pydantic schemas for request/response validation."""

from .availability import *  # noqa: F403
from .booking import *  # noqa: F403
from .common import *  # noqa: F403
from .content import *  # noqa: F403
from .crm import *  # noqa: F403
from .dashboard import *  # noqa: F403
from .event import *  # noqa: F403
from .health import *  # noqa: F403
from .package import *  # noqa: F403
from .payment import *  # noqa: F403
from .review import *  # noqa: F403
from .user import *  # noqa: F403
