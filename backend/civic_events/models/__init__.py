"""Import every model so ``Base.metadata`` knows all tables."""
from civic_events.models.active_area import ActiveArea, ActiveAreaTag  # noqa: F401
from civic_events.models.user import User, UserRole  # noqa: F401
from civic_events.models.event import Event, EventCategory, EventProgress, EventStatus  # noqa: F401
from civic_events.models.event_image import EventImage  # noqa: F401
from civic_events.models.event_checkin import EventCheckin  # noqa: F401
from civic_events.models.event_sdg import EventSdg, Sdg  # noqa: F401
from civic_events.models.event_point_exchange import EventPointExchange  # noqa: F401
from civic_events.models.activity_log import ActivityLog  # noqa: F401
from civic_events.models.qr_code import QrCode  # noqa: F401
from civic_events.models.dashboard_event import DashboardEvent  # noqa: F401
from civic_events.models.transaction import Transaction  # noqa: F401
