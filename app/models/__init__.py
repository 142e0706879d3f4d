# Smart Bin Telemetry — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.raw_event import RawEvent   # noqa
from app.models.bin_event import BinEvent   # noqa
