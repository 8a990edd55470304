"""SQLAlchemy models for ProHost.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from prohost.models.booking import Booking
from prohost.models.tenant import Tenant

__all__ = [
    "Booking",
    "Tenant",
]
