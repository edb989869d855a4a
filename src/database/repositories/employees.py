"""Employee repository (owner-scoped)."""

import logging

from .base import OwnedRepository
from ..models import EmployeeDB

logger = logging.getLogger(__name__)


class EmployeeRepository(OwnedRepository[EmployeeDB]):
    """Repository for the caller's employees."""

    model = EmployeeDB
    entity_name = "Employee"
