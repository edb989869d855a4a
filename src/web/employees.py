"""
Employee routes. All operations are scoped to the authenticated user.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..models import EmployeeCreate, EmployeeResponse, EmployeeUpdate, MessageResponse
from ..services import EmployeeService
from .dependencies import get_employee_service

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(service: EmployeeService = Depends(get_employee_service)):
    """Caller's employees, newest first."""
    return await service.list()


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    payload: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),
):
    return await service.create(payload.model_dump())


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
):
    """Apply the fields present in the body."""
    return await service.update(employee_id, payload.model_dump(exclude_unset=True))


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
):
    """Delete an employee. Refused while tasks are assigned to them."""
    await service.delete(employee_id)
    return MessageResponse(message="Employee deleted")
