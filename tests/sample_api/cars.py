from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from routedoc.metadata.annotations import ApiInfo, api_operation, api_param
from sample_api.models import Car

__api__ = ApiInfo(value="cars", path="/cars", description="Car fleet")

router = APIRouter(prefix="/cars")


class CarUpdate(BaseModel):
    colour: str


def get_db() -> dict:
    return {}


@router.get("", response_model=None)
@api_operation(notes="Lists every car")
def list_cars(
    colour: Optional[str] = Query(None, description="Filter by colour"),
    db: dict = Depends(get_db),
) -> List[Car]:
    return []


@router.get("/{car_id}", response_model=None)
@api_operation("Find a car by id", notes="404 when missing")
@api_param("car_id", "Car identifier")
def get_car(car_id: int) -> Car:
    return Car()


@router.put("/{car_id}", response_model=None)
@api_operation("Update a car")
def update_car(car_id: int, update: CarUpdate) -> Car:
    return Car()


@router.delete("/{car_id}")
@api_operation("##HIDDEN##")
def delete_car(car_id: int) -> None:
    return None
