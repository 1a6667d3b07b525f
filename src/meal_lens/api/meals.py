"""Meal history endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from meal_lens.api.schemas import MacrosOut, MealListOut, MealOut
from meal_lens.services.totals import aggregate

if TYPE_CHECKING:
    from meal_lens.containers import AppContainer

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("")
async def list_meals(request: Request) -> MealListOut:
    """Return meals newest first with their combined totals."""
    container: AppContainer = request.app.state.container
    meals = container.meal_store.list_meals()
    return MealListOut(
        meals=[MealOut.from_domain(meal) for meal in meals],
        totals=MacrosOut.from_domain(aggregate(meals)),
    )


@router.get("/totals")
async def meal_totals(request: Request) -> MacrosOut:
    """Return the combined macros of all meals."""
    container: AppContainer = request.app.state.container
    return MacrosOut.from_domain(aggregate(container.meal_store.list_meals()))


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal_id: str, request: Request) -> Response:
    """Delete a meal; unknown ids are ignored."""
    container: AppContainer = request.app.state.container
    container.meal_store.delete(meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
