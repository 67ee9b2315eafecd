from fastapi import APIRouter
from app.api.endpoints import aurora, space_weather, cities

api_router = APIRouter()


@api_router.get("/hello", tags=["meta"])
def hello():
    return {"message": "Hello from Borealis Hub API"}


api_router.include_router(aurora.router, prefix="/aurora", tags=["aurora"])
api_router.include_router(space_weather.router, prefix="/spaceweather", tags=["space-weather"])
api_router.include_router(cities.router, prefix="/cities", tags=["cities"])
