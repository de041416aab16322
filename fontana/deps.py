import httpx
from fastapi import Depends, Request

from .infrastructure.http_gateways import HttpxAvailabilityGateway, HttpxReservationGateway


async def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


async def get_availability_gateway(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> HttpxAvailabilityGateway:
    return HttpxAvailabilityGateway(client)


async def get_reservation_gateway(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> HttpxReservationGateway:
    return HttpxReservationGateway(client)
