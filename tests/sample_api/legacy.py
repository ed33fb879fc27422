from starlette.endpoints import HTTPEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse


class LegacyPing(HTTPEndpoint):
    async def get(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("pong")

    async def delete(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("")

    async def post(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("pong")

    async def put(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("")
