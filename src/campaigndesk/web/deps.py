from typing import Annotated, cast

from fastapi import Depends, Request

from campaigndesk.app import App


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


AppDep = Annotated[App, Depends(get_app)]
